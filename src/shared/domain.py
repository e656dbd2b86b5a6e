"""Protean domain wiring shared by every bounded context.

Each context owns a ``Domain``; all of them persist into the one database
named by ``DATABASE_URL``. The connection is taken from ``shared.config``
rather than a ``domain.toml`` so a single environment variable drives every
context.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

from shared.config import Settings, get_settings

RDBMS_PROVIDERS = ("sqlite", "postgresql")


def provider_for(database_url: str) -> str:
    scheme = database_url.split(":", 1)[0].split("+", 1)[0]
    if scheme in ("postgres", "postgresql"):
        return "postgresql"
    if scheme == "sqlite":
        return "sqlite"
    raise ValueError(f"Unsupported database URL scheme: {scheme}")


def configure_domain(domain: Domain, settings: Settings | None = None) -> None:
    """Point the domain's default provider at the application database."""
    settings = settings or get_settings()
    domain.config["databases"]["default"] = {
        "provider": provider_for(settings.database_url),
        "database_uri": settings.database_url,
    }


_initialized: set[str] = set()


def init_domain(domain: Domain, settings: Settings | None = None) -> Domain:
    """Configure and initialize a domain once per process."""
    if domain.name not in _initialized:
        configure_domain(domain, settings)
        domain.init()
        _initialized.add(domain.name)
    return domain


def setup_db(domain: Domain):
    """Create the tables of every aggregate and entity the domain registers."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in RDBMS_PROVIDERS:
                engine = create_engine(provider.conn_info["database_uri"])

                # Touching the DAO registers the element's model with SQLAlchemy
                for _, aggregate_record in domain.registry.aggregates.items():
                    if aggregate_record.cls.meta_.provider == provider.name:
                        domain.repository_for(aggregate_record.cls)._dao  # noqa: B018

                for _, entity_record in domain.registry.entities.items():
                    if entity_record.cls.meta_.provider == provider.name:
                        domain.repository_for(entity_record.cls)._dao  # noqa: B018

                provider._metadata.create_all(engine)
                engine.dispose()


def drop_db(domain: Domain):
    """Drop the domain's tables."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in RDBMS_PROVIDERS:
                engine = create_engine(provider.conn_info["database_uri"])
                provider._metadata.drop_all(engine)
                engine.dispose()


def reset_data(domain: Domain):
    """Delete every row the domain owns, keeping the schema."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            provider._data_reset()
