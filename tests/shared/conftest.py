import pytest


@pytest.fixture(autouse=True)
def catalogue_context(_domains):
    """Pagination is exercised against the catalogue's categories."""
    from catalogue.domain import catalogue

    ctx = catalogue.domain_context()
    ctx.push()

    yield

    ctx.pop()
