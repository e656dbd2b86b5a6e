import pytest


@pytest.fixture(autouse=True)
def catalogue_context(_domains):
    """Push the catalogue domain context around each test."""
    from catalogue.domain import catalogue

    ctx = catalogue.domain_context()
    ctx.push()

    yield

    ctx.pop()
