import pytest


@pytest.fixture(autouse=True)
def identity_context(_domains):
    """Push the identity domain context around each test."""
    from identity.domain import identity

    ctx = identity.domain_context()
    ctx.push()

    yield

    ctx.pop()
