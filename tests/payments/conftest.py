import pytest


@pytest.fixture(autouse=True)
def ordering_context(_domains):
    """Payments keeps no aggregates; its use cases run against ordering."""
    from ordering.domain import ordering

    ctx = ordering.domain_context()
    ctx.push()

    yield

    ctx.pop()
