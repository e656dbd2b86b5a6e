import pytest


@pytest.fixture(autouse=True)
def notifications_context(_domains):
    """Push the notifications domain context around each test."""
    from notifications.domain import notifications

    ctx = notifications.domain_context()
    ctx.push()

    yield

    ctx.pop()
