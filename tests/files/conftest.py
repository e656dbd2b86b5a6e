import pytest


@pytest.fixture(autouse=True)
def files_context(_domains):
    """Push the files domain context around each test."""
    from files.domain import files

    ctx = files.domain_context()
    ctx.push()

    yield

    ctx.pop()
