from protean.utils.globals import current_domain

from identity.user.user import User, UserStatus
from shared.pagination import Page, paginate


def list_users(limit: int, cursor: str | None = None) -> Page:
    """Page through accounts that have not been removed."""
    queryset = current_domain.repository_for(User)._dao.query.exclude(status=UserStatus.INACTIVE.value)
    return paginate(queryset, limit, cursor)
