"""Account lookups for the other bounded contexts.

Each call enters the identity domain context itself, so callers running
inside ordering, payments or notifications need no knowledge of it.
"""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from identity.domain import identity
from identity.user.user import User


@dataclass(frozen=True)
class Contact:
    user_id: str
    email: str
    name: str
    status: str
    role: str


def find_contact(user_id: str) -> Contact | None:
    with identity.domain_context():
        user = current_domain.repository_for(User)._dao.query.filter(id=str(user_id)).all().first
        if user is None:
            return None
        return Contact(user_id=str(user.id), email=user.email, name=user.name, status=user.status, role=user.role)
