from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    PUBLISHER = "publisher"
    APPLICANT = "applicant"
    APPROVER = "approver"


class UnauthenticatedError(Exception):
    """Raised when an operation requires an identity and none was resolved."""


@dataclass(slots=True, frozen=True)
class Principal:
    user_id: int
    email: str
    role: Role


def authorize(principal: Principal | None, allowed_roles: Collection[Role]) -> Principal:
    """Admit ``principal`` when its role is one of ``allowed_roles``.

    Raises UnauthenticatedError when no principal was resolved and
    PermissionError when the role is not allowed. Ownership of a specific job
    or application is checked by the lifecycle managers, not here.
    """
    if principal is None:
        raise UnauthenticatedError("not authenticated")
    if principal.role not in allowed_roles:
        raise PermissionError("insufficient permissions")
    return principal
