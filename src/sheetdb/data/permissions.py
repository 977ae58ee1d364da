"""Sheet-level read permissions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Tuple


@dataclass(frozen=True)
class Principal:
    """The caller of a request. ``user_id`` is None for anonymous callers."""

    user_id: str | None = None
    roles: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "roles", tuple(self.roles))

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


ANONYMOUS = Principal()

AUTHENTICATION_REQUIRED = "Authentication required for this sheet"
READ_DENIED = "No read permission for this sheet"


@dataclass(frozen=True)
class PermissionDecision:
    allowed: bool
    error: str | None = None


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def check_sheet_read_permission(principal: Principal, metadata: Mapping[str, Any]) -> PermissionDecision:
    """Decide whether ``principal`` may read a sheet.

    Public sheets are readable by anyone. Otherwise the caller must be
    authenticated and listed in ``user_read``, or hold a role listed in
    ``role_read``.
    """
    if metadata.get("public_read") is True:
        return PermissionDecision(True)
    if not principal.is_authenticated:
        return PermissionDecision(False, AUTHENTICATION_REQUIRED)
    if principal.user_id in _as_list(metadata.get("user_read")):
        return PermissionDecision(True)
    role_read = _as_list(metadata.get("role_read"))
    if any(role in role_read for role in principal.roles):
        return PermissionDecision(True)
    return PermissionDecision(False, READ_DENIED)
