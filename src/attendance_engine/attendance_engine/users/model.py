from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an organization member whose attendance is tracked.

    Plain data object; credentials live with the external auth service.
    """

    user_id: int
    organization_id: int
    full_name: str
    role: Role = Role.STUDENT
    is_active: bool = True
