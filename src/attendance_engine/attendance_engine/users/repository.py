from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Read-only user directory consumed by the engine."""

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def list_active_ids(self, organization_id: int) -> Sequence[int]:
        raise NotImplementedError

    def list_organization_ids(self) -> Sequence[int]:
        raise NotImplementedError
