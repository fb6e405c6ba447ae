from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol


class CardBindingRepository(Protocol):
    def get_user_id(self, card_id: str) -> Optional[int]:
        raise NotImplementedError

    def is_bound(self, card_id: str) -> bool:
        raise NotImplementedError

    def bind(self, *, card_id: str, user_id: int, bound_at: datetime) -> None:
        """Bind card to user, replacing the user's previous card.

        Raises ConflictError when the card belongs to someone else.
        """

        raise NotImplementedError
