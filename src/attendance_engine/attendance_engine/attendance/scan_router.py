from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Union

from ..common.validators import require_non_empty
from ..core.exceptions import UnknownCardError
from ..pairing.manager import PairingSessionManager
from ..pairing.model import PairingConsumed, PairingOutcome
from ..pairing.repository import CardBindingRepository
from .model import AttendanceOutcome
from .service import AttendanceService

logger = logging.getLogger(__name__)

ScanOutcome = Union[PairingOutcome, AttendanceOutcome]


class ScanRouter:
    """Routes a hardware card scan to pairing or to attendance, never both."""

    def __init__(
        self,
        pairing: PairingSessionManager,
        cards: CardBindingRepository,
        attendance: AttendanceService,
    ):
        self._pairing = pairing
        self._cards = cards
        self._attendance = attendance

    def handle_scan(self, card_id: str, *, at: Optional[datetime] = None) -> ScanOutcome:
        card_id = require_non_empty(card_id, "Card id")

        decision = self._pairing.on_card_scanned(card_id)
        if isinstance(decision, PairingConsumed):
            return decision.outcome

        user_id = self._cards.get_user_id(decision.card_id)
        if user_id is None:
            logger.info("Scan from unregistered card %s", card_id)
            raise UnknownCardError("Card is not registered")

        return self._attendance.record_arrival(user_id, at=at)
