"""Single-slot card pairing session.

The scanner hardware reports only a card id, with no notion of which user
asked to pair, so at most one pairing may be in flight organization-wide.
The slot is mutated from user requests and from hardware callbacks; every
read and write of it, including expiry, happens under one lock.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import Clock, SystemClock
from ..core.constants import PAIRING_TIMEOUT_SECONDS
from ..core.enums import PairingState
from ..core.exceptions import ConflictError, InvalidSessionError
from .model import (
    AttendanceEvent,
    PairingConsumed,
    PairingOutcome,
    PairingSession,
    PairingStatus,
    ScanDecision,
)
from .repository import CardBindingRepository

logger = logging.getLogger(__name__)


class PairingSessionManager:
    def __init__(
        self,
        cards: CardBindingRepository,
        *,
        clock: Clock | None = None,
        timeout_seconds: int = PAIRING_TIMEOUT_SECONDS,
    ):
        self._cards = cards
        self._clock = clock or SystemClock()
        self._timeout = timedelta(seconds=int(timeout_seconds))
        self._lock = threading.Lock()
        self._session: Optional[PairingSession] = None

    def _live_session(self, now: datetime) -> Optional[PairingSession]:
        # Caller holds the lock.
        session = self._session
        if session is not None and not session.is_live(now):
            logger.info("Pairing session of user %s expired", session.owner_user_id)
            self._session = None
            return None
        return session

    @staticmethod
    def _status_of(session: PairingSession) -> PairingStatus:
        return PairingStatus(
            state=session.state,
            paired_card_id=session.paired_card_id,
            expires_at=session.expires_at,
        )

    def start(self, user_id: int) -> PairingStatus:
        with self._lock:
            now = self._clock.now()
            session = self._live_session(now)
            if session is not None:
                if session.owner_user_id == int(user_id):
                    return self._status_of(session)
                raise ConflictError("Another pairing is in progress")

            session = PairingSession(
                owner_user_id=int(user_id),
                state=PairingState.WAITING,
                expires_at=now + self._timeout,
            )
            self._session = session
            logger.info("Pairing started by user %s", user_id)
            return self._status_of(session)

    def status(self, user_id: int) -> PairingStatus:
        with self._lock:
            session = self._live_session(self._clock.now())
            if session is None or session.owner_user_id != int(user_id):
                return PairingStatus.idle()
            return self._status_of(session)

    def on_card_scanned(self, card_id: str) -> ScanDecision:
        with self._lock:
            session = self._live_session(self._clock.now())
            if session is None or session.state != PairingState.WAITING:
                return AttendanceEvent(card_id=card_id)

            if self._cards.is_bound(card_id):
                logger.info("Pairing scan rejected, card %s already bound", card_id)
                return PairingConsumed(
                    PairingOutcome(accepted=False, card_id=card_id, message="Card is already in use")
                )

            self._session = replace(session, state=PairingState.SCANNED, paired_card_id=card_id)
            logger.info("Card %s held for pairing with user %s", card_id, session.owner_user_id)
            return PairingConsumed(
                PairingOutcome(accepted=True, card_id=card_id, message="Card held for registration")
            )

    def confirm(self, user_id: int) -> str:
        with self._lock:
            now = self._clock.now()
            session = self._live_session(now)
            if (
                session is None
                or session.owner_user_id != int(user_id)
                or session.state != PairingState.SCANNED
                or not session.paired_card_id
            ):
                raise InvalidSessionError("Pairing session is invalid")

            # A failed bind leaves the session in place for a retry.
            self._cards.bind(card_id=session.paired_card_id, user_id=int(user_id), bound_at=now)
            self._session = None
            logger.info("Card %s bound to user %s", session.paired_card_id, user_id)
            return session.paired_card_id

    def cancel(self, user_id: int) -> None:
        with self._lock:
            session = self._live_session(self._clock.now())
            if session is None or session.owner_user_id != int(user_id):
                raise InvalidSessionError("No pairing session to cancel")
            self._session = None
            logger.info("Pairing cancelled by user %s", user_id)
