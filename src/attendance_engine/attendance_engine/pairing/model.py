from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from ..core.enums import PairingState


@dataclass(frozen=True)
class PairingSession:
    """The single in-flight card pairing handshake."""

    owner_user_id: int
    state: PairingState
    expires_at: datetime
    paired_card_id: Optional[str] = None

    def is_live(self, now: datetime) -> bool:
        return now < self.expires_at


@dataclass(frozen=True)
class PairingStatus:
    state: PairingState
    paired_card_id: Optional[str] = None
    expires_at: Optional[datetime] = None

    @classmethod
    def idle(cls) -> "PairingStatus":
        return cls(state=PairingState.IDLE)


@dataclass(frozen=True)
class PairingOutcome:
    """What a hardware scan did to the pairing session."""

    accepted: bool
    card_id: str
    message: str
    kind: str = "pairing"


@dataclass(frozen=True)
class PairingConsumed:
    """The scan belonged to the pairing session and must not count as attendance."""

    outcome: PairingOutcome


@dataclass(frozen=True)
class AttendanceEvent:
    """No pairing was waiting; the scan is a normal attendance tap."""

    card_id: str


ScanDecision = Union[PairingConsumed, AttendanceEvent]
