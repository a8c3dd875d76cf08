from dataclasses import dataclass
from typing import Optional, Union

from app.domains.auth.models import Session
from app.domains.parents.models import Identity


@dataclass
class OtpRecord:
    code: str
    created_at: float
    expires_at: float
    attempts: int = 0


@dataclass
class RateLimitRecord:
    last_issued_at: float


@dataclass(frozen=True)
class Delivered:
    delivery_id: str


@dataclass(frozen=True)
class Fallback:
    code: str


@dataclass(frozen=True)
class Failed:
    reason: str
    code: str


DeliveryMode = Union[Delivered, Fallback, Failed]


@dataclass
class IssueResult:
    mobile: str
    expires_at: float
    delivery: DeliveryMode

    @property
    def delivered(self) -> bool:
        return isinstance(self.delivery, Delivered)

    @property
    def code(self) -> Optional[str]:
        """Plaintext OTP, only exposed when the SMS was not delivered."""
        if isinstance(self.delivery, (Fallback, Failed)):
            return self.delivery.code
        return None


@dataclass
class VerifyResult:
    identity: Identity
    session: Session
