from dataclasses import dataclass


@dataclass(frozen=True)
class Session:
    token: str
    mobile: str
    jti: str
    issued_at: float
    expires_at: float
