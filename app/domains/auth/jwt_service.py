import logging
import time
import uuid
from typing import Optional

import jwt

from app.domains.auth.models import Session
from app.shared.kv_store import InMemoryStore, KeyValueStore
from app.shared.phone_utils import mask_phone

logger = logging.getLogger(__name__)


class JWTService:
    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        session_ttl_minutes: int = 60 * 24,
        revoked: Optional[KeyValueStore] = None,
        clock=time.time,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.session_ttl_seconds = session_ttl_minutes * 60
        # jti -> token expiry, entries are dropped once the token would have expired anyway
        self.revoked = revoked if revoked is not None else InMemoryStore()
        self.clock = clock

    def create_session(self, mobile: str) -> Session:
        """Mint a signed session token bound to a parent's mobile number."""
        issued_at = int(self.clock())
        expires_at = issued_at + self.session_ttl_seconds
        jti = uuid.uuid4().hex

        to_encode = {
            "sub": mobile,
            "jti": jti,
            "iat": issued_at,
            "exp": expires_at,
        }
        token = jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)
        return Session(token=token, mobile=mobile, jti=jti, issued_at=issued_at, expires_at=expires_at)

    def _decode(self, token: str) -> Optional[dict]:
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "require": ["sub", "jti", "exp"]},
            )
        except jwt.PyJWTError:
            return None

    def verify_token(self, token: str) -> Optional[str]:
        """Verify a session token and return the mobile number if it is valid, unexpired and not revoked."""
        payload = self._decode(token)
        if payload is None:
            return None
        # Expiry is checked against our own clock so it can be controlled in tests.
        if self.clock() >= payload["exp"]:
            return None
        if self.revoked.get(payload["jti"]) is not None:
            return None
        return payload["sub"]

    def revoke(self, token: str) -> bool:
        payload = self._decode(token)
        if payload is None:
            return False
        now = self.clock()
        for jti in self.revoked.keys():
            expires_at = self.revoked.get(jti)
            if expires_at is not None and expires_at <= now:
                self.revoked.delete(jti)
        self.revoked.set(payload["jti"], payload["exp"])
        logger.info("Session revoked for %s", mask_phone(payload["sub"]))
        return True
