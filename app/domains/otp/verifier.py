import hmac
import logging
import time

from app.domains.auth.jwt_service import JWTService
from app.domains.otp.errors import (
    IdentityNotFound,
    OtpExpired,
    OtpMismatch,
    OtpNotFound,
    TooManyAttempts,
    ValidationError,
)
from app.domains.otp.models import VerifyResult
from app.domains.parents.service import IdentityStore
from app.shared.kv_store import KeyedLocks, KeyValueStore
from app.shared.phone_utils import mask_phone

logger = logging.getLogger(__name__)


class OTPVerifier:
    def __init__(
        self,
        otp_store: KeyValueStore,
        identity_store: IdentityStore,
        jwt_service: JWTService,
        locks: KeyedLocks,
        clock=time.time,
        max_attempts: int = 3,
    ):
        self.otp_store = otp_store
        self.identity_store = identity_store
        self.jwt_service = jwt_service
        self.locks = locks
        self.clock = clock
        self.max_attempts = max_attempts

    def verify(self, mobile: str, submitted_code: str) -> VerifyResult:
        """
        Check a submitted code against the pending OTP and log the parent in.

        The checks run in a fixed order: existence, expiry, attempt limit, then
        the code itself, so a correct code is still rejected once the OTP has
        expired or its attempts are used up. Whenever verification ends the
        OTP's life (success, expiry, exhaustion) the record is deleted.

        Args:
            mobile (str): The parent's mobile number.
            submitted_code (str): The OTP typed by the user.

        Returns:
            VerifyResult: The parent's identity and a freshly minted session.
        """
        if not mobile or not submitted_code:
            raise ValidationError("mobile and otp are required", message_code="MISSING_FIELDS")

        with self.locks.lock(mobile):
            record = self.otp_store.get(mobile)
            if record is None:
                raise OtpNotFound()

            if self.clock() > record.expires_at:
                self.otp_store.delete(mobile)
                logger.info("Expired OTP submitted for %s", mask_phone(mobile))
                raise OtpExpired()

            if record.attempts >= self.max_attempts:
                self.otp_store.delete(mobile)
                raise TooManyAttempts()

            if not hmac.compare_digest(str(submitted_code).encode(), record.code.encode()):
                record.attempts += 1
                remaining = self.max_attempts - record.attempts
                if remaining <= 0:
                    self.otp_store.delete(mobile)
                    logger.warning("OTP attempts exhausted for %s", mask_phone(mobile))
                    raise TooManyAttempts()
                # write back so stores that hand out copies see the new count
                self.otp_store.set(mobile, record)
                raise OtpMismatch(attempts=record.attempts, attempts_remaining=remaining)

            self.otp_store.delete(mobile)

        identity = self.identity_store.lookup(mobile)
        if identity is None:
            logger.info("OTP verified for unregistered number %s", mask_phone(mobile))
            raise IdentityNotFound()

        session = self.jwt_service.create_session(mobile)
        logger.info("Login successful for %s", mask_phone(mobile))
        return VerifyResult(identity=identity, session=session)
