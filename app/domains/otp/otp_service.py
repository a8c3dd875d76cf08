import time

from app.domains.auth.jwt_service import JWTService
from app.domains.otp.issuer import OTPIssuer
from app.domains.otp.models import IssueResult, VerifyResult
from app.domains.otp.verifier import OTPVerifier
from app.domains.parents.service import IdentityStore
from app.shared.kv_store import InMemoryStore, KeyedLocks
from app.shared.sms_service import SMSDelivery


class OTPService:
    def __init__(
        self,
        delivery: SMSDelivery,
        identity_store: IdentityStore,
        jwt_service: JWTService,
        otp_store=None,
        rate_limit_store=None,
        clock=time.time,
        rng=None,
        expiry_seconds: int = 300,
        max_attempts: int = 3,
        resend_interval_seconds: int = 120,
        rate_limit_max_keys: int = 1000,
        code_min: int = 100000,
        code_max: int = 999999,
    ):
        """
        Initialize OTP Service.

        Args:
            delivery (SMSDelivery): Sends the OTP text, or falls back to demo mode.
            identity_store (IdentityStore): Parent records looked up after a successful verification.
            jwt_service (JWTService): Mints the session handed back on login.
            otp_store: Pending OTPs keyed by mobile number. Defaults to an in-memory store.
            rate_limit_store: Last issuance times keyed by mobile number. Defaults to an
                in-memory store; kept within ``rate_limit_max_keys`` entries.
            expiry_seconds (int): OTP validity duration in seconds. Default is 5 minutes.
        """
        self.otp_store = otp_store if otp_store is not None else InMemoryStore()
        self.rate_limit_store = rate_limit_store if rate_limit_store is not None else InMemoryStore()
        self.locks = KeyedLocks()
        self.issuer = OTPIssuer(
            self.otp_store,
            self.rate_limit_store,
            delivery,
            self.locks,
            clock=clock,
            rng=rng,
            ttl_seconds=expiry_seconds,
            resend_interval_seconds=resend_interval_seconds,
            code_min=code_min,
            code_max=code_max,
            max_rate_limit_keys=rate_limit_max_keys,
        )
        self.verifier = OTPVerifier(
            self.otp_store,
            identity_store,
            jwt_service,
            self.locks,
            clock=clock,
            max_attempts=max_attempts,
        )

    @classmethod
    def from_settings(cls, settings, delivery, identity_store, jwt_service, **overrides) -> "OTPService":
        options = dict(
            expiry_seconds=settings.otp_ttl_seconds,
            max_attempts=settings.otp_max_attempts,
            resend_interval_seconds=settings.otp_resend_interval_seconds,
            rate_limit_max_keys=settings.rate_limit_max_keys,
            code_min=settings.otp_code_min,
            code_max=settings.otp_code_max,
        )
        options.update(overrides)
        return cls(delivery, identity_store, jwt_service, **options)

    def send_otp(self, mobile: str) -> IssueResult:
        return self.issuer.issue(mobile)

    def verify_otp(self, mobile: str, otp_input: str) -> VerifyResult:
        return self.verifier.verify(mobile, otp_input)
