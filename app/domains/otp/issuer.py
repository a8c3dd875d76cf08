import logging
import math
import random
import time
from typing import Optional

from app.domains.otp import messages
from app.domains.otp.errors import RateLimited, ValidationError
from app.domains.otp.models import IssueResult, OtpRecord, RateLimitRecord
from app.shared.kv_store import KeyedLocks, KeyValueStore
from app.shared.phone_utils import is_valid_mobile, mask_phone
from app.shared.sms_service import SMSDelivery

logger = logging.getLogger(__name__)


class OTPIssuer:
    def __init__(
        self,
        otp_store: KeyValueStore,
        rate_limit_store: KeyValueStore,
        delivery: SMSDelivery,
        locks: KeyedLocks,
        clock=time.time,
        rng=None,
        ttl_seconds: int = 300,
        resend_interval_seconds: int = 120,
        code_min: int = 100000,
        code_max: int = 999999,
        max_rate_limit_keys: Optional[int] = None,
    ):
        """
        Args:
            otp_store: Pending OTP records keyed by mobile number.
            rate_limit_store: Last issuance time keyed by mobile number.
            delivery: SMS delivery wrapper, unconfigured means demo mode.
            locks: Per-mobile locks shared with the verifier.
            clock: Returns the current time in epoch seconds.
            rng: Anything with ``randint(a, b)``. Defaults to ``random.SystemRandom()``.
            max_rate_limit_keys: Bound on rate-limit records, ``None`` for unbounded.
        """
        self.otp_store = otp_store
        self.rate_limit_store = rate_limit_store
        self.delivery = delivery
        self.locks = locks
        self.clock = clock
        self.rng = rng or random.SystemRandom()
        self.ttl_seconds = ttl_seconds
        self.resend_interval_seconds = resend_interval_seconds
        self.code_min = code_min
        self.code_max = code_max
        self.max_rate_limit_keys = max_rate_limit_keys

    def generate_code(self) -> str:
        return str(self.rng.randint(self.code_min, self.code_max))

    def issue(self, mobile: str) -> IssueResult:
        """
        Rate-limit, generate and store a new OTP, then hand it to the SMS channel.

        Args:
            mobile (str): 10-digit mobile number.

        Returns:
            IssueResult: Expiry plus the delivery outcome.

        Raises:
            ValidationError: The mobile number is not exactly 10 digits.
            RateLimited: An OTP was issued for this number less than the resend interval ago.
        """
        if not is_valid_mobile(mobile):
            raise ValidationError("mobile must be exactly 10 digits", message_code="INVALID_MOBILE")

        with self.locks.lock(mobile):
            now = self.clock()
            last = self.rate_limit_store.get(mobile)
            if last is not None:
                elapsed = now - last.last_issued_at
                if elapsed < self.resend_interval_seconds:
                    retry_after = math.ceil(self.resend_interval_seconds - elapsed)
                    logger.info("OTP request for %s rate limited, retry after %ss", mask_phone(mobile), retry_after)
                    raise RateLimited(retry_after)

            code = self.generate_code()
            record = OtpRecord(code=code, created_at=now, expires_at=now + self.ttl_seconds, attempts=0)
            self.otp_store.set(mobile, record)
            self.rate_limit_store.set(mobile, RateLimitRecord(last_issued_at=now))

        self._evict_rate_limits(now, keep=mobile)

        logger.info("OTP issued for %s", mask_phone(mobile))
        # The record is stored before delivery so a slow or failing channel never loses it.
        body = messages.otp_sms(code, self.ttl_seconds)
        delivery = self.delivery.dispatch(mobile, body, code)
        return IssueResult(mobile=mobile, expires_at=record.expires_at, delivery=delivery)

    def _evict_rate_limits(self, now: float, keep: str) -> None:
        """Keep the rate-limit store within its bound.

        Records whose resend window has elapsed go first; if that is not enough
        the least recently issued ones are dropped. Each key is re-read under its
        own lock so a concurrent issuance for that number is never undone.
        """
        if self.max_rate_limit_keys is None:
            return
        keys = self.rate_limit_store.keys()
        if len(keys) <= self.max_rate_limit_keys:
            return

        live = []
        swept = 0
        for key in keys:
            record = self.rate_limit_store.get(key)
            if record is None:
                continue
            if now - record.last_issued_at >= self.resend_interval_seconds:
                if self._delete_rate_limit_if_unchanged(key, record):
                    swept += 1
            else:
                live.append((record.last_issued_at, key, record))

        excess = len(live) - self.max_rate_limit_keys
        live.sort(key=lambda item: (item[0], item[1]))
        for _issued_at, key, record in live:
            if excess <= 0:
                break
            if key != keep and self._delete_rate_limit_if_unchanged(key, record):
                excess -= 1
        logger.debug("Rate limit store swept %s expired entries", swept)

    def _delete_rate_limit_if_unchanged(self, key: str, record: RateLimitRecord) -> bool:
        with self.locks.lock(key):
            current = self.rate_limit_store.get(key)
            if current is None or current.last_issued_at != record.last_issued_at:
                return False
            self.rate_limit_store.delete(key)
            return True
