from typing import Optional

from app.domains.otp import messages


class OTPError(Exception):
    """Base exception for OTP operations."""

    code = "OTP_ERROR"
    status_code = 400

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.code)
        self.detail = detail

    @property
    def message(self) -> str:
        return messages.for_code(self.code)


class ValidationError(OTPError):
    code = "VALIDATION_ERROR"

    def __init__(self, detail: str, message_code: str = "INVALID_MOBILE"):
        super().__init__(detail)
        self.message_code = message_code

    @property
    def message(self) -> str:
        return messages.for_code(self.message_code)


class RateLimited(OTPError):
    code = "RATE_LIMITED"
    status_code = 429

    def __init__(self, retry_after: int):
        super().__init__(f"retry after {retry_after}s")
        self.retry_after = retry_after


class OtpNotFound(OTPError):
    code = "OTP_NOT_FOUND"


class OtpExpired(OTPError):
    code = "OTP_EXPIRED"


class TooManyAttempts(OTPError):
    code = "TOO_MANY_ATTEMPTS"


class OtpMismatch(OTPError):
    code = "OTP_MISMATCH"

    def __init__(self, attempts: int, attempts_remaining: int):
        super().__init__(f"attempt {attempts}, {attempts_remaining} remaining")
        self.attempts = attempts
        self.attempts_remaining = attempts_remaining


class IdentityNotFound(OTPError):
    code = "IDENTITY_NOT_FOUND"
    status_code = 404
