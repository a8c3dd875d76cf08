import threading

import pytest

from app.domains.otp.errors import (
    IdentityNotFound,
    OtpExpired,
    OtpMismatch,
    OtpNotFound,
    TooManyAttempts,
    ValidationError,
)
from app.domains.otp.models import OtpRecord
from conftest import REGISTERED, UNREGISTERED


def test_login_scenario(make_service, jwt_service):
    service = make_service(482913)
    service.send_otp(REGISTERED)

    with pytest.raises(OtpMismatch) as exc:
        service.verify_otp(REGISTERED, "000000")
    assert exc.value.attempts == 1
    assert exc.value.attempts_remaining == 2
    assert service.otp_store.get(REGISTERED).attempts == 1

    result = service.verify_otp(REGISTERED, "482913")
    assert result.identity.name == "राम शर्मा"
    assert result.identity.mobile == REGISTERED
    assert result.session.mobile == REGISTERED
    assert jwt_service.verify_token(result.session.token) == REGISTERED
    assert service.otp_store.get(REGISTERED) is None

    with pytest.raises(OtpNotFound):
        service.verify_otp(REGISTERED, "482913")


def test_no_pending_otp(make_service):
    service = make_service()
    with pytest.raises(OtpNotFound):
        service.verify_otp(REGISTERED, "123456")


@pytest.mark.parametrize("mobile,code", [("", "123456"), (REGISTERED, ""), (None, "123456"), (REGISTERED, None)])
def test_missing_fields(make_service, mobile, code):
    service = make_service(482913)
    service.send_otp(REGISTERED)
    with pytest.raises(ValidationError):
        service.verify_otp(mobile, code)
    assert service.otp_store.get(REGISTERED).attempts == 0


def test_expired_code_rejected_even_if_correct(make_service, clock):
    service = make_service(482913)
    service.send_otp(REGISTERED)
    clock.advance(301)

    with pytest.raises(OtpExpired):
        service.verify_otp(REGISTERED, "482913")
    assert service.otp_store.get(REGISTERED) is None


def test_code_still_valid_at_expiry_instant(make_service, clock):
    service = make_service(482913)
    service.send_otp(REGISTERED)
    clock.advance(300)
    assert service.verify_otp(REGISTERED, "482913").identity.mobile == REGISTERED


def test_third_wrong_code_exhausts_attempts(make_service):
    service = make_service(482913)
    service.send_otp(REGISTERED)

    for attempt in (1, 2):
        with pytest.raises(OtpMismatch) as exc:
            service.verify_otp(REGISTERED, "000000")
        assert exc.value.attempts == attempt

    with pytest.raises(TooManyAttempts):
        service.verify_otp(REGISTERED, "000000")
    assert service.otp_store.get(REGISTERED) is None

    # the correct code no longer helps
    with pytest.raises(OtpNotFound):
        service.verify_otp(REGISTERED, "482913")


def test_record_already_at_limit_is_discarded(make_service, clock):
    service = make_service()
    service.otp_store.set(
        REGISTERED, OtpRecord(code="482913", created_at=clock.now, expires_at=clock.now + 300, attempts=3)
    )
    with pytest.raises(TooManyAttempts):
        service.verify_otp(REGISTERED, "482913")
    assert service.otp_store.get(REGISTERED) is None


def test_unregistered_number_can_get_otp_but_not_log_in(make_service):
    service = make_service(654321)
    result = service.send_otp(UNREGISTERED)
    assert result.code == "654321"

    with pytest.raises(IdentityNotFound):
        service.verify_otp(UNREGISTERED, "654321")
    assert service.otp_store.get(UNREGISTERED) is None


def test_non_ascii_code_counts_as_mismatch(make_service):
    service = make_service(482913)
    service.send_otp(REGISTERED)
    with pytest.raises(OtpMismatch):
        service.verify_otp(REGISTERED, "४८२९१३")


def test_concurrent_wrong_codes_never_exceed_limit(make_service):
    service = make_service(482913)
    service.send_otp(REGISTERED)
    outcomes = []
    barrier = threading.Barrier(8)

    def attempt():
        barrier.wait()
        try:
            service.verify_otp(REGISTERED, "000000")
        except Exception as e:
            outcomes.append(type(e))

    threads = [threading.Thread(target=attempt) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count(OtpMismatch) == 2
    assert outcomes.count(TooManyAttempts) == 1
    assert outcomes.count(OtpNotFound) == 5
    assert len(service.locks) == 0
