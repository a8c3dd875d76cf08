import jwt

from app.domains.auth.jwt_service import JWTService
from conftest import SECRET, FakeClock


def test_session_round_trip(jwt_service, clock):
    session = jwt_service.create_session("9876543210")
    assert session.issued_at == int(clock.now)
    assert session.expires_at == session.issued_at + 3600
    assert jwt_service.verify_token(session.token) == "9876543210"

    payload = jwt.decode(session.token, SECRET, algorithms=["HS256"], options={"verify_exp": False})
    assert payload["sub"] == "9876543210"
    assert payload["jti"] == session.jti


def test_sessions_are_unique(jwt_service):
    first = jwt_service.create_session("9876543210")
    second = jwt_service.create_session("9876543210")
    assert first.token != second.token


def test_session_expires(jwt_service, clock):
    session = jwt_service.create_session("9876543210")
    clock.advance(3599)
    assert jwt_service.verify_token(session.token) == "9876543210"
    clock.advance(1)
    assert jwt_service.verify_token(session.token) is None


def test_revoked_session_is_rejected(jwt_service):
    session = jwt_service.create_session("9876543210")
    other = jwt_service.create_session("9876543210")

    assert jwt_service.revoke(session.token)
    assert jwt_service.verify_token(session.token) is None
    assert jwt_service.verify_token(other.token) == "9876543210"


def test_revocations_swept_after_expiry(jwt_service, clock):
    old = jwt_service.create_session("9876543210")
    jwt_service.revoke(old.token)
    clock.advance(3600)
    fresh = jwt_service.create_session("9999999999")
    jwt_service.revoke(fresh.token)
    assert jwt_service.revoked.keys() == [fresh.jti]


def test_garbage_and_foreign_tokens():
    service = JWTService(SECRET, clock=FakeClock())
    foreign = JWTService("another-secret-0123456789abcdef0123456789", clock=FakeClock()).create_session("9876543210")

    assert service.verify_token("not-a-token") is None
    assert service.verify_token(foreign.token) is None
    assert service.revoke("not-a-token") is False
