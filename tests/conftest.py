import pytest

from app.config.setting import Settings
from app.domains.auth.jwt_service import JWTService
from app.domains.otp.otp_service import OTPService
from app.domains.parents.models import Identity
from app.domains.parents.service import InMemoryIdentityStore
from app.shared.sms_service import ChannelError, SMSDelivery

REGISTERED = "9876543210"
UNREGISTERED = "9123456780"
SECRET = "test-secret-key-0123456789abcdef0123456789"


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SequenceRng:
    """randint() stand-in that returns preset codes in order."""

    def __init__(self, *values: int):
        self.values = list(values)
        self.calls = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        return self.values.pop(0)


class DictStore:
    """Store exposing nothing beyond get/set/delete/keys."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)

    def keys(self):
        return list(self.data)


class FakeChannel:
    def __init__(self, fail_with: Exception = None):
        self.sent = []
        self.fail_with = fail_with

    def send(self, destination: str, body: str) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((destination, body))
        return f"SM{len(self.sent):04d}"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def identity_store(clock):
    return InMemoryIdentityStore(
        [Identity(mobile=REGISTERED, name="राम शर्मा", children=[])],
        clock=clock,
    )


@pytest.fixture
def jwt_service(clock):
    return JWTService(SECRET, session_ttl_minutes=60, clock=clock)


@pytest.fixture
def make_service(clock, identity_store, jwt_service):
    def _make(*codes, channel=None, **overrides):
        rng = SequenceRng(*(codes or (482913, 555555, 777777)))
        return OTPService(
            SMSDelivery(channel),
            identity_store,
            jwt_service,
            clock=clock,
            rng=rng,
            **overrides,
        )

    return _make


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        twilio_account_sid="",
        twilio_auth_token="",
        twilio_phone_number="",
        jwt_secret_key=SECRET,
        demo_seed_enabled=True,
    )


@pytest.fixture
def failing_channel():
    return FakeChannel(fail_with=ChannelError("Twilio 401: Authenticate"))
