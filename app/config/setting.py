from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "DS School Backend"
    environment: str = "dev"
    allowed_origins: str = "*"

    @property
    def parsed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    # OTP policy
    otp_code_min: int = 100000
    otp_code_max: int = 999999
    otp_ttl_seconds: int = 300
    otp_max_attempts: int = 3
    otp_resend_interval_seconds: int = 120
    rate_limit_max_keys: int = 1000

    # Twilio SMS settings, leave empty to run in demo (fallback) mode
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_phone_number: str = ""
    twilio_api_url: str = "https://api.twilio.com/2010-04-01"
    sms_country_code: str = "+91"
    sms_timeout_seconds: float = 10.0

    # Session settings
    jwt_secret_key: str = "change-me-in-production-0123456789abcdef"
    jwt_algorithm: str = "HS256"
    session_ttl_minutes: int = 60 * 24

    demo_seed_enabled: bool = True

    @property
    def twilio_configured(self) -> bool:
        return bool(self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone_number)

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
