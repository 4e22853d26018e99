from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NOTIFIER_")

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    environment: str = "development"

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"


class EmailProviderConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="EMAIL_")

    api_key: str | None = None
    from_address: str = "reviews@revboostapp.com"
    from_name: str = "RevBoost"
    api_url: str = "https://api.resend.com/emails"


class SmsProviderConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TWILIO_")

    account_sid: str | None = None
    auth_token: str | None = None
    phone_number: str | None = None
    api_base_url: str = "https://api.twilio.com"


class LivenessConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="KEEPALIVE_")

    self_check_url: str = "http://localhost:3000"
    interval_seconds: int = 14 * 60
    initial_delay_seconds: float = 5.0
    timeout_seconds: float = 30.0
