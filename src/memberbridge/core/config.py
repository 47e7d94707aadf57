from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    env: str = "local"
    log_level: str = "INFO"

    stripe_api_key: SecretStr | None = None
    stripe_webhook_secret: SecretStr | None = None
    # Stripe's own default replay window
    stripe_webhook_tolerance_sec: int = 300

    telegram_bot_token: SecretStr | None = None
    telegram_api_base: str = "https://api.telegram.org"
    telegram_timeout_sec: float = 10.0

    # Target group, e.g. -1001234567890
    group_chat_id: str | None = None

    premium_price_id: str | None = None
    generic_price_id: str | None = None

    invite_ttl_sec: int = 1800
    invite_member_limit: int = 1

    checkout_success_url: str = "https://t.me/NexusCommunityBRBot?start=ok"
    checkout_cancel_url: str = "https://t.me/NexusCommunityBRBot?start=cancel"

    # Custom field written at checkout, read back by the identity resolver
    metadata_key: str = "telegram_id"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    @property
    def missing_required(self) -> list[str]:
        missing: list[str] = []
        if not self.stripe_webhook_secret:
            missing.append("STRIPE_WEBHOOK_SECRET")
        if not self.telegram_bot_token:
            missing.append("TELEGRAM_BOT_TOKEN")
        if not self.group_chat_id:
            missing.append("GROUP_CHAT_ID")
        return missing


settings = Settings()
