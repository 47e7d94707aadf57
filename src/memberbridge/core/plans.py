from typing import Final, Mapping

from memberbridge.core.config import Settings

DEFAULT_TIER_LABEL: Final[str] = "Membership"
PREMIUM_LABEL: Final[str] = "Premium plan (€24.99/month)"
GENERIC_LABEL: Final[str] = "Generic plan (€9.99/month)"


def build_tier_table(settings: Settings) -> dict[str, str]:
    """price id -> tier label, for the price ids present in settings."""
    table: dict[str, str] = {}
    if settings.premium_price_id:
        table[settings.premium_price_id] = PREMIUM_LABEL
    if settings.generic_price_id:
        table[settings.generic_price_id] = GENERIC_LABEL
    return table


def classify_plan(price_id: str | None, table: Mapping[str, str]) -> str:
    if not price_id:
        return DEFAULT_TIER_LABEL
    return table.get(price_id, DEFAULT_TIER_LABEL)
