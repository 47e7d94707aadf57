from memberbridge.core.config import Settings
from memberbridge.core.plans import DEFAULT_TIER_LABEL, GENERIC_LABEL, PREMIUM_LABEL, build_tier_table, classify_plan

from conftest import GENERIC_PRICE, PREMIUM_PRICE


def test_known_prices_map_to_labels(settings):
    table = build_tier_table(settings)
    assert classify_plan(PREMIUM_PRICE, table) == PREMIUM_LABEL
    assert classify_plan(GENERIC_PRICE, table) == GENERIC_LABEL


def test_unknown_or_missing_price_falls_back(settings):
    table = build_tier_table(settings)
    assert classify_plan("price_nobody_configured", table) == DEFAULT_TIER_LABEL
    assert classify_plan(None, table) == DEFAULT_TIER_LABEL
    assert classify_plan("", table) == DEFAULT_TIER_LABEL


def test_classification_is_stable_across_calls(settings):
    table = build_tier_table(settings)
    labels = {classify_plan(PREMIUM_PRICE, table) for _ in range(5)}
    assert labels == {PREMIUM_LABEL}


def test_unconfigured_prices_are_not_in_table():
    table = build_tier_table(Settings(env="test", premium_price_id=None, generic_price_id=None))
    assert table == {}
    assert classify_plan(PREMIUM_PRICE, table) == DEFAULT_TIER_LABEL
