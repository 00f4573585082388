"""Tests for catalog parsing and validation."""

from __future__ import annotations

import copy
import json
import logging
from decimal import Decimal
from unittest.mock import patch

import pytest

from travel_quote import catalog as catalog_module
from travel_quote.catalog import (
    REFERENCE_CATALOG,
    catalog_to_dict,
    get_catalog,
    load_catalog,
    parse_age_range,
    parse_catalog,
    tier_coverage_issues,
)
from travel_quote.config import Settings
from travel_quote.errors import CatalogError


def _provider(rules, **plan_overrides):
    plan = {
        "planId": "demo",
        "planName": "Demo",
        "rules": rules,
        "minAge": 0,
        "maxAge": 85,
        "minDays": 1,
        "details": ["Medical: USD 10,000"],
    }
    plan.update(plan_overrides)
    return [{"providerId": "acme", "providerName": "Acme", "plans": [plan]}]


def test_parse_age_range_splits_on_dash():
    assert parse_age_range("0-75") == (0, 75)
    assert parse_age_range("76-85") == (76, 85)


@pytest.mark.parametrize("key", ["75", "a-b", "1-2-3", "80-70", ""])
def test_parse_age_range_rejects_malformed_keys(key):
    with pytest.raises(CatalogError):
        parse_age_range(key)


def test_reference_catalog_parses_in_declaration_order():
    catalog = parse_catalog(REFERENCE_CATALOG)

    provider = catalog.providers[0]
    assert provider.provider_name == "Intermac"
    assert [p.plan_id for p in provider.plans] == [
        "intermac-i85",
        "intermac-economico",
        "intermac-premium",
    ]
    first = provider.plans[0]
    assert [(t.min_age, t.max_age, t.daily_price) for t in first.tiers] == [
        (0, 75, Decimal("6.83")),
        (76, 85, Decimal("16.27")),
    ]
    assert first.min_days == 3
    assert catalog.find_plan("intermac-premium").plan_name == "Plan Premium Plus"
    assert catalog.find_plan("missing") is None


def test_rule_key_order_is_kept():
    catalog = parse_catalog(_provider({"30-85": 9, "0-50": 4}))
    tiers = catalog.providers[0].plans[0].tiers
    assert [t.range_key for t in tiers] == ["30-85", "0-50"]


def test_reference_catalog_has_no_coverage_issues():
    for _, plan in parse_catalog(REFERENCE_CATALOG).iter_plans():
        assert tier_coverage_issues(plan) == []


def test_coverage_issues_report_overlap_and_gap():
    plan = parse_catalog(_provider({"0-50": 4, "40-60": 6, "70-85": 9})).providers[0].plans[0]
    issues = tier_coverage_issues(plan)

    assert any("40-60 overlaps 0-50" in issue for issue in issues)
    assert any("no tier covers ages 61-69" in issue for issue in issues)


def test_coverage_issues_report_trailing_gap_and_out_of_bounds():
    plan = parse_catalog(_provider({"0-60": 4, "50-90": 6}, maxAge=95)).providers[0].plans[0]
    issues = tier_coverage_issues(plan)

    assert any("no tier covers ages 91-95" in issue for issue in issues)
    assert not any("outside" in issue for issue in issues)

    capped = parse_catalog(_provider({"0-90": 4}, maxAge=80)).providers[0].plans[0]
    assert any("outside plan ages 0-80" in issue for issue in tier_coverage_issues(capped))


def test_coverage_issues_are_logged_not_fatal(caplog):
    with caplog.at_level(logging.WARNING, logger="travel_quote.catalog"):
        catalog = parse_catalog(_provider({"0-50": 4, "40-85": 6}))

    assert catalog.providers[0].plans[0].tiers[0].daily_price == Decimal("4")
    assert "overlaps" in caplog.text


def test_strict_mode_rejects_coverage_issues():
    with pytest.raises(CatalogError):
        parse_catalog(_provider({"0-50": 4}), strict=True)


@pytest.mark.parametrize(
    "overrides",
    [
        {"minAge": 50, "maxAge": 40},
        {"minDays": 0},
        {"rules": {"0-85": -1}},
        {"rules": {"0-85": "cheap"}},
        {"rules": ["0-85"]},
        {"minAge": "0"},
    ],
)
def test_structural_errors_raise(overrides):
    rules = overrides.pop("rules", {"0-85": 5})
    with pytest.raises(CatalogError):
        parse_catalog(_provider(rules, **overrides))


def test_missing_field_raises():
    data = _provider({"0-85": 5})
    del data[0]["plans"][0]["planName"]
    with pytest.raises(CatalogError, match="planName"):
        parse_catalog(data)


def test_duplicate_plan_ids_raise():
    data = copy.deepcopy(REFERENCE_CATALOG) + [
        {
            "providerId": "other",
            "providerName": "Other",
            "plans": [copy.deepcopy(REFERENCE_CATALOG[0]["plans"][0])],
        }
    ]
    with pytest.raises(CatalogError, match="Duplicate plan id"):
        parse_catalog(data)


def test_load_catalog_from_json_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(_provider({"0-85": 12.5})), encoding="utf-8")

    catalog = load_catalog(path)

    assert catalog.providers[0].plans[0].tiers[0].daily_price == Decimal("12.5")


def test_load_catalog_defaults_to_reference():
    assert load_catalog() == parse_catalog(REFERENCE_CATALOG)


def test_load_catalog_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_catalog(tmp_path / "nope.json")


def test_load_catalog_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(path)


def test_get_catalog_uses_configured_path(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(_provider({"0-85": 3})), encoding="utf-8")
    get_catalog.cache_clear()
    try:
        with patch.object(catalog_module, "get_settings", return_value=Settings(catalog_path=path)):
            catalog = get_catalog()
    finally:
        get_catalog.cache_clear()

    assert catalog.providers[0].provider_name == "Acme"


def test_catalog_to_dict_round_trips_reference():
    catalog = parse_catalog(REFERENCE_CATALOG)
    assert parse_catalog(catalog_to_dict(catalog)) == catalog


@pytest.mark.parametrize(
    "data",
    [
        [1],
        ["intermac"],
        [{"providerId": "a", "providerName": "A", "plans": ["x"]}],
        [{"providerId": "a", "providerName": "A", "plans": 5}],
        [{"providerId": "a", "providerName": "A", "plans": "x"}],
        {"providerId": "a"},
    ],
)
def test_wrong_shapes_raise_catalog_error(data):
    with pytest.raises(CatalogError):
        parse_catalog(data)


@pytest.mark.parametrize("details", ["Medical", [1, 2], {"medical": "yes"}])
def test_details_must_be_list_of_strings(details):
    with pytest.raises(CatalogError, match="details"):
        parse_catalog(_provider({"0-85": 5}, details=details))
