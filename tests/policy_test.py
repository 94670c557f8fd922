# tests/policy_test.py
from __future__ import annotations

import pytest

from depot_allocation.recommendation import policy
from depot_allocation.recommendation.allocation_config import (
    AllocationConfig,
    AllocationConfigError,
    AllocationFeatures,
    AllocationSettings,
    CapacityThresholds,
    load_allocation_config,
)


# ───────────────────────── utilization ───────────────────────── #

def test_utilization_after_add():
    # 100 TEU depot with 40 available holds 60; +10 -> 70%
    assert policy.utilization_after_add(100, 40, 10) == 70.0


def test_utilization_after_add_without_capacity_is_saturated():
    assert policy.utilization_after_add(0, 0, 1) == 100.0
    assert policy.utilization_after_add(-5, 0, 1) == 100.0


# ───────────────────────── bands (defaults 60 / 80 / 85 / 95) ───────────────────────── #

def test_optimal_range_is_inclusive(config):
    assert policy.is_in_optimal_range(60.0, config)
    assert policy.is_in_optimal_range(80.0, config)
    assert not policy.is_in_optimal_range(59.5, config)
    assert not policy.is_in_optimal_range(80.5, config)


def test_recommended_max(config):
    assert not policy.exceeds_recommended_max(80.0, config)
    assert policy.exceeds_recommended_max(80.5, config)


def test_warning_and_critical(config):
    assert not policy.is_warning(84.5, config)
    assert policy.is_warning(85.0, config)
    assert not policy.is_critical(94.5, config)
    assert policy.is_critical(95.0, config)


def test_range_enforcement_off_accepts_everything():
    cfg = AllocationConfig(features=AllocationFeatures(capacity_range_enforcement=False))
    assert policy.is_in_optimal_range(5.0, cfg)
    assert not policy.exceeds_recommended_max(94.0, cfg)
    # critical still applies
    assert policy.is_critical(95.0, cfg)


# ───────────────────────── grade ───────────────────────── #

def test_grade_compatibility_uses_substring_of_depot_name(config):
    # Default map: Depo 4 -> A, B
    assert policy.is_grade_compatible("Depo 4", "A", config)
    assert policy.is_grade_compatible("Depo 4", "b", config)
    assert not policy.is_grade_compatible("Depo 4", "C", config)


def test_grade_unset_or_unmapped_depot_accepts_anything(config):
    assert policy.is_grade_compatible("Depo 4", None, config)
    assert policy.is_grade_compatible("Depo Sungai", "C", config)


def test_grade_awareness_off():
    cfg = AllocationConfig(features=AllocationFeatures(grade_aware_allocation=False))
    assert policy.is_grade_compatible("Depo 4", "C", cfg)


def test_with_grade_preference_replaces_map(config):
    cfg = config.with_grade_preference({"Depo 4": ("b", "c")})
    assert cfg.accepted_grades("Depo 4") == ("B", "C")
    assert cfg.accepted_grades("Depo Yon") == ()
    # original untouched
    assert config.accepted_grades("Depo 4") == ("A", "B")


# ───────────────────────── configuration ───────────────────────── #

def test_thresholds_must_be_ordered():
    with pytest.raises(ValueError):
        CapacityThresholds(target_min=0.7, target_max=0.6)
    with pytest.raises(ValueError):
        CapacityThresholds(critical=1.2)


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("ALLOCATION_TARGET_MAX", "0.75")
    monkeypatch.setenv("ALLOCATION_CRITICAL_CAPACITY_AVOIDANCE", "false")
    monkeypatch.setenv("ALLOCATION_DEFAULT_TOP_N", "2")

    cfg = load_allocation_config(AllocationSettings(_env_file=None))

    assert cfg.capacity.target_max == 0.75
    assert cfg.capacity.critical == 0.95
    assert cfg.features.critical_capacity_avoidance is False
    assert cfg.activity_rules.default_top_n == 2


def test_invalid_settings_are_rejected(monkeypatch):
    monkeypatch.setenv("ALLOCATION_WARNING", "0.5")
    with pytest.raises(AllocationConfigError):
        load_allocation_config(AllocationSettings(_env_file=None))


def test_unparseable_settings_are_a_config_error(monkeypatch):
    monkeypatch.setenv("ALLOCATION_CRITICAL", "lots")
    with pytest.raises(AllocationConfigError) as exc:
        load_allocation_config()
    assert not isinstance(exc.value, ValueError)
