# tests/selector_test.py
from __future__ import annotations

import random

from depot_allocation.recommendation.allocation_config import AllocationConfig, AllocationFeatures
from depot_allocation.recommendation.selector import NO_SUITABLE_DEPOT, DepotSelector

from conftest import DEPO4, JAPFA, TELUK, YON

RULE_1_CHAIN = [YON, JAPFA, TELUK]


# ───────────────────────── tiers 1 and 2: preferred chain ───────────────────────── #

def test_tier_1_first_preferred_depot_in_optimal_range(make_ledger, config, rng):
    ledger = make_ledger(yon=55, japfa=55)
    pick = DepotSelector(ledger, config, rng).select(RULE_1_CHAIN, 10)

    assert (pick.depot_id, pick.tier) == (YON, 1)
    assert pick.utilization_pct == 65.0
    assert "Depo Yon" in pick.reason
    assert ledger.available(YON) == 35.0


def test_tier_1_skips_chain_members_outside_the_band(make_ledger, config, rng):
    # Yon would end at 85%, Japfa at 70%
    ledger = make_ledger(yon=75, japfa=60)
    pick = DepotSelector(ledger, config, rng).select(RULE_1_CHAIN, 10)
    assert (pick.depot_id, pick.tier) == (JAPFA, 1)


def test_tier_2_below_recommended_max(make_ledger, config, rng):
    ledger = make_ledger()
    pick = DepotSelector(ledger, config, rng).select(RULE_1_CHAIN, 10)
    assert (pick.depot_id, pick.tier) == (YON, 2)
    assert "below recommended max" in pick.reason


def test_target_max_is_inclusive(make_ledger, config, rng):
    ledger = make_ledger(yon=70)
    pick = DepotSelector(ledger, config, rng).select([YON], 10)
    assert (pick.depot_id, pick.tier) == (YON, 1)
    assert pick.utilization_pct == 80.0


# ───────────────────────── tier 3: random among optimal ───────────────────────── #

def test_tier_3_random_pick_among_optimal_depots(make_ledger, config):
    ledger = make_ledger(yon=0, japfa=60, teluk=65, depo4=90)
    pick = DepotSelector(ledger, config, random.Random(3)).select([DEPO4], 10)

    assert pick.tier == 3
    assert pick.depot_id == random.Random(3).choice([JAPFA, TELUK])
    assert "2 depot(s)" in pick.reason


def test_tier_3_is_reproducible_with_same_seed(make_ledger, config):
    picks = set()
    for _ in range(5):
        ledger = make_ledger(japfa=60, teluk=65, depo4=90)
        picks.add(DepotSelector(ledger, config, random.Random(11)).select([DEPO4], 10).depot_id)
    assert len(picks) == 1


# ───────────────────────── tier 4: most available ───────────────────────── #

def test_tier_4_most_available_non_critical(make_ledger, config, rng):
    ledger = make_ledger(yon=85, japfa=72, teluk=10, depo4=90)
    pick = DepotSelector(ledger, config, rng).select([DEPO4], 10)
    assert (pick.depot_id, pick.tier) == (TELUK, 4)
    assert pick.utilization_pct == 20.0


def test_warning_band_is_still_allowed(make_ledger, config, rng):
    # every depot ends at 90%: above warning, below critical
    ledger = make_ledger(yon=80, japfa=80, teluk=80, depo4=80)
    pick = DepotSelector(ledger, config, rng).select(RULE_1_CHAIN, 10)
    assert (pick.depot_id, pick.tier) == (YON, 4)


# ───────────────────────── tier 5: nothing fits ───────────────────────── #

def test_all_critical_gives_no_depot(make_ledger, config, rng):
    ledger = make_ledger(yon=90, japfa=90, teluk=90, depo4=90)
    before = ledger.snapshot()

    pick = DepotSelector(ledger, config, rng).select(RULE_1_CHAIN, 5, rule_label="Rule 1")

    assert pick.depot_id is None
    assert pick.tier == 5
    assert NO_SUITABLE_DEPOT in pick.reason
    assert pick.reason.startswith("Rule 1: ")
    assert ledger.snapshot() == before


def test_exactly_critical_is_excluded(make_ledger, config, rng):
    ledger = make_ledger(yon=85, japfa=85, teluk=85, depo4=85)
    pick = DepotSelector(ledger, config, rng).select([YON], 10)
    assert pick.depot_id is None


def test_exactly_critical_reachable_through_fallback(make_ledger, rng):
    cfg = AllocationConfig(features=AllocationFeatures(critical_capacity_avoidance=False))
    ledger = make_ledger(yon=85, japfa=85, teluk=85, depo4=85)

    pick = DepotSelector(ledger, cfg, rng).select([YON], 10)

    assert (pick.depot_id, pick.tier) == (YON, 5)
    assert pick.reason.startswith("FALLBACK: ")
    assert ledger.available(YON) == 5.0


def test_fallback_picks_most_available(make_ledger, rng):
    cfg = AllocationConfig(features=AllocationFeatures(critical_capacity_avoidance=False))
    ledger = make_ledger(yon=100, japfa=98, teluk=99, depo4=100)
    pick = DepotSelector(ledger, cfg, rng).select(RULE_1_CHAIN, 4)
    assert (pick.depot_id, pick.tier) == (JAPFA, 5)
    assert ledger.available(JAPFA) == -2.0


def test_not_enough_room_is_excluded(rng):
    from depot_allocation.recommendation.ledger import CapacityLedger
    from depot_allocation.recommendation.models import Depot

    cfg = AllocationConfig(features=AllocationFeatures(capacity_range_enforcement=False))
    ledger = CapacityLedger([Depot(1, "Small", 10.0), Depot(2, "Big", 1000.0)], {1: 2})
    pick = DepotSelector(ledger, cfg, rng).select([1], 9)
    assert pick.depot_id == 2


# ───────────────────────── grade ───────────────────────── #

def test_grade_incompatible_preferred_depot_is_skipped(make_ledger, config, rng):
    cfg = config.with_grade_preference(
        {
            "Depo 4": ("B", "C"),
            "Depo Japfa": ("B", "C", "A"),
            "Depo Teluk Bayur": ("C", "B"),
            "Depo Yon": ("B", "C"),
        }
    )
    ledger = make_ledger()
    pick = DepotSelector(ledger, cfg, rng).select([DEPO4], 1, grade="A")

    assert pick.depot_id == JAPFA
    assert pick.tier == 4


def test_no_grade_compatible_depot(make_ledger, config, rng):
    cfg = config.with_grade_preference({"Depo": ("C",)})
    pick = DepotSelector(make_ledger(), cfg, rng).select(RULE_1_CHAIN, 1, grade="A")
    assert pick.depot_id is None


def test_range_enforcement_off_takes_first_in_chain(make_ledger, rng):
    cfg = AllocationConfig(features=AllocationFeatures(capacity_range_enforcement=False))
    pick = DepotSelector(make_ledger(), cfg, rng).select(RULE_1_CHAIN, 1)
    assert (pick.depot_id, pick.tier) == (YON, 1)
