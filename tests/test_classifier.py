import numpy as np
import pytest

from mitocount.classifier import (
    Flag, Tier, adjacent_slots, assign_tier, classify_interval,
    longest_false_run, window_half_width,
)
from mitocount.intervals import TimeInterval
from mitocount.matrix import build_position_matrix

FAR = 1000.0


def _matrix(n_frames, present):
    """Object at x=100 in frames where present(f) is true, plus a far object in every frame."""
    obs = []
    for f in range(1, n_frames + 1):
        if present(f):
            obs.append((f, 100.0))
        obs.append((f, FAR))
    return build_position_matrix(obs)


def _at(results, x):
    return next(r for r in results if r.anchor.position == x)


def test_constant_position_is_high_confidence():
    m = build_position_matrix([(f, 250.0) for f in range(1, 451)])
    res = classify_interval(m, TimeInterval(1, 1, 450))
    assert len(res) == 1
    assert res[0].fraction == 1.0
    assert res[0].tier is Tier.HIGH_CONFIDENCE
    assert res[0].longest_gap == 0
    assert res[0].occupancy.all()
    assert res[0].occupancy.size == 450


def test_object_only_in_first_frame_is_moving():
    m = _matrix(450, lambda f: f == 1)
    r = _at(classify_interval(m, TimeInterval(1, 1, 450), half_width=5.0), 100.0)
    assert r.fraction == 0.0
    assert r.tier is Tier.DECISIVE
    assert not r.needs_confirmation
    assert r.flags == frozenset()
    assert r.points == ((1, 100.0),)


def test_neighbouring_objects_flagged_adjacent():
    obs = [(f, x) for f in range(1, 451) for x in (10.0, 12.0, 200.0)]
    res = classify_interval(build_position_matrix(obs), TimeInterval(1, 1, 450), half_width=5.0)
    assert [r.anchor.position for r in res] == [10.0, 12.0, 200.0]
    assert Flag.ADJACENT in res[0].flags
    assert Flag.ADJACENT in res[1].flags
    assert Flag.ADJACENT not in res[2].flags
    # both neighbours sit inside each other's window in every frame
    assert res[0].multiplicity == 449
    assert Flag.MULTIPLICITY in res[0].flags
    assert res[2].flags == frozenset()


@pytest.mark.parametrize("n_present, tier", [
    (10, Tier.HIGH_CONFIDENCE),
    (9, Tier.LOW_CONFIDENCE),
    (8, Tier.LOW_CONFIDENCE),
    (7, Tier.DECISIVE),
    (0, Tier.DECISIVE),
])
def test_tier_boundaries_are_strict(n_present, tier):
    # 11-frame interval: frame 1 defines the window, frames 2..11 are evaluated
    m = _matrix(11, lambda f: f == 1 or f - 1 <= n_present)
    r = _at(classify_interval(m, TimeInterval(1, 1, 11), half_width=1.0), 100.0)
    assert r.fraction == pytest.approx(n_present / 10)
    assert r.tier is tier


def test_window_is_open():
    obs = [(1, 100.0)] + [(f, 105.0) for f in range(2, 21)]
    res = classify_interval(build_position_matrix(obs), TimeInterval(1, 1, 20), half_width=5.0)
    assert res[0].fraction == 0.0


def test_long_gap_flagged():
    m = _matrix(200, lambda f: not 50 <= f < 85)
    r = _at(classify_interval(m, TimeInterval(1, 1, 200), half_width=1.0), 100.0)
    assert r.longest_gap == 35
    assert r.tier is Tier.LOW_CONFIDENCE
    assert Flag.LONG_GAP in r.flags


def test_gap_at_threshold_not_flagged():
    m = _matrix(200, lambda f: not 50 <= f < 80)
    r = _at(classify_interval(m, TimeInterval(1, 1, 200), half_width=1.0), 100.0)
    assert r.longest_gap == 30
    assert Flag.LONG_GAP not in r.flags


def test_flags_skipped_below_low_threshold():
    m = _matrix(200, lambda f: f == 1 or f > 150)
    r = _at(classify_interval(m, TimeInterval(1, 1, 200), half_width=1.0), 100.0)
    assert r.tier is Tier.DECISIVE
    assert r.longest_gap == 149
    assert r.flags == frozenset()


def test_custom_thresholds():
    m = _matrix(11, lambda f: f <= 6)
    r = _at(classify_interval(m, TimeInterval(1, 1, 11), half_width=1.0,
                              high_threshold=0.6, low_threshold=0.4), 100.0)
    assert r.fraction == pytest.approx(0.5)
    assert r.tier is Tier.LOW_CONFIDENCE


def test_later_interval_uses_its_own_first_frame():
    # object moves to x=300 at frame 11 and stays
    obs = [(f, 100.0 if f <= 10 else 300.0) for f in range(1, 21)]
    m = build_position_matrix(obs)
    res = classify_interval(m, TimeInterval(2, 11, 20), half_width=2.0)
    assert len(res) == 1
    assert res[0].anchor.interval == 2
    assert res[0].anchor.position == 300.0
    assert res[0].fraction == 1.0


def test_objects_appearing_later_are_not_references():
    obs = [(1, 100.0)] + [(f, x) for f in range(2, 11) for x in (100.0, 500.0)]
    res = classify_interval(build_position_matrix(obs), TimeInterval(1, 1, 10), half_width=2.0)
    assert [r.anchor.position for r in res] == [100.0]


def test_empty_first_frame_gives_no_references():
    m = build_position_matrix([(2, 1.0), (3, 1.0)], total_frames=3)
    assert classify_interval(m, TimeInterval(1, 1, 3), half_width=1.0) == []


def test_points_inside_window():
    obs = [(1, 50.0), (2, 51.0), (2, 80.0), (3, 49.5)]
    res = classify_interval(build_position_matrix(obs), TimeInterval(1, 1, 3), half_width=2.0)
    assert res[0].points == ((1, 50.0), (2, 51.0), (3, 49.5))
    assert res[0].window == (48.0, 52.0)


def test_default_half_width_is_one_percent_of_max_x():
    m = build_position_matrix([(1, 10.0), (1, 2000.0)])
    assert window_half_width(m) == pytest.approx(20.0)


def test_classification_is_repeatable():
    rng = np.random.default_rng(3)
    obs = [(f, float(x)) for f in range(1, 101) for x in np.sort(rng.uniform(0, 500, 8))]
    m = build_position_matrix(obs)
    iv = TimeInterval(1, 1, 100)
    first = classify_interval(m, iv)
    second = classify_interval(m, iv)
    assert [r.fraction for r in first] == [r.fraction for r in second]
    assert [r.flags for r in first] == [r.flags for r in second]
    assert first == second


def test_helpers():
    assert longest_false_run(np.array([True, False, False, True, False])) == 2
    assert longest_false_run(np.ones(5, dtype=bool)) == 0
    np.testing.assert_array_equal(adjacent_slots(np.array([10.0, 12.0, 200.0]), 5.0),
                                  [True, True, False])
    np.testing.assert_array_equal(adjacent_slots(np.array([7.0]), 5.0), [False])
    assert assign_tier(0.9, 0.9, 0.7) is Tier.LOW_CONFIDENCE
    assert assign_tier(0.7, 0.9, 0.7) is Tier.DECISIVE


def test_dropped_frames_do_not_demote_stationary_object():
    # every fifth image was removed as out of focus
    obs = [(f, 50.0) for f in range(1, 451) if f % 5 != 0]
    m = build_position_matrix(obs, total_frames=450)
    r = classify_interval(m, TimeInterval(1, 1, 450))[0]
    assert r.fraction == 1.0
    assert r.tier is Tier.HIGH_CONFIDENCE
    assert r.longest_gap == 0
    assert int(r.recorded.sum()) == 360


def test_dropped_frames_neither_start_nor_extend_gap():
    # absent for 35 images, 10 of which were dropped entirely
    obs = []
    for f in range(1, 201):
        if 60 <= f < 70:
            continue
        if not 50 <= f < 85:
            obs.append((f, 100.0))
        obs.append((f, FAR))
    m = build_position_matrix(obs)
    r = _at(classify_interval(m, TimeInterval(1, 1, 200), half_width=1.0), 100.0)
    assert r.longest_gap == 25
    assert Flag.LONG_GAP not in r.flags
    assert r.fraction == pytest.approx(164 / 189)


def test_interval_with_only_dropped_frames_after_start():
    m = build_position_matrix([(1, 10.0)], total_frames=5)
    r = classify_interval(m, TimeInterval(1, 1, 5), half_width=1.0)[0]
    assert r.fraction == 0.0
    assert r.tier is Tier.DECISIVE
    assert r.longest_gap == 0
