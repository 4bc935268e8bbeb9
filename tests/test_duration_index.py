"""Tests for the per-ayah timing index."""

import math

import pytest

from tarteelflow.core.duration_index import DurationIndex, DurationIndexBuilder
from tarteelflow.audio.capability import DurationProbe

from conftest import DeferredProbe, InstantProbe, make_work


# --- DurationIndex ---

def test_cumulative_boundaries():
    """Boundaries are running sums of the ayah durations."""
    index = DurationIndex([2.0, 3.0, 1.5])
    assert [index.cumulative_boundary(i) for i in range(3)] == [2.0, 5.0, 6.5]
    assert index.total_duration == 6.5


def test_unit_at_reference_points():
    """Boundary times belong to the ayah that ends there; late times clamp."""
    index = DurationIndex([2.0, 3.0, 1.5])
    assert index.unit_at(1.9) == 0
    assert index.unit_at(2.0) == 0
    assert index.unit_at(4.999) == 1
    assert index.unit_at(6.5) == 2
    assert index.unit_at(9) == 2


def test_unit_at_is_monotone_and_in_range():
    """Sweeping time forward never moves the highlight backwards or out of range."""
    index = DurationIndex([0.7, 0.0, 2.3, 1.1, 0.0])
    previous = 0
    t = 0.0
    while t < 10.0:
        position = index.unit_at(t)
        assert previous <= position < len(index)
        previous = position
        t += 0.05


def test_unit_at_negative_time():
    index = DurationIndex([2.0, 3.0])
    assert index.unit_at(-1.0) == 0


def test_empty_index():
    """An empty index answers 0 and has no timings."""
    index = DurationIndex([])
    assert len(index) == 0
    assert index.unit_at(3.0) == 0
    assert index.total_duration == 0.0
    assert index.timings() == []


def test_cumulative_boundary_out_of_range():
    index = DurationIndex([1.0])
    with pytest.raises(IndexError):
        index.cumulative_boundary(1)


def test_invalid_durations_become_zero():
    """Negative, NaN, infinite and non-numeric durations count as unresolved."""
    index = DurationIndex([-1.0, math.nan, math.inf, None, 2.5])
    assert index.durations == (0.0, 0.0, 0.0, 0.0, 2.5)


def test_zero_duration_unit_is_skipped_over():
    """A zero-length ayah shares its boundary with the previous one."""
    index = DurationIndex([2.0, 0.0, 1.0])
    assert index.unit_at(2.0) == 0
    assert index.unit_at(2.1) == 2


def test_timings_pairs():
    index = DurationIndex([2.0, 3.0, 1.5])
    assert index.timings() == [(0.0, 2.0), (2.0, 5.0), (5.0, 6.5)]


# --- DurationIndexBuilder ---

def test_builder_resolves_every_unit(three_ayah_work):
    """Each ayah recording is probed once and the index follows ayah order."""
    probe = InstantProbe({u.audio_url: d for u, d in zip(three_ayah_work.units, [2.0, 3.0, 1.5])})
    ready = []
    DurationIndexBuilder(probe).build(three_ayah_work.units, ready.append)
    assert ready == [DurationIndex([2.0, 3.0, 1.5])]
    assert probe.probed == [u.audio_url for u in three_ayah_work.units]


def test_builder_failed_probe_degrades_to_zero(three_ayah_work):
    """An unknown recording contributes 0 without aborting the build."""
    probe = InstantProbe({three_ayah_work.units[0].audio_url: 2.0})
    ready = []
    DurationIndexBuilder(probe).build(three_ayah_work.units, ready.append)
    assert ready[0].durations == (2.0, 0.0, 0.0)


def test_builder_probe_that_raises(three_ayah_work):
    """A probe blowing up while starting counts as a failed probe."""

    class ExplodingProbe(DurationProbe):
        def probe(self, url, callback):
            if url.endswith("/2.mp3"):
                raise RuntimeError("backend gone")
            callback(1.0)

    ready = []
    DurationIndexBuilder(ExplodingProbe()).build(three_ayah_work.units, ready.append)
    assert ready[0].durations == (1.0, 0.0, 1.0)


def test_builder_waits_for_all_probes():
    """The index is delivered only once every probe has settled, in any order."""
    work = make_work(112, [0, 0, 0])
    probe = DeferredProbe()
    ready = []
    build = DurationIndexBuilder(probe).build(work.units, ready.append)

    (_, first), (_, second), (_, third) = probe.pending
    third(3.0)
    first(1.0)
    assert ready == []
    assert not build.is_complete
    second(2.0)
    assert ready == [DurationIndex([1.0, 2.0, 3.0])]
    assert build.is_complete


def test_builder_ignores_repeated_reports():
    work = make_work(113, [0])
    probe = DeferredProbe()
    ready = []
    DurationIndexBuilder(probe).build(work.units, ready.append)
    (_, callback), = probe.pending
    callback(4.0)
    callback(9.0)
    assert ready == [DurationIndex([4.0])]


def test_builder_with_no_units():
    ready = []
    DurationIndexBuilder(InstantProbe()).build((), ready.append)
    assert ready == [DurationIndex([])]
