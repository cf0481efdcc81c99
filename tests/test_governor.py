import pytest

from mosaic_solver.lib.s1_governor import (
    GovernorLimits,
    ResourceGovernor,
    RunContext,
    RunStats,
    TripKind,
)


class FakeClock:
    """Horloge manuelle (secondes) qui compte ses lectures."""

    def __init__(self, now: float = 0.0):
        self.now = now
        self.reads = 0

    def __call__(self) -> float:
        self.reads += 1
        return self.now


def test_default_limits():
    limits = GovernorLimits()
    assert limits.time_budget_ms == 30000
    assert limits.max_depth == 100
    assert limits.max_operations == 10000


def test_limits_from_partial_config():
    limits = GovernorLimits.from_config({"max_operations": 5})
    assert limits.max_operations == 5
    assert limits.max_depth == 100


@pytest.mark.parametrize("field", ["time_budget_ms", "max_depth", "max_operations"])
def test_non_positive_limits_rejected(field):
    with pytest.raises(ValueError):
        GovernorLimits(**{field: 0})


def test_operation_cap_trips_after_budget():
    governor = ResourceGovernor(GovernorLimits(max_operations=2), clock=FakeClock())
    governor.tick()
    governor.tick()
    assert not governor.should_stop()
    governor.tick()
    assert governor.should_stop()
    assert governor.trip_kind == TripKind.OPERATION_CAP


def test_timeout_trips_and_stays_tripped():
    clock = FakeClock()
    governor = ResourceGovernor(GovernorLimits(time_budget_ms=100), clock=clock)
    clock.now = 0.05
    assert not governor.should_stop()

    clock.now = 0.2
    assert governor.should_stop()
    assert governor.trip_kind == TripKind.TIMEOUT

    # Arrêt collant : plus aucune lecture d'horloge
    reads = clock.reads
    clock.now = 0.0
    for _ in range(5):
        assert governor.should_stop()
    assert clock.reads == reads


def test_first_trip_kind_is_kept():
    governor = ResourceGovernor(GovernorLimits(max_operations=1), clock=FakeClock())
    governor.cancel()
    governor.tick(5)
    assert governor.should_stop()
    assert governor.trip_kind == TripKind.CANCELLED


def test_depth_cap_on_enter():
    governor = ResourceGovernor(GovernorLimits(max_depth=2), clock=FakeClock())
    assert governor.enter()
    assert governor.enter()
    assert not governor.enter()
    assert governor.trip_kind == TripKind.DEPTH_CAP
    assert governor.should_stop()

    for _ in range(3):
        governor.exit()
    assert governor.depth == 0
    assert governor.max_depth_reached == 3


def test_reset_clears_trip():
    clock = FakeClock()
    governor = ResourceGovernor(GovernorLimits(max_operations=1), clock=clock)
    governor.tick(3)
    assert governor.should_stop()

    governor.reset()
    assert not governor.tripped
    assert governor.trip_kind is None
    assert governor.operations == 0
    assert not governor.should_stop()


def test_restart_timer_keeps_counters():
    clock = FakeClock()
    governor = ResourceGovernor(GovernorLimits(time_budget_ms=100, max_operations=3), clock=clock)
    governor.tick(2)
    clock.now = 60.0
    governor.restart_timer()
    assert not governor.should_stop()
    assert governor.operations == 2

    governor.tick(2)
    assert governor.should_stop()
    assert governor.trip_kind == TripKind.OPERATION_CAP


def test_explicit_trip_keeps_first_kind():
    governor = ResourceGovernor(GovernorLimits(), clock=FakeClock())
    governor.trip(TripKind.DEPTH_CAP)
    governor.cancel()
    assert governor.should_stop()
    assert governor.trip_kind == TripKind.DEPTH_CAP


def test_stats_snapshot():
    clock = FakeClock()
    governor = ResourceGovernor(GovernorLimits(), clock=clock)
    governor.tick(4)
    clock.now = 1.5
    stats = governor.stats()
    assert stats["operations"] == 4
    assert stats["elapsed_ms"] == pytest.approx(1500.0)
    assert stats["trip_kind"] is None


class TestRunContext:
    """Contexte d'exécution : compteurs et callback de progression."""

    def test_tick_syncs_operations(self):
        context = RunContext.create(GovernorLimits(), clock=FakeClock())
        context.tick()
        context.tick()
        assert context.stats.operations == 2

    def test_report_progress(self):
        calls = []
        context = RunContext.create(
            on_progress=lambda percent, resolved, total: calls.append((percent, resolved, total)),
            clock=FakeClock(),
        )
        context.report_progress(3, 12)
        context.report_progress(12, 12)
        assert calls == [(25.0, 3, 12), (100.0, 12, 12)]

    def test_report_progress_without_callback(self):
        context = RunContext.create(clock=FakeClock())
        context.report_progress(1, 2)

    def test_finish_freezes_governor_counters(self):
        clock = FakeClock()
        context = RunContext.create(clock=clock)
        context.governor.enter()
        context.governor.exit()
        context.governor.tick(7)
        clock.now = 0.25
        stats = context.finish()
        assert isinstance(stats, RunStats)
        assert stats.operations == 7
        assert stats.max_depth_reached == 1
        assert stats.elapsed_ms == pytest.approx(250.0)
        assert stats.to_dict()["operations"] == 7
