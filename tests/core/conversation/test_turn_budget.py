"""턴/시간 예산 테스트"""

from src.core.conversation.budget import TurnBudgetTracker
from src.core.event_bus import EventBus
from src.core.event_types import EventTypes


def _tracker(**kwargs):
    bus = EventBus()
    events = []
    bus.subscribe(EventTypes.TIME_UP, lambda e: events.append(e.event_type))
    bus.subscribe(EventTypes.ENGAGEMENT_MILESTONE, lambda e: events.append(e.event_type))
    return TurnBudgetTracker(event_bus=bus, **kwargs), bus, events


class TestTurns:
    def test_each_message_counts_once(self):
        tracker, _, _ = _tracker()
        for _ in range(5):
            tracker.record_message()
        assert tracker.turn_count == 5

    def test_milestone_fires_once(self):
        tracker, bus, events = _tracker(milestone_turns=3)
        for _ in range(6):
            tracker.record_message()
            bus.reset_chain()
        assert events == [EventTypes.ENGAGEMENT_MILESTONE]
        assert tracker.milestone_shown is True

    def test_restore_past_milestone_does_not_refire(self):
        tracker, _, events = _tracker(milestone_turns=3)
        tracker.restore_turns(10)
        tracker.record_message()
        assert events == []
        assert tracker.turn_count == 11


class TestCountdown:
    def test_defaults(self):
        tracker = TurnBudgetTracker()
        assert tracker.time_remaining == 600
        assert tracker.extensions_left == 3

    def test_time_up_fires_exactly_once(self):
        tracker, bus, events = _tracker(time_limit=3)
        tracker.tick(2)
        assert events == []
        tracker.tick(1)
        bus.reset_chain()
        tracker.tick(5)
        assert tracker.time_remaining == 0
        assert events == [EventTypes.TIME_UP]
        assert tracker.time_up is True

    def test_extension_rearms_time_up(self):
        tracker, bus, events = _tracker(time_limit=1, extension_seconds=2)
        tracker.tick(1)
        bus.reset_chain()
        assert tracker.extend() is True
        assert tracker.time_up is False
        assert tracker.time_remaining == 2
        tracker.tick(2)
        assert events == [EventTypes.TIME_UP, EventTypes.TIME_UP]

    def test_extensions_capped(self):
        tracker = TurnBudgetTracker(time_limit=10, extension_seconds=180, max_extensions=3)
        assert [tracker.extend() for _ in range(5)] == [True, True, True, False, False]
        assert tracker.time_remaining == 10 + 3 * 180
        assert tracker.extensions_left == 0

    def test_without_bus(self):
        tracker = TurnBudgetTracker(time_limit=1, milestone_turns=1)
        tracker.record_message()
        assert tracker.tick(1) == 0
