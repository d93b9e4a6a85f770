"""Tests for free-slot search and the planning assistant."""
from __future__ import annotations

import random
from datetime import date, datetime, timedelta

import pytest

from cosmic_planner.core.clock import FixedClock
from cosmic_planner.schemas.session import Session
from cosmic_planner.services.slot_search import (
    find_first_slot,
    find_slots,
    preferred_window,
    suggest_sessions,
)

MONDAY = date(2025, 3, 3)
DAY_BEFORE = datetime(2025, 3, 2, 12, 0)


def _at(hour: int, minute: int = 0, day: date = MONDAY) -> datetime:
    return datetime(day.year, day.month, day.day) + timedelta(hours=hour, minutes=minute)


def _session(start: datetime, end: datetime, session_id: str = "s") -> Session:
    return Session(id=session_id, title="Study", start_time=start, end_time=end, type_id="focus")


def test_earliest_fit_ignores_later_obstacle() -> None:
    existing = [_session(_at(9), _at(10))]

    slots = find_slots(MONDAY, 30, existing, 6, 24, now=DAY_BEFORE)

    assert slots[0].start == _at(6)
    assert slots[0].booking_end == _at(6, 30)
    assert slots[0].end == _at(9)
    assert slots[1].start == _at(10)
    assert slots[1].end == datetime(2025, 3, 4, 0, 0)


def test_back_to_back_obstacles_push_first_slot() -> None:
    existing = [
        _session(_at(6), _at(7), "a"),
        _session(_at(7), _at(8), "b"),
    ]

    slots = find_slots(MONDAY, 30, existing, 6, 24, now=DAY_BEFORE)

    assert slots[0].start == _at(8)


def test_long_request_returns_whole_remaining_gap() -> None:
    existing = [_session(_at(6), _at(7))]

    slots = find_slots(MONDAY, 600, existing, 6, 23, now=DAY_BEFORE)

    assert len(slots) == 1
    assert slots[0].start == _at(7)
    assert slots[0].duration_minutes == 960
    assert slots[0].duration_minutes >= 600


def test_no_sessions_yields_whole_window() -> None:
    slots = find_slots(MONDAY, 45, [], 9, 21, now=DAY_BEFORE)

    assert [(slot.start, slot.end) for slot in slots] == [(_at(9), _at(21))]


def test_default_window_comes_from_settings() -> None:
    slots = find_slots(MONDAY, 45, [], now=DAY_BEFORE)

    assert slots[0].start == _at(9)
    assert slots[0].end == _at(21)


def test_past_time_is_clipped_to_next_minute() -> None:
    now = _at(10, 15) + timedelta(seconds=30)

    slots = find_slots(MONDAY, 30, [], 9, 21, now=now)

    assert len(slots) == 1
    assert slots[0].start == _at(10, 16)
    assert slots[0].start > now


def test_start_exactly_at_now_is_excluded() -> None:
    slots = find_slots(MONDAY, 30, [], 9, 21, now=_at(9))

    assert slots[0].start == _at(9, 1)


def test_window_entirely_in_the_past_is_empty() -> None:
    assert find_slots(MONDAY, 30, [], 9, 21, now=_at(22)) == []


def test_clock_collaborator_supplies_now() -> None:
    clock = FixedClock(_at(12))

    slots = find_slots(MONDAY, 30, [], 9, 21, clock=clock)

    assert slots[0].start == _at(12, 1)


def test_duration_longer_than_window_is_empty() -> None:
    assert find_slots(MONDAY, 13 * 60, [], 9, 21, now=DAY_BEFORE) == []


def test_inverted_window_is_empty() -> None:
    assert find_slots(MONDAY, 30, [], 21, 9, now=DAY_BEFORE) == []
    assert find_slots(MONDAY, 30, [], 12, 12, now=DAY_BEFORE) == []


@pytest.mark.parametrize("duration", [0, -15])
def test_non_positive_duration_is_rejected(duration: int) -> None:
    with pytest.raises(ValueError):
        find_slots(MONDAY, duration, [], 9, 21, now=DAY_BEFORE)


def test_hour_outside_day_is_rejected() -> None:
    with pytest.raises(ValueError):
        find_slots(MONDAY, 30, [], 9, 25, now=DAY_BEFORE)


def test_gap_too_small_is_skipped() -> None:
    existing = [
        _session(_at(9, 20), _at(10), "a"),
        _session(_at(10, 20), _at(11), "b"),
    ]

    slots = find_slots(MONDAY, 30, existing, 9, 12, now=DAY_BEFORE)

    assert [(slot.start, slot.end) for slot in slots] == [(_at(11), _at(12))]


def test_overlapping_obstacles_are_merged() -> None:
    existing = [
        _session(_at(9), _at(11), "a"),
        _session(_at(10), _at(12), "b"),
    ]

    slots = find_slots(MONDAY, 30, existing, 9, 21, now=DAY_BEFORE)

    assert [(slot.start, slot.end) for slot in slots] == [(_at(12), _at(21))]


def test_session_spilling_over_midnight_blocks_the_morning() -> None:
    existing = [_session(datetime(2025, 3, 2, 23, 0), _at(7))]

    slots = find_slots(MONDAY, 30, existing, 6, 24, now=DAY_BEFORE)

    assert slots[0].start == _at(7)


def test_sessions_on_other_days_are_ignored() -> None:
    other_day = date(2025, 3, 4)
    existing = [_session(_at(9, day=other_day), _at(21, day=other_day))]

    slots = find_slots(MONDAY, 30, existing, 9, 21, now=DAY_BEFORE)

    assert [(slot.start, slot.end) for slot in slots] == [(_at(9), _at(21))]


def test_existing_sessions_are_not_mutated() -> None:
    existing = [_session(_at(9), _at(10))]
    snapshot = [session.model_dump() for session in existing]

    find_slots(MONDAY, 30, existing, 6, 24, now=DAY_BEFORE)

    assert [session.model_dump() for session in existing] == snapshot


@pytest.mark.parametrize("seed", range(25))
def test_slots_never_overlap_and_always_fit(seed: int) -> None:
    rng = random.Random(seed)
    existing = []
    for idx in range(rng.randint(0, 8)):
        start = _at(rng.randint(5, 22), rng.choice([0, 10, 15, 30, 45]))
        existing.append(_session(start, start + timedelta(minutes=rng.randint(5, 150)), f"s{idx}"))
    duration = rng.choice([15, 30, 45, 60, 90])
    window_start = rng.randint(6, 12)
    window_end = rng.randint(13, 24)
    now = _at(rng.randint(0, 23), rng.randint(0, 59)) if rng.random() < 0.5 else DAY_BEFORE

    slots = find_slots(MONDAY, duration, existing, window_start, window_end, now=now)

    for slot in slots:
        assert slot.end - slot.start >= timedelta(minutes=duration)
        assert slot.start > now
        assert slot.start >= _at(window_start)
        assert slot.end <= _at(window_end)
        for session in existing:
            assert not session.overlaps(slot.start, slot.end)
    starts = [slot.start for slot in slots]
    assert starts == sorted(starts)


def test_first_slot_short_circuits_on_first_day_with_room() -> None:
    tuesday = date(2025, 3, 4)
    wednesday = date(2025, 3, 5)
    existing = [_session(_at(9), _at(21))]

    slot = find_first_slot([MONDAY, tuesday, wednesday], 60, existing, 9, 21, now=DAY_BEFORE)

    assert slot is not None
    assert slot.start == _at(9, day=tuesday)


def test_first_slot_respects_caller_day_order() -> None:
    tuesday = date(2025, 3, 4)

    slot = find_first_slot([tuesday, MONDAY], 60, [], 9, 21, now=DAY_BEFORE)

    assert slot is not None
    assert slot.start.date() == tuesday


def test_first_slot_returns_none_without_capacity() -> None:
    existing = [_session(_at(9), _at(21))]

    assert find_first_slot([MONDAY], 60, existing, 9, 21, now=DAY_BEFORE) is None


@pytest.mark.parametrize("duration", [0, -5])
def test_first_slot_rejects_bad_duration_even_without_days(duration: int) -> None:
    with pytest.raises(ValueError):
        find_first_slot([], duration, [], 9, 21, now=DAY_BEFORE)


def test_first_slot_rejects_hour_outside_day_even_without_days() -> None:
    with pytest.raises(ValueError):
        find_first_slot([], 30, [], 9, 25, now=DAY_BEFORE)


def test_preferred_window_spans_selected_blocks() -> None:
    assert preferred_window(["morning"]) == (9, 12)
    assert preferred_window(["morning", "evening"]) == (9, 21)
    assert preferred_window(["afternoon"]) == (14, 17)
    with pytest.raises(ValueError):
        preferred_window([])
    with pytest.raises(ValueError):
        preferred_window(["midnight"])


def test_assistant_drafts_one_session_per_day_with_room() -> None:
    existing = [_session(_at(9), _at(12))]

    suggestions = suggest_sessions(
        60,
        existing,
        preferred_times=["morning"],
        focus="practice",
        now=_at(8),
    )

    assert [session.id for session in suggestions] == ["suggestion-1", "suggestion-2"]
    assert [session.start_time for session in suggestions] == [
        _at(9, day=date(2025, 3, 4)),
        _at(9, day=date(2025, 3, 5)),
    ]
    first = suggestions[0]
    assert first.estimated_duration == 60
    assert first.type_id == "practice"
    assert first.title == "Practice Session"
    assert first.tags == ["practice"]
    assert first.description == "Optimized 60-minute session for morning learner"


def test_assistant_titles_mixed_focus_as_balanced() -> None:
    suggestions = suggest_sessions(30, [], focus="mixed", horizon_days=1, now=_at(8))

    assert len(suggestions) == 1
    assert suggestions[0].title == "Balanced Session"


def test_assistant_rejects_unknown_focus() -> None:
    with pytest.raises(ValueError):
        suggest_sessions(30, [], focus="napping", now=_at(8))
