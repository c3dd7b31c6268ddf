"""Tests for :mod:`memo_ai.calendar.event_mapper`."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from memo_ai.calendar.event_mapper import (
    map_calendar,
    map_create_options,
    map_event_update,
    map_google_event,
)
from memo_ai.exceptions import InvalidInputError
from memo_ai.models.calendar import CreateEventOptions, EventUpdate

TZ_NAME = "America/Vancouver"
VANCOUVER = ZoneInfo(TZ_NAME)


def _options(**overrides) -> CreateEventOptions:
    values = {
        "title": "Budget review",
        "start_date": datetime(2026, 3, 11, 10, 0, tzinfo=VANCOUVER),
        "end_date": datetime(2026, 3, 11, 11, 0, tzinfo=VANCOUVER),
    }
    values.update(overrides)
    return CreateEventOptions(**values)


class TestMapCreateOptions:
    def test_minimal_body(self) -> None:
        body = map_create_options(_options(), TZ_NAME)

        assert body == {
            "summary": "Budget review",
            "start": {"dateTime": "2026-03-11T10:00:00-07:00", "timeZone": TZ_NAME},
            "end": {"dateTime": "2026-03-11T11:00:00-07:00", "timeZone": TZ_NAME},
            "description": "",
        }

    def test_location_notes_and_alarm(self) -> None:
        body = map_create_options(
            _options(location="Room 4", notes="Bring numbers", alarm_minutes_before=15),
            TZ_NAME,
        )

        assert body["location"] == "Room 4"
        assert body["description"] == "Bring numbers"
        assert body["reminders"] == {
            "useDefault": False,
            "overrides": [{"method": "popup", "minutes": 15}],
        }

    def test_end_not_after_start_rejected(self) -> None:
        start = datetime(2026, 3, 11, 10, 0, tzinfo=VANCOUVER)
        with pytest.raises(InvalidInputError, match="must be after"):
            map_create_options(_options(start_date=start, end_date=start), TZ_NAME)


class TestMapEventUpdate:
    def test_empty_update(self) -> None:
        assert map_event_update(EventUpdate(), TZ_NAME) == {}

    def test_only_set_fields(self) -> None:
        body = map_event_update(EventUpdate(title="Renamed", notes="moved"), TZ_NAME)
        assert body == {"summary": "Renamed", "description": "moved"}

    def test_times_and_alarm(self) -> None:
        body = map_event_update(
            EventUpdate(
                start_date=datetime(2026, 3, 11, 12, 0, tzinfo=VANCOUVER),
                alarm_minutes_before=5,
            ),
            TZ_NAME,
        )
        assert body["start"] == {"dateTime": "2026-03-11T12:00:00-07:00", "timeZone": TZ_NAME}
        assert body["reminders"]["overrides"] == [{"method": "popup", "minutes": 5}]


class TestMapCalendar:
    def test_owner_primary(self) -> None:
        calendar = map_calendar(
            {"id": "me@example.com", "summary": "Me", "primary": True, "accessRole": "owner"}
        )
        assert calendar.id == "me@example.com"
        assert calendar.title == "Me"
        assert calendar.is_primary is True
        assert calendar.allows_modifications is True

    def test_reader_calendar(self) -> None:
        calendar = map_calendar({"id": "holidays", "summary": "Holidays", "accessRole": "reader"})
        assert calendar.is_primary is False
        assert calendar.allows_modifications is False

    def test_summary_override_preferred(self) -> None:
        calendar = map_calendar({"id": "x", "summary": "Raw", "summaryOverride": "Nice"})
        assert calendar.title == "Nice"


class TestMapGoogleEvent:
    def test_timed_event(self) -> None:
        record = map_google_event(
            {
                "id": "e1",
                "summary": "Dentist",
                "start": {"dateTime": "2026-03-12T09:00:00-07:00"},
                "end": {"dateTime": "2026-03-12T10:00:00-07:00"},
                "location": "Main St",
            }
        )
        assert record.id == "e1"
        assert record.title == "Dentist"
        assert record.start_date == datetime(2026, 3, 12, 9, 0, tzinfo=VANCOUVER)
        assert record.location == "Main St"
        assert record.notes is None

    def test_all_day_event(self) -> None:
        record = map_google_event(
            {"id": "e2", "summary": "Holiday", "start": {"date": "2026-03-13"}, "end": {"date": "2026-03-14"}}
        )
        assert record.start_date.date() == date(2026, 3, 13)

    def test_unparseable_times_skipped(self) -> None:
        assert map_google_event({"id": "e3", "start": {}, "end": {"dateTime": "garbage"}}) is None
