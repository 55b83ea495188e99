"""
Tests for the merged calendar endpoints and their layouts.

Event times are created in the host's local zone so the day columns and
pixel positions do not depend on where the tests run.
"""

from datetime import datetime


MIA_FEED = "https://feeds.example/mia.ics"
HOLIDAY_FEED = "https://feeds.example/holidays.ics"


def _local_iso(day: int, hour: int, minute: int = 0) -> str:
    return datetime(2024, 3, day, hour, minute).astimezone().isoformat()


def _ical_local(day: int, hour: int) -> str:
    """Floating DATE-TIME, read in host local time."""
    return f"202403{day:02d}T{hour:02d}0000"


def _ics(*vevents: str) -> str:
    return "BEGIN:VCALENDAR\r\nVERSION:2.0\r\n" + "".join(vevents) + "END:VCALENDAR\r\n"


def _vevent(uid: str, summary: str, dtstart: str, dtend: str) -> str:
    return f"BEGIN:VEVENT\r\nUID:{uid}\r\nSUMMARY:{summary}\r\nDTSTART:{dtstart}\r\nDTEND:{dtend}\r\nEND:VEVENT\r\n"


def _create_event(client, headers, title, day, start_hour, end_hour):
    response = client.post("/events", json={
        "title": title,
        "start_time": _local_iso(day, start_hour),
        "end_time": _local_iso(day, end_hour),
    }, headers=headers)
    assert response.status_code == 201
    return response.json()


class TestMergedEvents:

    def test_merges_local_feed_and_meal_events(self, client, auth_headers, ical_feeds):
        ical_feeds[MIA_FEED] = _ics(_vevent("school", "School trip", _ical_local(12, 9), _ical_local(12, 15)))
        member = client.post("/members", json={"name": "Mia", "ical_url": MIA_FEED}, headers=auth_headers).json()
        _create_event(client, auth_headers, "Swimming", 12, 16, 17)
        client.post("/meal-plans", json={"date": "2024-03-12", "meal_type": "dinner", "food_name": "Tacos"}, headers=auth_headers)

        response = client.get("/calendar/events", params={"date": "2024-03-12"}, headers=auth_headers)

        assert response.status_code == 200
        events = response.json()
        assert [event["title"] for event in events] == ["School trip", "Swimming", "Dinner: Tacos"]
        assert [event["source"] for event in events] == ["ical", "local", "meal"]
        assert events[0]["id"] == f"ical-{member['id']}-school"
        assert events[0]["assignee_ids"] == [member["id"]]

    def test_family_calendar_events_carry_color(self, client, auth_headers, ical_feeds):
        ical_feeds[HOLIDAY_FEED] = _ics(_vevent("inset", "Inset day", "20240312", "20240313"))
        calendar = client.post("/family-calendars", json={
            "name": "School holidays",
            "ical_url": HOLIDAY_FEED,
            "color": "#0EA5E9",
        }, headers=auth_headers).json()

        events = client.get("/calendar/events", params={"start": "2024-03-11", "end": "2024-03-13"}, headers=auth_headers).json()

        assert len(events) == 1
        assert events[0]["id"] == f"family-ical-{calendar['id']}-inset"
        assert events[0]["color"] == "#0EA5E9"
        assert events[0]["source"] == "family-ical"

    def test_broken_feed_does_not_fail_request(self, client, auth_headers, ical_feeds):
        client.post("/members", json={"name": "Leo", "ical_url": "https://feeds.example/down.ics"}, headers=auth_headers)
        _create_event(client, auth_headers, "Swimming", 12, 16, 17)

        response = client.get("/calendar/events", params={"date": "2024-03-12"}, headers=auth_headers)

        assert response.status_code == 200
        assert [event["title"] for event in response.json()] == ["Swimming"]

    def test_hidden_member_feed_is_left_out(self, client, auth_headers, ical_feeds):
        ical_feeds[MIA_FEED] = _ics(_vevent("school", "School trip", _ical_local(12, 9), _ical_local(12, 15)))
        client.post("/members", json={"name": "Mia", "ical_url": MIA_FEED, "hidden": True}, headers=auth_headers)

        events = client.get("/calendar/events", params={"date": "2024-03-12"}, headers=auth_headers).json()

        assert events == []

    def test_requires_date_or_range(self, client, auth_headers):
        assert client.get("/calendar/events", headers=auth_headers).status_code == 400

    def test_rejects_inverted_range(self, client, auth_headers):
        response = client.get("/calendar/events", params={"start": "2024-03-13", "end": "2024-03-12"}, headers=auth_headers)
        assert response.status_code == 400


class TestDayLayout:

    def test_positions_timed_events(self, client, auth_headers):
        _create_event(client, auth_headers, "Dentist", 12, 10, 11)

        response = client.get("/calendar/day", params={"date": "2024-03-12"}, headers=auth_headers)

        data = response.json()
        assert data["window_start_hour"] == 7
        [positioned] = data["events"]
        assert positioned["event"]["title"] == "Dentist"
        assert positioned["top"] == 192
        assert positioned["height"] == 64

    def test_events_outside_window_are_not_positioned(self, client, auth_headers):
        _create_event(client, auth_headers, "Late show", 12, 20, 22)

        data = client.get("/calendar/day", params={"date": "2024-03-12"}, headers=auth_headers).json()

        assert data["events"] == []

    def test_invalid_window(self, client, auth_headers):
        response = client.get(
            "/calendar/day",
            params={"date": "2024-03-12", "window_start": 12, "window_end": 9},
            headers=auth_headers,
        )
        assert response.status_code == 400


class TestWeekLayout:

    def test_week_runs_sunday_to_saturday(self, client, auth_headers):
        data = client.get("/calendar/week", params={"date": "2024-03-13"}, headers=auth_headers).json()

        assert data["week_start"] == "2024-03-10"
        assert [day["date"] for day in data["days"]] == [f"2024-03-{d:02d}" for d in range(10, 17)]

    def test_all_day_lanes_and_timed_columns(self, client, auth_headers, ical_feeds):
        ical_feeds[HOLIDAY_FEED] = _ics(
            _vevent("camp", "Camp", "20240311", "20240314"),
            _vevent("trip", "Trip", "20240312", "20240313"),
        )
        client.post("/family-calendars", json={"name": "Club", "ical_url": HOLIDAY_FEED}, headers=auth_headers)
        _create_event(client, auth_headers, "Swimming", 12, 16, 17)

        data = client.get("/calendar/week", params={"date": "2024-03-12"}, headers=auth_headers).json()

        assert data["lane_count"] == 2
        placements = {p["event"]["title"]: p for p in data["all_day"]}
        assert placements["Camp"]["lane"] == 0
        assert placements["Camp"]["start_column"] == 1
        assert placements["Camp"]["span_columns"] == 3
        assert placements["Trip"]["lane"] == 1

        tuesday = data["days"][2]
        assert [p["event"]["title"] for p in tuesday["events"]] == ["Swimming"]
        assert all(day["events"] == [] for index, day in enumerate(data["days"]) if index != 2)
