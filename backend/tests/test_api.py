"""
HTTP tests for the block endpoints via FastAPI's TestClient.

Uses the seeded SQLite host DB from conftest.py; the student (user 3) is
enrolled in CS101 and sees events 1, 2 and 3 within the 21-day window.
"""

from unittest.mock import MagicMock

import pytest

from upcoming_events.api.dependencies import get_calendar_api
from upcoming_events.api.main import app
from upcoming_events.core.exceptions import UpstreamQueryError
from upcoming_events.services.calendar import EventsResult

from tests.conftest import COURSE_ID, SESSKEY, STALE_SID

RELOAD = "/blocks/upcoming_events/reload"


def _params(**overrides):
    params = {"lookahead": 21, "courseid": COURSE_ID, "limitnum": 2, "page": 1, "sesskey": SESSKEY}
    params.update(overrides)
    return params


@pytest.fixture
def fake_calendar():
    calendar = MagicMock(name="calendar")
    calendar.get_events.return_value = EventsResult(events=[], cache=MagicMock())
    app.dependency_overrides[get_calendar_api] = lambda: calendar
    return calendar


# ---------------------------------------------------------------------------
# Reload endpoint
# ---------------------------------------------------------------------------

class TestReload:

    def test_first_page(self, logged_in):
        response = logged_in.get(RELOAD, params=_params())

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        body = response.json()
        assert body["end"] is False
        assert 'data-eventid="1"' in body["output"]
        assert 'data-eventid="2"' in body["output"]
        assert 'data-eventid="3"' not in body["output"]
        assert "No more events" not in body["output"]

    def test_last_page_appends_end_marker(self, logged_in):
        body = logged_in.get(RELOAD, params=_params(page=2)).json()

        assert body["end"] is True
        assert 'data-eventid="3"' in body["output"]
        assert body["output"].endswith("<li>No more events</li>")

    def test_post_query_string_is_accepted(self, logged_in):
        response = logged_in.post(RELOAD, params=_params())
        assert response.status_code == 200
        assert response.json()["end"] is False

    def test_post_form_body(self, logged_in):
        response = logged_in.post(RELOAD, data=_params(page=2))

        assert response.status_code == 200
        body = response.json()
        assert body["end"] is True
        assert 'data-eventid="3"' in body["output"]

    def test_form_body_overrides_query_string(self, logged_in):
        response = logged_in.post(RELOAD, params=_params(page=1), data=_params(page=2))
        assert response.json()["end"] is True

    def test_output_carries_decorations(self, logged_in):
        output = logged_in.get(RELOAD, params=_params()).json()["output"]

        assert "Assignment due in CS101" in output
        assert "1 hour" in output
        assert "Site open day" in output
        assert 'class="coursepicture"' in output
        assert 'class="personpicture"' in output

    def test_offset_from_page_number(self, logged_in, fake_calendar):
        body = logged_in.get(RELOAD, params=_params(page=2, limitnum=5)).json()

        # 5 events before the page, 5 on it, plus one to detect a next page
        assert fake_calendar.get_events.call_args.kwargs["limit"] == 11
        assert body == {"output": "<li>No more events</li>", "end": True}

    def test_upstream_failure(self, logged_in, fake_calendar):
        fake_calendar.get_events.side_effect = UpstreamQueryError("Calendar query failed")

        response = logged_in.get(RELOAD, params=_params())

        assert response.status_code == 502
        assert response.json()["error_code"] == "calendarqueryfailed"


class TestReloadAuthentication:

    def test_no_session_is_rejected_before_fetch(self, client, fake_calendar):
        response = client.get(RELOAD, params=_params())

        assert response.status_code == 401
        assert response.json()["error_code"] == "invalidsesskey"
        fake_calendar.get_events.assert_not_called()

    def test_no_session_is_rejected_before_parameter_checks(self, client, fake_calendar):
        response = client.get(RELOAD)

        assert response.status_code == 401
        fake_calendar.get_events.assert_not_called()

    def test_wrong_sesskey(self, logged_in, fake_calendar):
        response = logged_in.get(RELOAD, params=_params(sesskey="nope"))

        assert response.status_code == 401
        assert response.json()["error_code"] == "invalidsesskey"
        fake_calendar.get_events.assert_not_called()

    def test_wrong_sesskey_in_form_body(self, logged_in, fake_calendar):
        response = logged_in.post(RELOAD, data=_params(sesskey="nope"))

        assert response.status_code == 401
        assert response.json()["error_code"] == "invalidsesskey"
        fake_calendar.get_events.assert_not_called()

    def test_non_ascii_sesskey(self, logged_in, fake_calendar):
        response = logged_in.get(RELOAD, params=_params(sesskey="sk1234é"))

        assert response.status_code == 401
        assert response.json()["error_code"] == "invalidsesskey"
        fake_calendar.get_events.assert_not_called()

    def test_missing_sesskey(self, logged_in, fake_calendar):
        params = _params()
        del params["sesskey"]

        assert logged_in.get(RELOAD, params=params).status_code == 401
        fake_calendar.get_events.assert_not_called()

    def test_expired_session(self, client, fake_calendar):
        client.cookies.set("MoodleSession", STALE_SID)
        response = client.get(RELOAD, params=_params(sesskey="stalekey"))

        assert response.status_code == 401
        assert response.json()["error_code"] == "requireloginerror"
        fake_calendar.get_events.assert_not_called()

    def test_session_without_login(self, client, fake_calendar):
        client.cookies.set("MoodleSession", "guestsid")
        response = client.get(RELOAD, params=_params(sesskey="guestkey"))

        assert response.status_code == 401
        assert response.json()["error_code"] == "requireloginerror"
        fake_calendar.get_events.assert_not_called()


class TestReloadParameters:

    def test_missing_form_parameter(self, logged_in):
        params = _params()
        del params["page"]

        response = logged_in.post(RELOAD, data=params)

        assert response.status_code == 422
        assert "page" in [d["param"] for d in response.json()["details"]]

    @pytest.mark.parametrize("missing", ["lookahead", "courseid", "limitnum", "page"])
    def test_missing_required_parameter(self, logged_in, missing):
        params = _params()
        del params[missing]

        response = logged_in.get(RELOAD, params=params)

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "invalidparameter"
        assert missing in [d["param"] for d in body["details"]]

    def test_non_integer_parameter(self, logged_in):
        assert logged_in.get(RELOAD, params=_params(page="two")).status_code == 422

    def test_zero_page_size(self, logged_in):
        assert logged_in.get(RELOAD, params=_params(limitnum=0)).status_code == 422


# ---------------------------------------------------------------------------
# Initial render
# ---------------------------------------------------------------------------

class TestBlock:

    def test_renders_first_page(self, logged_in):
        response = logged_in.get("/blocks/upcoming_events", params={"courseid": COURSE_ID, "limitnum": 2})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        html = response.text
        assert "Assignment due in CS101" in html
        assert 'class="later"' in html
        assert 'class="sooner"' not in html
        assert f'data-sesskey="{SESSKEY}"' in html

    def test_empty_block(self, logged_in):
        html = logged_in.get("/blocks/upcoming_events", params={"lookahead": 0}).text
        assert "There are no upcoming events" in html

    def test_requires_login(self, client):
        assert client.get("/blocks/upcoming_events").status_code == 401

    def test_expired_session_is_rejected(self, client):
        client.cookies.set("MoodleSession", STALE_SID)
        response = client.get("/blocks/upcoming_events")

        assert response.status_code == 401
        assert response.json()["error_code"] == "requireloginerror"

    def test_context_export(self, logged_in):
        body = logged_in.get(
            "/blocks/upcoming_events/context",
            params={"courseid": COURSE_ID, "limitnum": 2, "page": 2},
        ).json()

        assert [e["id"] for e in body["events"]] == [3]
        assert body["events"][0]["time_until"] == "2 days"
        assert body["pagination"] == {
            "has_previous": True,
            "has_next": False,
            "previous_page": 1,
            "next_page": False,
        }

    def test_context_defaults_to_site_page(self, logged_in):
        body = logged_in.get("/blocks/upcoming_events/context").json()

        assert [e["id"] for e in body["events"]] == [1, 2, 3]
        assert body["events"][1]["description"] == "Site open day"


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert "X-Request-ID" in response.headers

    def test_docs_served_outside_production(self, client):
        assert client.get("/docs").status_code == 200
