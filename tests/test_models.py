from datetime import datetime

import pytest
import pytz

from worklog_app.core.config import JiraSettings, user_color
from worklog_app.core.errors import ConfigurationError, InvalidRequestError
from worklog_app.core.models import AggregationRequest, WorklogRecord, WorklogRequest


def test_request_defaults_days():
    req = WorklogRequest.from_payload({"usernames": ["jdoe", "asmith"]})
    assert req.usernames == ("jdoe", "asmith")
    assert req.days == 30


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {},
        {"usernames": []},
        {"usernames": "jdoe"},
        {"usernames": ["jdoe", "  "]},
        {"usernames": ["jdoe", 3]},
        {"usernames": ["jdoe"], "days": 0},
        {"usernames": ["jdoe"], "days": -5},
        {"usernames": ["jdoe"], "days": "7"},
        {"usernames": ["jdoe"], "days": True},
    ],
)
def test_request_rejects_bad_payloads(payload):
    with pytest.raises(InvalidRequestError):
        WorklogRequest.from_payload(payload)


def test_invalid_request_is_value_error():
    with pytest.raises(ValueError, match="At least one username is required"):
        WorklogRequest.from_payload({"usernames": []})


def test_aggregation_request_validation():
    now = datetime(2024, 5, 7, tzinfo=pytz.UTC)
    req = AggregationRequest(authors=frozenset({"JDoe"}), window_days=7, reference_now=now)
    assert req.authors_lower == frozenset({"jdoe"})
    with pytest.raises(InvalidRequestError):
        AggregationRequest(authors=frozenset(), window_days=7, reference_now=now)
    with pytest.raises(InvalidRequestError):
        AggregationRequest(authors=frozenset({"jdoe"}), window_days=0, reference_now=now)


def test_worklog_record_wire_shape():
    rec = WorklogRecord("AB-1", "jdoe", "2024-05-06T09:00:00.000+0000", "2024-05-06", 900)
    assert rec.to_dict() == {
        "key": "AB-1",
        "started": "2024-05-06T09:00:00.000+0000",
        "timeSpentSeconds": 900,
        "date": "2024-05-06",
        "author": "jdoe",
    }


def test_settings_from_mapping():
    settings = JiraSettings.from_mapping({"JIRA_SERVER": "https://jira.example.com/", "JIRA_API_TOKEN": "t"})
    assert settings.server == "https://jira.example.com"
    assert settings.token == "t"


def test_settings_prefer_first_key():
    settings = JiraSettings.from_env(
        {"JIRA_URL": "https://a.example.com", "JIRA_SERVER": "https://b.example.com", "JIRA_TOKEN": "t"}
    )
    assert settings.server == "https://a.example.com"


@pytest.mark.parametrize("values", [{}, {"JIRA_URL": "https://a.example.com"}, {"JIRA_TOKEN": "t"}])
def test_settings_missing_values(values):
    with pytest.raises(ConfigurationError, match="Missing JIRA configuration"):
        JiraSettings.from_mapping(values)


def test_palette_wraps():
    assert user_color(0) == "#3B82F6"
    assert user_color(8) == user_color(0)
