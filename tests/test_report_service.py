import json
import logging
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest
import requests

from stark_accessibility import report_service
from stark_accessibility.errors import ConfigurationError
from stark_accessibility.issue import StarkIssue
from stark_accessibility.report_service import (
    PRODUCTION_API_URL,
    ConsoleReportService,
    WebApiReportService,
    build_payload,
    determine_base_url,
)


@pytest.fixture
def service(session, executor):
    return WebApiReportService(stark_project_token="token-123", session=session, executor=executor)


def sent_body(session):
    return json.loads(session.put.call_args.kwargs["data"])


def test_default_url():
    assert determine_base_url({}) == PRODUCTION_API_URL


def test_env_override(monkeypatch):
    monkeypatch.setenv("STARK_API_URL", "http://localhost:8080/api/scan")
    assert WebApiReportService("t").url == "http://localhost:8080/api/scan"


@pytest.mark.parametrize("value", ["", "not a url", "ftp://example.com/x", "http://"])
def test_invalid_override_falls_back(value):
    assert determine_base_url({"STARK_API_URL": value}) == PRODUCTION_API_URL


def test_broken_default_is_fatal(monkeypatch):
    monkeypatch.setattr(report_service, "PRODUCTION_API_URL", "::nope::")
    with pytest.raises(ConfigurationError):
        determine_base_url({})


def test_payload_shape():
    issue = StarkIssue("Contrast failed", "details", "contrast")

    payload = build_payload([issue], "Home")

    assert payload["version"] == "0.0.1"
    assert payload["data"]["name"] == "Home"
    assert payload["data"]["results"] == [issue.to_dict()]


def test_send_puts_payload(service, session, executor):
    service.send([StarkIssue("Contrast failed", "details", "contrast")], "Home")

    assert executor.submitted == 1
    args, kwargs = session.put.call_args
    assert args == (PRODUCTION_API_URL,)
    assert kwargs["headers"] == {
        "Content-Type": "application/json",
        "Authorization": "Bearer token-123",
        "User-Agent": "StarkAccessibilityIOS/0.0.1",
    }
    body = sent_body(session)
    assert body["data"]["name"] == "Home"
    assert len(body["data"]["results"]) == 1
    assert body["data"]["results"][0]["elementLabel"] is None


def test_send_empty_results(service, session):
    service.send([], "Empty")

    assert session.put.call_count == 1
    assert sent_body(session)["data"]["results"] == []


def test_default_scan_name(service, session):
    service.send([])
    assert sent_body(session)["data"]["name"] == "Accessibility Scan"


def test_send_logs_success(service, caplog):
    with caplog.at_level(logging.INFO, logger="stark_accessibility.report"):
        service.send([StarkIssue("a", "b", "contrast")], "Home")
    assert "Successfully sent 1 accessibility issues (Status code: 200)" in caplog.text


def test_send_logs_bad_status(service, session, caplog):
    session.put.return_value.status_code = 500
    service.send([], "Home")
    assert "Failed to send accessibility report (Status code: 500)" in caplog.text


def test_send_swallows_network_errors(service, session, caplog):
    session.put.side_effect = requests.ConnectionError("connection refused")

    service.send([], "Home")

    assert "Error sending accessibility report: connection refused" in caplog.text


def test_send_swallows_encoding_errors(service, session, monkeypatch, caplog):
    monkeypatch.setattr(report_service, "build_payload", lambda results, name: {"bad": object()})

    service.send([], "Home")

    session.put.assert_not_called()
    assert "Error encoding accessibility report" in caplog.text


def test_send_uses_background_executor_by_default(session):
    service = WebApiReportService("t", session=session)
    service.send([], "Home")
    report_service._default_executor().shutdown(wait=True)
    report_service._background_executor = None
    session.put.assert_called_once()


def test_console_report(capsys):
    ConsoleReportService().send([StarkIssue("Contrast failed", "details", "contrast", element_label="OK")])

    out = capsys.readouterr().out
    assert "--- Found 1 Accessibility Issue(s) ---" in out
    assert "Element Label: OK" in out
    assert "Element Identifier: N/A" in out


def test_send_with_shut_down_executor(session, caplog):
    executor = ThreadPoolExecutor(max_workers=1)
    executor.shutdown(wait=True)
    service = WebApiReportService("t", session=session, executor=executor)

    service.send([], "Home")

    session.put.assert_not_called()
    assert "Error sending accessibility report: cannot schedule new futures after shutdown" in caplog.text


def test_each_send_opens_its_own_session(monkeypatch, executor):
    sessions = []

    def make_session():
        session = MagicMock()
        session.__enter__.return_value = session
        session.put.return_value = MagicMock(status_code=200)
        sessions.append(session)
        return session

    monkeypatch.setattr(requests, "Session", make_session)
    service = WebApiReportService("t", executor=executor)

    service.send([], "First")
    service.send([], "Second")

    assert len(sessions) == 2
    assert all(session.put.call_count == 1 for session in sessions)
    assert all(session.__exit__.called for session in sessions)
