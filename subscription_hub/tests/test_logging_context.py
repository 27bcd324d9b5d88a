"""Tests for structured logging and request_id propagation."""

import json
import logging

from subscription_hub.core.logging import JsonFormatter
from subscription_hub.tests.helpers import ORGANIZATION, USER


def test_request_id_in_response_and_logs(client, caplog):
    with caplog.at_level(logging.INFO, logger="subscription_hub"):
        response = client.get("/healthz")
    rid = response.headers.get("x-request-id")
    assert rid
    records = [r for r in caplog.records if getattr(r, "request_id", None) == rid]
    assert records, "Expected logs to contain request_id from response"
    assert len({r.request_id for r in records}) == 1


def test_incoming_request_id_is_echoed(client):
    response = client.get("/healthz", headers={"x-request-id": "abc-123"})
    assert response.headers["x-request-id"] == "abc-123"


def test_committed_and_rejected_commands_are_logged(client, caplog):
    with caplog.at_level(logging.INFO, logger="subscription_hub"):
        client.post("/v1/organizations", headers={"X-User-Id": ORGANIZATION}, json={"name": "A", "description": "d"})
        client.post("/v1/plans/1/subscribe", headers={"X-User-Id": USER})

    messages = [r.getMessage() for r in caplog.records]
    assert "registry.organization.created" in messages
    rejected = [r for r in caplog.records if r.getMessage() == "registry.command.rejected"]
    assert rejected and rejected[0].error_code == "not_found"
    assert rejected[0].caller == USER


def test_json_formatter_includes_context():
    record = logging.LogRecord("subscription_hub", logging.INFO, __file__, 1, "hello", None, None)
    record.request_id = "rid-1"
    record.caller = "user"
    payload = json.loads(JsonFormatter().format(record))
    assert payload["message"] == "hello"
    assert payload["request_id"] == "rid-1"
    assert payload["caller"] == "user"
