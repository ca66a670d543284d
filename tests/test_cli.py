"""Tests for the click client commands, against a mocked server."""

import json

import httpx
from click.testing import CliRunner

from cli import cli

JOB = {
    "id": "1700000000000000000",
    "description": "backup",
    "executeAt": "2030-01-01T00:00:00+00:00",
    "status": "scheduled",
}


def invoke(args, handler):
    requests = []

    def record(request):
        requests.append(request)
        return handler(request)

    runner = CliRunner()
    result = runner.invoke(cli, args, obj={"transport": httpx.MockTransport(record)})
    return result, requests


class TestClientCommands:
    def test_submit_with_relative_time(self):
        result, requests = invoke(
            ["submit", "--description", "backup", "--at", "+60"],
            lambda request: httpx.Response(201, json=JOB),
        )
        assert result.exit_code == 0
        assert "Job 1700000000000000000 scheduled" in result.output
        body = json.loads(requests[0].content)
        assert requests[0].method == "POST"
        assert requests[0].url.path == "/jobs"
        assert body["description"] == "backup"
        assert body["executeAt"]

    def test_submit_bad_time(self):
        result, requests = invoke(
            ["submit", "--description", "backup", "--at", "soon"],
            lambda request: httpx.Response(201, json=JOB),
        )
        assert result.exit_code == 1
        assert "Invalid --at value" in result.output
        assert requests == []

    def test_list_filters_by_status(self):
        cancelled = dict(JOB, id="2", status="cancelled")
        result, _ = invoke(["list", "--status", "cancelled"], lambda request: httpx.Response(200, json=[JOB, cancelled]))
        assert result.exit_code == 0
        assert "2 | backup | status=cancelled" in result.output
        assert "1700000000000000000" not in result.output

    def test_list_empty(self):
        result, _ = invoke(["list"], lambda request: httpx.Response(200, json=[]))
        assert "No jobs found." in result.output

    def test_show_not_found(self):
        result, requests = invoke(["show", "42"], lambda request: httpx.Response(404, json={"error": "Job not found"}))
        assert result.exit_code == 1
        assert "Job not found (HTTP 404)" in result.output
        assert requests[0].url.path == "/jobs/42"

    def test_cancel(self):
        result, requests = invoke(["cancel", JOB["id"]], lambda request: httpx.Response(200, json=dict(JOB, status="cancelled")))
        assert result.exit_code == 0
        assert requests[0].method == "DELETE"
        assert "cancelled" in result.output

    def test_run(self):
        executed = dict(JOB, status="executed", executedAt="2030-01-01T00:00:01+00:00")
        result, requests = invoke(["run", JOB["id"]], lambda request: httpx.Response(200, json=executed))
        assert result.exit_code == 0
        assert requests[0].url.path == f"/jobs/{JOB['id']}/run"
        assert "executed" in result.output
