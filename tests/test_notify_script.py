"""Tests for the CI notification entry point."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from Notifications.notification import NotificationError, NotificationResult, NotificationService, TestResults
from notify_script import load_results, send_all


class RecordingService(NotificationService):
    """Notifier that records calls instead of performing HTTP requests."""

    def __init__(self, failing: tuple[str, ...] = ()) -> None:
        super().__init__(session=object())
        self.failing = failing
        self.sent: list[tuple[str, Any]] = []

    def _record(self, kind: str, target: Any) -> NotificationResult:
        if kind in self.failing:
            raise NotificationError(f"{kind} is down")
        self.sent.append((kind, target))
        return NotificationResult(success=True, message=f"{kind} sent")

    def send_slack_notification(self, webhook_url, results):
        return self._record("slack", webhook_url)

    def send_email_notification(self, webhook_url, results, recipient_email):
        return self._record("email", recipient_email)

    def send_webhook_notification(self, webhook_url, results):
        return self._record("webhook", webhook_url)


def _results() -> TestResults:
    return TestResults(passed=3, failed=0, total=3)


def test_load_results_fills_ci_metadata(tmp_path: Path) -> None:
    path = tmp_path / "results.json"
    path.write_text(json.dumps({"passed": 5, "failed": 1, "total": 6, "coverage": 71.2}), encoding="utf-8")
    environ = {
        "GITHUB_REF_NAME": "feature/x",
        "GITHUB_SHA": "deadbeefcafe",
        "GITHUB_SERVER_URL": "https://github.com",
        "GITHUB_REPOSITORY": "acme/tickets",
        "GITHUB_RUN_ID": "99",
    }

    results = load_results(path, environ)

    assert results.failed == 1
    assert results.branch == "feature/x"
    assert results.commit_hash == "deadbeefcafe"
    assert results.run_url == "https://github.com/acme/tickets/actions/runs/99"


def test_load_results_keeps_values_from_file(tmp_path: Path) -> None:
    path = tmp_path / "results.json"
    path.write_text(
        json.dumps({"passed": 1, "failed": 0, "total": 1, "branch": "main", "commitHash": "abc"}),
        encoding="utf-8",
    )

    results = load_results(path, {"GITHUB_REF_NAME": "other", "GITHUB_SHA": "zzz"})

    assert results.branch == "main"
    assert results.commit_hash == "abc"


def test_send_all_only_uses_configured_destinations() -> None:
    service = RecordingService()

    failures = send_all(
        service,
        _results(),
        {"SLACK_WEBHOOK_URL": "https://hooks.slack.com/x", "WEBHOOK_URL": "https://example.com/hook"},
    )

    assert failures == []
    assert service.sent == [("slack", "https://hooks.slack.com/x"), ("webhook", "https://example.com/hook")]


def test_send_all_reports_failures_and_continues() -> None:
    service = RecordingService(failing=("slack",))

    failures = send_all(
        service,
        _results(),
        {
            "SLACK_WEBHOOK_URL": "https://hooks.slack.com/x",
            "EMAIL_WEBHOOK_URL": "https://mailer.local/send",
            "NOTIFY_EMAIL": "dev@example.com",
        },
    )

    assert failures == ["slack"]
    assert service.sent == [("email", "dev@example.com")]


def test_send_all_with_nothing_configured() -> None:
    assert send_all(RecordingService(), _results(), {}) == []
