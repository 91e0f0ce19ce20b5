"""Webhook notifications for CI test results.

Three destinations are supported: a Slack incoming webhook, an email gateway
that accepts ``{to, subject, body}`` over HTTP, and a generic JSON webhook.
Each sender performs exactly one POST; there is no retry.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_TITLE_LINK = "https://github.com"
SUCCESS_COLOR = "36a64f"
FAILURE_COLOR = "ff0000"


class NotificationError(Exception):
    """Raised when a notification could not be delivered."""


class TestResults(BaseModel):
    """Summary of a CI test run."""

    __test__ = False  # not a pytest test class

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    passed: int
    failed: int
    total: int
    coverage: Optional[float] = None
    branch: Optional[str] = None
    commit_hash: Optional[str] = Field(default=None, alias="commitHash")
    run_url: Optional[str] = Field(default=None, alias="runUrl")

    @property
    def succeeded(self) -> bool:
        return self.failed == 0

    def coverage_label(self) -> str:
        return f"{self.coverage:g}%" if self.coverage is not None else "N/A"


class NotificationResult(BaseModel):
    success: bool
    message: str


class NotificationService:
    """Send test-result notifications over HTTP.

    Args:
        session: Object exposing ``post(url, json=..., timeout=...)``; defaults
            to a fresh ``requests.Session``.
        timeout: Seconds to wait for the remote endpoint.
    """

    def __init__(self, session: Optional[Any] = None, timeout: float = 10.0) -> None:
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _post(self, kind: str, webhook_url: str, payload: dict[str, Any]) -> requests.Response:
        try:
            response = self.session.post(webhook_url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("%s notification request failed", kind, extra={"error": str(exc)})
            raise NotificationError(f"{kind} notification request failed: {exc}") from exc
        logger.info("%s notification answered", kind, extra={"status_code": response.status_code})
        return response

    @staticmethod
    def build_slack_payload(results: TestResults, now: Optional[float] = None) -> dict[str, Any]:
        status = "SUCCESS" if results.succeeded else "FAILURE"
        fields = [
            ("Total Tests", str(results.total)),
            ("Passed", str(results.passed)),
            ("Failed", str(results.failed)),
            ("Coverage", results.coverage_label()),
            ("Branch", results.branch or "unknown"),
            ("Commit", (results.commit_hash or "unknown")[:7]),
        ]
        return {
            "attachments": [
                {
                    "fallback": f"Test Results: {status}",
                    "color": SUCCESS_COLOR if results.succeeded else FAILURE_COLOR,
                    "title": f"Test Results - {status}",
                    "title_link": results.run_url or DEFAULT_TITLE_LINK,
                    "fields": [{"title": title, "value": value, "short": True} for title, value in fields],
                    "ts": int(now if now is not None else time.time()),
                }
            ]
        }

    @staticmethod
    def build_email_payload(results: TestResults, recipient_email: Optional[str]) -> dict[str, Any]:
        status = "PASSED" if results.succeeded else "FAILED"
        closing = "All tests passed!" if results.succeeded else "Please check the CI logs for details."
        body = "\n".join(
            [
                "Test Execution Summary",
                "======================",
                "",
                f"Status: {status}",
                f"Total Tests: {results.total}",
                f"Passed: {results.passed}",
                f"Failed: {results.failed}",
                f"Code Coverage: {results.coverage_label()}",
                f"Branch: {results.branch or 'unknown'}",
                "",
                closing,
                "",
                "--",
                "Automated CI Notification",
            ]
        )
        return {"to": recipient_email, "subject": f"[CI] Test Results - {status}", "body": body}

    @staticmethod
    def build_webhook_payload(results: TestResults, now: Optional[datetime] = None) -> dict[str, Any]:
        timestamp = now or datetime.now(timezone.utc)
        return {
            "event": "test_completed",
            "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
            "results": results.model_dump(by_alias=True, exclude_none=True),
        }

    def send_slack_notification(self, webhook_url: Optional[str], results: TestResults) -> NotificationResult:
        """
        Post a Slack attachment summarising ``results``.

        Raises:
            NotificationError: If the URL is missing, the request fails, or Slack
                answers anything but 200.
        """
        if not webhook_url:
            raise NotificationError("Slack webhook URL not provided")

        response = self._post("Slack", webhook_url, self.build_slack_payload(results))
        if response.status_code != 200:
            raise NotificationError(f"Slack API returned {response.status_code}")
        return NotificationResult(success=True, message="Slack notification sent")

    def send_email_notification(
        self,
        webhook_url: Optional[str],
        results: TestResults,
        recipient_email: Optional[str],
    ) -> NotificationResult:
        """
        Ask an email gateway to mail a plain-text summary to ``recipient_email``.

        Raises:
            NotificationError: If the URL is missing, the request fails, or the
                gateway answers outside 2xx.
        """
        if not webhook_url:
            raise NotificationError("Email webhook URL not provided")

        payload = self.build_email_payload(results, recipient_email)
        response = self._post("Email", webhook_url, payload)
        if not 200 <= response.status_code < 300:
            raise NotificationError(f"Webhook returned {response.status_code}")
        return NotificationResult(success=True, message="Email notification sent")

    def send_webhook_notification(self, webhook_url: Optional[str], results: TestResults) -> NotificationResult:
        if not webhook_url:
            raise NotificationError("Webhook URL not provided")

        response = self._post("Webhook", webhook_url, self.build_webhook_payload(results))
        if not 200 <= response.status_code < 300:
            raise NotificationError(f"Webhook returned {response.status_code}")
        return NotificationResult(success=True, message="Webhook notification sent")
