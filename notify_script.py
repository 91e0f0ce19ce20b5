from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence

from dotenv import load_dotenv

from Notifications.notification import NotificationError, NotificationService, TestResults


LOGGER = logging.getLogger(__name__)


def load_results(path: Path, environ: Mapping[str, str]) -> TestResults:
    """Read a results JSON file and fill CI metadata from the environment.

    The GitHub Actions variables ``GITHUB_REF_NAME``, ``GITHUB_SHA`` and
    ``GITHUB_SERVER_URL``/``GITHUB_REPOSITORY``/``GITHUB_RUN_ID`` are used only
    when the file does not already carry branch, commit or run URL.
    """

    data: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
    results = TestResults.model_validate(data)

    updates: dict[str, Any] = {}
    if results.branch is None and environ.get("GITHUB_REF_NAME"):
        updates["branch"] = environ["GITHUB_REF_NAME"]
    if results.commit_hash is None and environ.get("GITHUB_SHA"):
        updates["commit_hash"] = environ["GITHUB_SHA"]
    if results.run_url is None and all(
        environ.get(key) for key in ("GITHUB_SERVER_URL", "GITHUB_REPOSITORY", "GITHUB_RUN_ID")
    ):
        updates["run_url"] = (
            f"{environ['GITHUB_SERVER_URL']}/{environ['GITHUB_REPOSITORY']}/actions/runs/{environ['GITHUB_RUN_ID']}"
        )
    return results.model_copy(update=updates) if updates else results


def send_all(
    service: NotificationService,
    results: TestResults,
    environ: Mapping[str, str],
) -> list[str]:
    """Send every notification whose destination is configured.

    Returns:
        Names of the notifications that failed.
    """

    senders: list[tuple[str, Optional[str], Callable[[str], Any]]] = [
        (
            "slack",
            environ.get("SLACK_WEBHOOK_URL"),
            lambda url: service.send_slack_notification(url, results),
        ),
        (
            "email",
            environ.get("EMAIL_WEBHOOK_URL"),
            lambda url: service.send_email_notification(url, results, environ.get("NOTIFY_EMAIL")),
        ),
        (
            "webhook",
            environ.get("WEBHOOK_URL"),
            lambda url: service.send_webhook_notification(url, results),
        ),
    ]

    failures: list[str] = []
    for name, url, send in senders:
        if not url:
            LOGGER.info("No %s destination configured; skipping.", name)
            continue
        try:
            outcome = send(url)
        except NotificationError as exc:
            LOGGER.error("Failed to send %s notification: %s", name, exc)
            failures.append(name)
            continue
        LOGGER.info(outcome.message)
    return failures


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point used by the CI workflow after the test job."""

    parser = argparse.ArgumentParser(description="Send CI test result notifications.")
    parser.add_argument("results", type=Path, help="JSON file with passed/failed/total/coverage")
    parser.add_argument("--timeout", type=float, default=10.0, help="HTTP timeout in seconds")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    load_dotenv()
    results = load_results(args.results, os.environ)
    failures = send_all(NotificationService(timeout=args.timeout), results, os.environ)
    if failures:
        LOGGER.error("Notifications failed: %s", ", ".join(failures))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
