# SPDX-License-Identifier: MIT

import logging
from copy import deepcopy
from typing import Protocol

import pendulum
from rich.console import Console

from lessbyless.model.notification import Notification
from lessbyless.model.tracker import ColdTurkeyTracker, TrackerRecord
from lessbyless.repository.tracker import TrackerRepository
from lessbyless.service.milestone import evaluate_cold_turkey_progress

logger = logging.getLogger(__name__)

MILESTONE_TITLE = "Milestone reached"


class Notifier(Protocol):
    def notify(self, title: str, body: str) -> None: ...


class ConsoleNotifier:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def notify(self, title: str, body: str) -> None:
        self.console.print(f"[bold green]{title}[/bold green] {body}")


class NullNotifier:
    def notify(self, title: str, body: str) -> None:
        return None


def scan_new_milestones(
    tracker: ColdTurkeyTracker, now: pendulum.DateTime
) -> tuple[ColdTurkeyTracker, list[Notification]]:
    """
    Find milestones achieved since the last scan.

    Returns the tracker with those milestones recorded as notified, plus one
    notification per milestone. Scanning again without crossing a new
    milestone returns the tracker unchanged and no notifications.
    """
    notified = set(tracker.get("notified_milestones") or [])
    progress = evaluate_cold_turkey_progress(tracker["started_at"], now)

    new_milestones = [
        milestone
        for milestone in progress["achieved"]
        if milestone["duration_ms"] not in notified
    ]
    if not new_milestones:
        return tracker, []

    updated = deepcopy(tracker)
    updated["notified_milestones"] = sorted(
        notified | {milestone["duration_ms"] for milestone in new_milestones}
    )
    notifications: list[Notification] = [
        {
            "title": MILESTONE_TITLE,
            "body": f"{tracker['name']}: {milestone['label']} cold turkey!",
        }
        for milestone in new_milestones
    ]
    return updated, notifications


def dispatch_notifications(
    notifier: Notifier, notifications: list[Notification]
) -> int:
    """Send each notification; a failing send is logged and does not stop the rest."""
    sent = 0
    for notification in notifications:
        try:
            notifier.notify(notification["title"], notification["body"])
        except Exception:
            logger.exception("Failed to send notification: %s", notification["title"])
            continue
        sent += 1
    return sent


def scan_tracker(
    tracker: TrackerRecord, now: pendulum.DateTime
) -> tuple[TrackerRecord, list[Notification]]:
    if tracker["kind"] != "cold_turkey":
        return tracker, []
    return scan_new_milestones(tracker, now)


def run_milestone_scan(
    repository: TrackerRepository,
    notifier: Notifier,
    now: pendulum.DateTime,
) -> list[Notification]:
    """
    Scan every cold turkey tracker and notify for newly reached milestones.

    Each tracker's notified set is checked and updated inside one locked
    update, so overlapping scans cannot notify the same milestone twice.
    """
    sent: list[Notification] = []
    for tracker in repository.get_all_trackers():
        if tracker["kind"] != "cold_turkey":
            continue

        pending: list[Notification] = []

        def update(current: TrackerRecord) -> TrackerRecord:
            updated, notifications = scan_tracker(current, now)
            pending.extend(notifications)
            return updated

        repository.update_tracker(tracker["id"], update)
        if pending:
            logger.info(
                "Tracker %s reached %d new milestone(s)", tracker["id"], len(pending)
            )
            dispatch_notifications(notifier, pending)
            sent.extend(pending)
    return sent
