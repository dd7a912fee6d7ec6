# SPDX-License-Identifier: MIT

import threading

from conftest import make_cold_turkey, make_dose_decrease
from lessbyless.repository.tracker import TrackerRepository
from lessbyless.service.notification import (
    dispatch_notifications,
    run_milestone_scan,
    scan_new_milestones,
    scan_tracker,
)
from lessbyless.time import DAY_MS, HOUR_MS


class RecordingNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def notify(self, title: str, body: str) -> None:
        with self._lock:
            self.sent.append((title, body))


class FailingNotifier:
    def notify(self, title: str, body: str) -> None:
        raise RuntimeError("dispatcher offline")


def test_scan_reports_each_new_milestone(now):
    tracker = make_cold_turkey(now.subtract(hours=36), name="Smoking")

    updated, notifications = scan_new_milestones(tracker, now)

    assert updated["notified_milestones"] == [12 * HOUR_MS, DAY_MS]
    assert notifications == [
        {"title": "Milestone reached", "body": "Smoking: 12 hours cold turkey!"},
        {"title": "Milestone reached", "body": "Smoking: 1 day cold turkey!"},
    ]
    assert tracker["notified_milestones"] == []


def test_rescanning_without_progress_is_a_no_op(now):
    tracker = make_cold_turkey(now.subtract(hours=36))
    updated, _ = scan_new_milestones(tracker, now)

    again, notifications = scan_new_milestones(updated, now.add(minutes=1))

    assert notifications == []
    assert again == updated


def test_only_newly_crossed_milestones_are_reported(now):
    tracker = make_cold_turkey(now.subtract(hours=36))
    updated, _ = scan_new_milestones(tracker, now)

    _, notifications = scan_new_milestones(updated, now.add(hours=12))

    assert [n["body"] for n in notifications] == ["Smoking: 2 days cold turkey!"]


def test_missing_notified_set_is_treated_as_empty(now):
    tracker = make_cold_turkey(now.subtract(hours=13))
    del tracker["notified_milestones"]

    updated, notifications = scan_new_milestones(tracker, now)

    assert len(notifications) == 1
    assert updated["notified_milestones"] == [12 * HOUR_MS]


def test_dose_trackers_are_not_scanned(now):
    tracker = make_dose_decrease(now.subtract(days=30))
    assert scan_tracker(tracker, now) == (tracker, [])


def test_failing_dispatch_does_not_stop_others():
    notifications = [{"title": "a", "body": "b"}, {"title": "c", "body": "d"}]
    assert dispatch_notifications(FailingNotifier(), notifications) == 0
    assert dispatch_notifications(RecordingNotifier(), notifications) == 2


def test_run_milestone_scan_persists_notified_set(tmp_path, now):
    repository = TrackerRepository(tmp_path / "trackers.yaml")
    tracker = make_cold_turkey(now.subtract(hours=36))
    repository.save_new_tracker(tracker)
    repository.save_new_tracker(make_dose_decrease(now.subtract(days=3)))
    notifier = RecordingNotifier()

    sent = run_milestone_scan(repository, notifier, now)
    resent = run_milestone_scan(repository, notifier, now)

    assert len(sent) == 2
    assert resent == []
    assert len(notifier.sent) == 2
    stored = repository.get_tracker(tracker["id"])
    assert stored["notified_milestones"] == [12 * HOUR_MS, DAY_MS]


def test_concurrent_scans_notify_once(tmp_path, now):
    repository = TrackerRepository(tmp_path / "trackers.yaml")
    repository.save_new_tracker(make_cold_turkey(now.subtract(days=6)))
    notifier = RecordingNotifier()
    start = threading.Barrier(8)

    def worker() -> None:
        start.wait()
        run_milestone_scan(repository, notifier, now)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    # 12 hours, 1 day, 2 days, 3 days, 5 days
    assert len(notifier.sent) == 5


def test_failed_dispatch_still_marks_milestones(tmp_path, now):
    repository = TrackerRepository(tmp_path / "trackers.yaml")
    tracker = make_cold_turkey(now.subtract(hours=13))
    repository.save_new_tracker(tracker)

    run_milestone_scan(repository, FailingNotifier(), now)

    assert repository.get_tracker(tracker["id"])["notified_milestones"] == [
        12 * HOUR_MS
    ]
