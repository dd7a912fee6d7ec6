# SPDX-License-Identifier: MIT

import logging
import threading

import typer
from rich.console import Console
from rich.live import Live
from rich.text import Text

from lessbyless.repository.configuration import CONFIGURATION_REPO
from lessbyless.repository.tracker import TRACKER_REPO
from lessbyless.service.notification import (
    ConsoleNotifier,
    NullNotifier,
    Notifier,
    run_milestone_scan,
)
from lessbyless.service.poll import Cadence, RepeatingTimer
from lessbyless.terminal.tracker import get_tracker_or_exit
from lessbyless.time import now_utc
from lessbyless.view.tracker import tracker_panel

logger = logging.getLogger(__name__)


def get_notifier(console: Console) -> Notifier:
    if CONFIGURATION_REPO.get_config()["notifications_enabled"]:
        return ConsoleNotifier(console)
    return NullNotifier()


def watch(id: str) -> None:
    """Show a tracker live, refreshing every tick and scanning milestones."""
    tracker_id = get_tracker_or_exit(id)["id"]
    config = CONFIGURATION_REPO.get_config()
    scan_cadence = Cadence(config["milestone_scan_seconds"])

    console = Console()
    notifier = get_notifier(console)

    with Live(console=console, auto_refresh=False) as live:

        def refresh() -> None:
            now = now_utc()
            # Other commands may have logged doses or reset the streak since
            TRACKER_REPO.reload()
            if scan_cadence.due():
                run_milestone_scan(TRACKER_REPO, notifier, now)

            tracker = TRACKER_REPO.get_tracker(tracker_id)
            if tracker is None:
                live.update(Text("Tracker not found"), refresh=True)
                return
            live.update(
                tracker_panel(
                    tracker,
                    now,
                    parts=config["breakdown_parts"],
                    mode=config["breakdown_mode"],
                ),
                refresh=True,
            )

        refresh()
        with RepeatingTimer(config["tick_seconds"], refresh, name="watch"):
            try:
                threading.Event().wait()
            except KeyboardInterrupt:
                logger.debug("Stopped watching tracker %s", tracker_id)


def scan() -> None:
    """Check every cold turkey tracker once for newly reached milestones."""
    console = Console()
    sent = run_milestone_scan(TRACKER_REPO, get_notifier(console), now_utc())
    if not sent:
        typer.echo("No new milestones")
