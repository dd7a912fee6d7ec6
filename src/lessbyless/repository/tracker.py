# SPDX-License-Identifier: MIT

import logging
import os
import threading
from contextlib import contextmanager
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, cast

from filelock import FileLock
from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from lessbyless import configuration
from lessbyless.model.entity_id import EntityId, generate_entity_id
from lessbyless.model.tracker import TrackerRecord

logger = logging.getLogger(__name__)


class TrackerRepository:
    """
    Owns the ordered tracker collection and its YAML file.

    The whole collection is kept under a single "trackers" key. Several
    processes may share the file (a running `watch` next to one-off commands),
    so every change is a transaction: take the file lock, re-read the file,
    apply the change and write it back before releasing the lock. Reads are
    served from the last loaded copy until reload() is called.

    Records handed out are copies; changes come back through save_new_tracker,
    replace_tracker, update_tracker or delete_tracker.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path
        self._trackers: Optional[list[TrackerRecord]] = None
        self.is_dirty = False
        self._collection_lock = threading.RLock()
        self._record_locks: dict[EntityId, threading.Lock] = {}
        self._file_locks: dict[Path, FileLock] = {}

    @property
    def path(self) -> Path:
        if self._path is not None:
            return self._path
        return configuration.DATA_TRACKERS_PATH

    @property
    def trackers(self) -> list[TrackerRecord]:
        with self._collection_lock:
            if self._trackers is None:
                self.__load_data()
            if self._trackers is None:
                raise ValueError()
            return self._trackers

    def reload(self) -> None:
        """Drop the loaded copy so the next read sees what other processes wrote."""
        with self._collection_lock:
            self._trackers = None

    def __load_data(self) -> None:
        self._trackers = []
        self.is_dirty = False
        if not self.path.is_file():
            return

        raw = load(self.path.read_text(), Loader=Loader)
        if raw is None:
            return
        for raw_tracker in raw.get("trackers") or []:
            if not isinstance(raw_tracker, dict):
                logger.warning("Skipping unreadable tracker record in %s", self.path)
                continue
            self._trackers.append(
                self.__convert_tracker_for_deserialization(raw_tracker)
            )
        logger.debug("Loaded %d trackers from %s", len(self._trackers), self.path)

    def __save_data(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        serializable = {"trackers": [dict(tracker) for tracker in self.trackers]}
        content = dump(serializable, Dumper=Dumper, sort_keys=False)

        # Readers never take the file lock, so replace the file in one step
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp.write_text(content)
            os.replace(tmp, self.path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug("Saved %d trackers to %s", len(self.trackers), self.path)

    def __file_lock(self) -> FileLock:
        path = self.path
        if path not in self._file_locks:
            path.parent.mkdir(parents=True, exist_ok=True)
            self._file_locks[path] = FileLock(path.with_name(path.name + ".lock"))
        return self._file_locks[path]

    @contextmanager
    def __transaction(self) -> Iterator[list[TrackerRecord]]:
        """
        Hold the file lock around a fresh load, the caller's change and the save.

        The caller sets is_dirty when it changed something. If the caller
        raises, nothing is written and the loaded copy is discarded.
        """
        with self._collection_lock, self.__file_lock():
            self.__load_data()
            try:
                yield self.trackers
            except BaseException:
                self._trackers = None
                raise
            if self.is_dirty:
                self.__save_data()
                self.is_dirty = False

    def flush(self) -> bool:
        """Write back records that were migrated on load. Changes are already saved."""
        with self._collection_lock:
            if self._trackers is None or not self.is_dirty:
                return False
            with self.__transaction():
                flushed = self.is_dirty
            return flushed

    def __convert_tracker_for_deserialization(
        self, tracker: dict[str, Any]
    ) -> TrackerRecord:
        deserializable_tracker = tracker

        # Migration: records written before these fields existed
        if deserializable_tracker.get("kind") == "cold_turkey":
            if deserializable_tracker.get("notified_milestones") is None:
                deserializable_tracker["notified_milestones"] = []
                self.is_dirty = True
            if deserializable_tracker.get("reset_history") is None:
                deserializable_tracker["reset_history"] = []
                self.is_dirty = True
        elif deserializable_tracker.get("kind") == "dose_decrease":
            if deserializable_tracker.get("dose_logs") is None:
                deserializable_tracker["dose_logs"] = []
                self.is_dirty = True
            # Migration: logs used to be identified by their timestamp only
            for log in deserializable_tracker["dose_logs"]:
                if isinstance(log, dict) and "id" not in log:
                    log["id"] = generate_entity_id()
                    self.is_dirty = True

        return cast(TrackerRecord, deserializable_tracker)

    def __lock_for(self, id: EntityId) -> threading.Lock:
        with self._collection_lock:
            if id not in self._record_locks:
                self._record_locks[id] = threading.Lock()
            return self._record_locks[id]

    @staticmethod
    def __index_of(trackers: list[TrackerRecord], id: EntityId) -> Optional[int]:
        for index, tracker in enumerate(trackers):
            if tracker["id"] == id:
                return index
        return None

    def save_new_tracker(self, tracker: TrackerRecord) -> EntityId:
        with self.__transaction() as trackers:
            trackers.append(deepcopy(tracker))
            self.is_dirty = True
        return tracker["id"]

    def replace_tracker(self, tracker: TrackerRecord) -> bool:
        with self.__transaction() as trackers:
            index = self.__index_of(trackers, tracker["id"])
            if index is None:
                return False
            trackers[index] = deepcopy(tracker)
            self.is_dirty = True
        return True

    def update_tracker(
        self,
        id: EntityId,
        update: Callable[[TrackerRecord], TrackerRecord],
    ) -> Optional[TrackerRecord]:
        """
        Read-modify-write one tracker against the current file contents.

        The update function sees the record as stored right now, including
        changes made by other processes. Returns the stored result, or None if
        the tracker does not exist.
        """
        with self.__lock_for(id), self.__transaction() as trackers:
            index = self.__index_of(trackers, id)
            if index is None:
                return None
            current = trackers[index]
            updated = update(deepcopy(current))
            if updated != current:
                trackers[index] = deepcopy(updated)
                self.is_dirty = True
            return deepcopy(updated)

    def delete_tracker(self, id: EntityId) -> bool:
        with self.__transaction() as trackers:
            index = self.__index_of(trackers, id)
            if index is None:
                return False
            del trackers[index]
            self._record_locks.pop(id, None)
            self.is_dirty = True
        return True

    def get_all_trackers(self) -> list[TrackerRecord]:
        with self._collection_lock:
            return deepcopy(self.trackers)

    def get_tracker(self, id: EntityId) -> Optional[TrackerRecord]:
        with self._collection_lock:
            index = self.__index_of(self.trackers, id)
            if index is None:
                return None
            return deepcopy(self.trackers[index])


TRACKER_REPO = TrackerRepository()
