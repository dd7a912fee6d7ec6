# SPDX-License-Identifier: MIT

import logging
from copy import deepcopy
from typing import Any, Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from lessbyless import configuration

logger = logging.getLogger(__name__)

VALID_BREAKDOWN_MODES = ["trim", "pad"]


class ConfigurationValidationError(Exception):
    """Raised when a configuration value is rejected."""

    pass


class ConfigurationRepository:
    def __init__(self) -> None:
        self._config: Optional[configuration.Configuration] = None
        self.is_dirty = False

    @property
    def config(self) -> configuration.Configuration:
        if self._config is None:
            self.__load_data()
        if self._config is None:
            raise ValueError()
        return self._config

    def __load_data(self) -> None:
        loaded: Optional[dict[str, Any]] = None
        if configuration.APP_CONFIG_PATH.is_file():
            loaded = load(configuration.APP_CONFIG_PATH.read_text(), Loader=Loader)

        config = configuration.get_default_configuration()
        if loaded is None:
            self._config = config
            return

        # Migration: fill in any setting missing from an older config file
        missing = [key for key in config if key not in loaded]
        if missing:
            logger.debug("Defaulting missing configuration keys: %s", missing)
        config.update(loaded)  # type: ignore[typeddict-item]
        self._config = config

    def __save_data(self, config: configuration.Configuration) -> None:
        configuration.APP_CONFIG_PATH.write_text(dump(dict(config), Dumper=Dumper))

    def flush(self) -> bool:
        if self._config is not None and self.is_dirty:
            self.__save_data(self._config)
            self.is_dirty = False
            return True
        return False

    def get_config(self) -> configuration.Configuration:
        return deepcopy(self.config)

    def update_config(
        self,
        data_path: Optional[str] = None,
        remove_data_path: bool = False,
        tick_seconds: Optional[float] = None,
        milestone_scan_seconds: Optional[float] = None,
        breakdown_parts: Optional[int] = None,
        breakdown_mode: Optional[str] = None,
        notifications_enabled: Optional[bool] = None,
        widget_tracker_id: Optional[str] = None,
        clear_widget_tracker: bool = False,
    ) -> None:
        if tick_seconds is not None and tick_seconds <= 0:
            raise ConfigurationValidationError("tick_seconds must be greater than 0.")
        if milestone_scan_seconds is not None and milestone_scan_seconds <= 0:
            raise ConfigurationValidationError(
                "milestone_scan_seconds must be greater than 0."
            )
        if breakdown_parts is not None and breakdown_parts < 1:
            raise ConfigurationValidationError("breakdown_parts must be at least 1.")
        if breakdown_mode is not None and breakdown_mode not in VALID_BREAKDOWN_MODES:
            raise ConfigurationValidationError(
                f"Invalid breakdown mode: {breakdown_mode}. "
                f"Valid options: {', '.join(VALID_BREAKDOWN_MODES)}"
            )

        self.is_dirty = True

        if data_path is not None:
            self.config["data_path"] = data_path
        if remove_data_path:
            self.config["data_path"] = None
        if tick_seconds is not None:
            self.config["tick_seconds"] = tick_seconds
        if milestone_scan_seconds is not None:
            self.config["milestone_scan_seconds"] = milestone_scan_seconds
        if breakdown_parts is not None:
            self.config["breakdown_parts"] = breakdown_parts
        if breakdown_mode is not None:
            self.config["breakdown_mode"] = breakdown_mode  # type: ignore[typeddict-item]
        if notifications_enabled is not None:
            self.config["notifications_enabled"] = notifications_enabled
        if widget_tracker_id is not None:
            self.config["widget_tracker_id"] = widget_tracker_id
        if clear_widget_tracker:
            self.config["widget_tracker_id"] = None


CONFIGURATION_REPO = ConfigurationRepository()
