# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Literal, Optional, TypedDict

from yaml import load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]
import platformdirs

APP_NAME = "lessbyless"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"

# These will be set dynamically by load_data_path_configuration()
DATA_PATH: Path = platformdirs.user_data_path(APP_NAME)
DATA_TRACKERS_PATH: Path = DATA_PATH / "trackers.yaml"


class Configuration(TypedDict):
    data_path: Optional[str]
    tick_seconds: float
    milestone_scan_seconds: float
    breakdown_parts: int
    breakdown_mode: Literal["trim", "pad"]
    notifications_enabled: bool
    widget_tracker_id: Optional[str]


def get_default_configuration() -> Configuration:
    return {
        "data_path": None,
        "tick_seconds": 1.0,
        "milestone_scan_seconds": 60.0,
        "breakdown_parts": 3,
        "breakdown_mode": "trim",
        "notifications_enabled": True,
        "widget_tracker_id": None,
    }


def load_data_path_configuration() -> None:
    """
    Load the configuration and set the DATA_PATH variables dynamically.

    This must be called after the config file exists and before the tracker
    repository loads.
    """
    global DATA_PATH, DATA_TRACKERS_PATH

    if not APP_CONFIG_PATH.is_file():
        # Config doesn't exist yet, use defaults
        return

    config: Optional[Configuration] = load(APP_CONFIG_PATH.read_text(), Loader=Loader)
    if config is None:
        return
    data_path_setting = config.get("data_path")

    if data_path_setting is not None:
        DATA_PATH = Path(data_path_setting)
        DATA_TRACKERS_PATH = DATA_PATH / "trackers.yaml"
