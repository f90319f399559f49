import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..const import (
    DEFAULT_NAMESPACE,
    DEFAULT_SERVICE_ACCOUNT,
    DEFAULT_SHELL,
    DEFAULT_STORAGE_CLASS,
    DEFAULT_STORAGE_SIZE,
    DEFAULT_WORKDIR,
)
from ..errors import KdevError

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "kdev"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.yml"
DEFAULT_CONFIG: Dict[str, Any] = {
    "namespace": DEFAULT_NAMESPACE,
    "devpod": {
        "service_account": DEFAULT_SERVICE_ACCOUNT,
        "shell": DEFAULT_SHELL,
        "workdir": DEFAULT_WORKDIR,
        "storage_class": DEFAULT_STORAGE_CLASS,
        "storage_size": DEFAULT_STORAGE_SIZE,
    },
}


class Configuration:
    def __init__(self, config_data: Dict[str, Any]):
        self._config = config_data
        self._config.setdefault("devpod", {})

    def _devpod(self, key: str) -> str:
        return self._config["devpod"].get(key) or DEFAULT_CONFIG["devpod"][key]

    @property
    def namespace(self) -> str:
        return self._config.get("namespace") or DEFAULT_NAMESPACE

    @property
    def service_account(self) -> str:
        return self._devpod("service_account")

    @property
    def shell(self) -> str:
        return self._devpod("shell")

    @property
    def workdir(self) -> str:
        return self._devpod("workdir")

    @property
    def storage_class(self) -> str:
        return self._devpod("storage_class")

    @property
    def storage_size(self) -> str:
        return self._devpod("storage_size")


def get_default_config_path() -> Path:
    return DEFAULT_CONFIG_PATH


def deep_merge(source, destination):
    for key, value in source.items():
        if isinstance(value, dict):
            node = destination.setdefault(key, {})
            deep_merge(value, node)
        else:
            destination[key] = value
    return destination


def load_config(config_path: Optional[Path]) -> Configuration:
    config_data = copy.deepcopy(DEFAULT_CONFIG)
    if config_path and config_path.exists():
        try:
            with open(config_path, "r") as f:
                user_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise KdevError(f"Invalid configuration file {config_path}: {e}") from e
        if user_config:
            if not isinstance(user_config, dict):
                raise KdevError(
                    f"Invalid configuration file {config_path}: expected a mapping"
                )
            config_data = deep_merge(user_config, config_data)
    return Configuration(config_data)
