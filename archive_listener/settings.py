"""Settings - JSON configuration of the listener"""

import copy
import json
import logging
from pathlib import Path

from .fileops import TMP_PREFIX
from .mover import CONFLICT_POLICIES, CONFLICT_REFUSE, DirectoryMover
from .server import DEFAULT_HOST, DEFAULT_PORT, ServerConfig

logger = logging.getLogger(__name__)


class Config:
    """Application configuration"""

    DEFAULT_CONFIG = {
        "server": {
            "host": DEFAULT_HOST,
            "port": DEFAULT_PORT
        },
        "move": {
            "tmp_prefix": TMP_PREFIX,
            "on_conflict": CONFLICT_REFUSE,
            "verify_copy": True
        },
        "size": {
            "missing_as_zero": True
        },
        "log_level": "INFO"
    }

    def __init__(self, config_path: str):
        self.config_path = Path(config_path)
        self._config = copy.deepcopy(self.DEFAULT_CONFIG)
        self.load()

    def load(self):
        """Load configuration from file"""
        if self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Ignoring unreadable config %s: %s", self.config_path, e)
                return
            if not isinstance(loaded, dict):
                logger.warning("Ignoring config %s: not a JSON object", self.config_path)
                return
            # Merge with defaults
            self._deep_merge(self._config, loaded)

    def save(self):
        """Save configuration to file"""
        with open(self.config_path, "w", encoding="utf-8") as f:
            json.dump(self._config, f, ensure_ascii=False, indent=2)

    def _deep_merge(self, base: dict, update: dict):
        """Deep merge update into base"""
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    # Server settings
    @property
    def host(self) -> str:
        return self._config["server"]["host"]

    @host.setter
    def host(self, value: str):
        self._config["server"]["host"] = value

    @property
    def port(self) -> int:
        try:
            return int(self._config["server"]["port"])
        except (TypeError, ValueError):
            logger.warning("Invalid port %r, using %d", self._config["server"]["port"], DEFAULT_PORT)
            return DEFAULT_PORT

    @port.setter
    def port(self, value: int):
        self._config["server"]["port"] = value

    # Move settings
    @property
    def tmp_prefix(self) -> str:
        return self._config["move"]["tmp_prefix"] or TMP_PREFIX

    @tmp_prefix.setter
    def tmp_prefix(self, value: str):
        self._config["move"]["tmp_prefix"] = value

    @property
    def on_conflict(self) -> str:
        value = self._config["move"]["on_conflict"]
        if value not in CONFLICT_POLICIES:
            logger.warning("Unknown conflict policy %r, using %s", value, CONFLICT_REFUSE)
            return CONFLICT_REFUSE
        return value

    @on_conflict.setter
    def on_conflict(self, value: str):
        self._config["move"]["on_conflict"] = value

    @property
    def verify_copy(self) -> bool:
        return bool(self._config["move"]["verify_copy"])

    @verify_copy.setter
    def verify_copy(self, value: bool):
        self._config["move"]["verify_copy"] = value

    # Size settings
    @property
    def missing_as_zero(self) -> bool:
        return bool(self._config["size"]["missing_as_zero"])

    @missing_as_zero.setter
    def missing_as_zero(self, value: bool):
        self._config["size"]["missing_as_zero"] = value

    @property
    def log_level(self) -> str:
        value = str(self._config["log_level"]).upper()
        if not isinstance(logging.getLevelName(value), int):
            logger.warning("Unknown log level %r, using INFO", value)
            return "INFO"
        return value

    @log_level.setter
    def log_level(self, value: str):
        self._config["log_level"] = value

    def server_config(self) -> ServerConfig:
        """Build the HTTP server configuration"""
        mover = DirectoryMover(
            tmp_prefix=self.tmp_prefix,
            on_conflict=self.on_conflict,
            verify_copy=self.verify_copy,
            missing_as_zero=self.missing_as_zero
        )
        return ServerConfig(host=self.host, port=self.port, mover=mover)
