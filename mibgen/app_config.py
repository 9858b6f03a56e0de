"""Tool settings for mibgen, loaded with Dynaconf.

Settings live in ``mibgen.yaml`` (or ``data/mibgen.yaml``)::

    logger: {level: INFO, log_dir: logs}
    compiled_mibs_dir: {linux: /var/lib/mibgen/compiled}   # or a plain path
    mibs: [IF-MIB]
    tree_file: tree.json

Any key can be overridden from the environment as ``MIBGEN_<KEY>``.
"""

import sys
from collections.abc import Mapping
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional

from dynaconf import Dynaconf

DEFAULT_CONFIG_FILE = "mibgen.yaml"
ENVVAR_PREFIX = "MIBGEN"


def resolve_config_path(config_path: str = DEFAULT_CONFIG_FILE) -> Path:
    """Locate the settings file; the default name prefers data/mibgen.yaml.

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    path = Path(config_path)
    if config_path == DEFAULT_CONFIG_FILE:
        data_path = Path("data") / DEFAULT_CONFIG_FILE
        if data_path.exists():
            path = data_path
    if not path.exists():
        raise FileNotFoundError(f"Config file {config_path} not found")
    return path


class AppConfig:
    """Singleton holding the mibgen tool settings."""

    _instance = None
    _lock = Lock()
    _initialized = False

    def __new__(cls, config_path: str = DEFAULT_CONFIG_FILE) -> "AppConfig":
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._initialized = False
            return cls._instance

    def __init__(self, config_path: str = DEFAULT_CONFIG_FILE) -> None:
        if self.__class__._initialized:
            return
        self.config_path = resolve_config_path(config_path)
        self.settings = Dynaconf(
            settings_files=[str(self.config_path)],
            environments=False,
            envvar_prefix=ENVVAR_PREFIX,
        )
        self.__class__._initialized = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)

    def logger_settings(self) -> Dict[str, Any]:
        """The ``logger`` block as a plain dict, empty if absent."""
        block = self.get("logger")
        if block is None:
            return {}
        if not isinstance(block, Mapping):
            raise ValueError(f"'logger' in {self.config_path} must be a mapping")
        return {str(k): v for k, v in block.items()}

    def compiled_mibs_dir(self) -> Optional[str]:
        """Directory of compiled MIBs for this platform.

        The setting is either a path or a mapping keyed by ``sys.platform``
        ('linux', 'darwin', 'win32').
        """
        value = self.get("compiled_mibs_dir")
        if isinstance(value, Mapping):
            value = value.get(sys.platform)
        if value is None or value == "":
            return None
        if not isinstance(value, (str, Path)):
            raise ValueError(f"'compiled_mibs_dir' in {self.config_path} must be a path")
        return str(value)

    def mib_modules(self) -> List[str]:
        """MIB modules to load; empty means every compiled module."""
        value = self.get("mibs")
        if not value:
            return []
        if isinstance(value, str):
            return [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"'mibs' in {self.config_path} must be a list")
        return [str(m) for m in value]

    def tree_file(self) -> Optional[str]:
        value = self.get("tree_file")
        return str(value) if value else None

    def reload(self) -> None:
        """Reload the settings from disk."""
        self.settings.reload()
