"""Hook configuration discovery and loading."""

from .discovery import CONFIG_FILENAMES, ConfigDiscovery, discover_config, resolve_config_path
from .loader import dump_config, find_and_load_config, load_config, load_raw_config

__all__ = [
    "CONFIG_FILENAMES",
    "ConfigDiscovery",
    "discover_config",
    "dump_config",
    "find_and_load_config",
    "load_config",
    "load_raw_config",
    "resolve_config_path",
]
