"""Load hook configuration files from YAML."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..exceptions import ConfigFileNotFoundError, ConfigParseError, ConfigurationError, HookConfigError
from ..models.precommit_config import PrecommitConfig
from .discovery import resolve_config_path

logger = logging.getLogger(__name__)


def load_raw_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a configuration file into a plain mapping without building models.

    Raises:
        ConfigFileNotFoundError: If path does not exist
        ConfigParseError: If the file is not valid YAML
        ConfigurationError: If the document is empty or not a mapping
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigFileNotFoundError(config_path=path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        column = mark.column + 1 if mark is not None else None
        position = f" at line {line}, column {column}" if line is not None else ""
        raise ConfigParseError(
            f"Invalid YAML in {path}{position}: {getattr(e, 'problem', None) or e}",
            config_path=path, line=line, column=column, original_error=e,
        ) from e
    except UnicodeDecodeError as e:
        raise ConfigParseError(f"{path} is not UTF-8 text", config_path=path, original_error=e) from e

    if not raw:
        raise ConfigurationError(f"Empty or invalid YAML in {path}", config_path=path)
    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"Top level of {path} must be a mapping, got {type(raw).__name__}", config_path=path
        )

    logger.debug("Loaded %d top-level keys from %s", len(raw), path)
    return raw


def load_config(path: Union[str, Path]) -> PrecommitConfig:
    """Load and build a PrecommitConfig.

    Raises:
        ConfigFileNotFoundError: If path does not exist
        ConfigParseError: If the file is not valid YAML
        ConfigurationError: If the document is empty or not a mapping
        HookConfigError: If the document breaks the hook schema
    """
    path = Path(path)
    raw = load_raw_config(path)

    try:
        config = PrecommitConfig.from_dict(raw, source_path=path)
    except (ValueError, TypeError) as e:
        raise HookConfigError(f"Invalid hook configuration in {path}: {e}", config_path=path,
                              original_error=e) from e

    logger.debug("Built %s", config)
    return config


def dump_config(config: PrecommitConfig) -> str:
    """Render a configuration back to YAML, keeping key order."""
    return yaml.safe_dump(config.to_dict(), sort_keys=False, default_flow_style=False)


def find_and_load_config(explicit: Optional[Union[str, Path]] = None,
                         start_path: Optional[Union[str, Path]] = None) -> PrecommitConfig:
    """Load the explicit configuration file, or the one discovered above start_path.

    Raises:
        ConfigFileNotFoundError: If no configuration file can be found
        ConfigParseError, ConfigurationError, HookConfigError: As load_config
    """
    return load_config(resolve_config_path(explicit, start_path))
