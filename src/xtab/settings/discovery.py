"""Hook configuration file discovery.

Finds the ``.pre-commit-config.yaml`` governing a directory by walking up
the directory tree, the same way a VCS finds its work tree root.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..exceptions import ConfigFileNotFoundError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".pre-commit-config.yaml", ".pre-commit-config.yml")


class ConfigDiscovery:
    """Locates hook configuration files.

    Args:
        filenames: Candidate file names checked in each directory, in order
    """

    def __init__(self, filenames: tuple = CONFIG_FILENAMES):
        self.filenames = filenames

    def candidates_in(self, directory: Path) -> List[Path]:
        """Existing configuration files directly inside directory."""
        return [directory / name for name in self.filenames if (directory / name).is_file()]

    def discover(self, start_path: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """Walk up from start_path and return the first configuration file found.

        Args:
            start_path: Starting directory (defaults to current directory)

        Returns:
            Path of the closest configuration file, or None
        """
        current_path = Path(start_path).resolve() if start_path else Path.cwd()
        if current_path.is_file():
            current_path = current_path.parent

        while True:
            found = self.candidates_in(current_path)
            if found:
                if len(found) > 1:
                    logger.warning("Multiple configuration files in %s, using %s", current_path, found[0].name)
                logger.debug("Discovered configuration file %s", found[0])
                return found[0]

            if current_path == current_path.parent:
                break
            current_path = current_path.parent

        logger.debug("No configuration file found above %s", start_path or Path.cwd())
        return None

    def resolve(self, explicit: Optional[Union[str, Path]] = None,
                start_path: Optional[Union[str, Path]] = None) -> Path:
        """Return the configuration path to use.

        An explicit path wins and must exist; otherwise discovery is used.

        Raises:
            ConfigFileNotFoundError: If no configuration file can be found
        """
        if explicit:
            path = Path(explicit)
            if not path.is_file():
                raise ConfigFileNotFoundError(config_path=path)
            return path

        discovered = self.discover(start_path)
        if discovered is None:
            raise ConfigFileNotFoundError(start_path=start_path or Path.cwd())
        return discovered


_default_discovery = ConfigDiscovery()


def discover_config(start_path: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """Find the closest configuration file above start_path."""
    return _default_discovery.discover(start_path)


def resolve_config_path(explicit: Optional[Union[str, Path]] = None,
                        start_path: Optional[Union[str, Path]] = None) -> Path:
    """Return explicit if given, else the discovered configuration file."""
    return _default_discovery.resolve(explicit, start_path)
