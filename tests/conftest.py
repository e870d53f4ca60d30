"""pytest configuration and shared fixtures for xtab tests."""

import copy
import logging
from pathlib import Path
from typing import Any, Dict

import pytest
import yaml

from tests.fixtures.sample_data import SALES_CSV, SAMPLE_CONFIG, SAMPLE_REPO_FILES


@pytest.fixture(autouse=True)
def reset_xtab_logger():
    """Undo configure_logging() calls made by CLI tests so caplog keeps working."""
    yield
    logger = logging.getLogger("xtab")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def sample_config_data() -> Dict[str, Any]:
    """A valid hook configuration mapping (deep copy, safe to modify)."""
    return copy.deepcopy(SAMPLE_CONFIG)


@pytest.fixture
def write_config(tmp_path):
    """Write a configuration mapping (or raw text) to tmp_path/.pre-commit-config.yaml."""

    def _write(data, name: str = ".pre-commit-config.yaml") -> Path:
        path = tmp_path / name
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config_file(write_config, sample_config_data) -> Path:
    """The sample configuration written to disk."""
    return write_config(sample_config_data)


@pytest.fixture
def sample_repo(tmp_path) -> Path:
    """A small non-git project tree matching SAMPLE_REPO_FILES."""
    for name, content in SAMPLE_REPO_FILES.items():
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return tmp_path


@pytest.fixture
def sales_csv(tmp_path) -> Path:
    """A normalized sales table."""
    path = tmp_path / "sales.csv"
    path.write_text(SALES_CSV, encoding="utf-8")
    return path


@pytest.fixture
def repo_root() -> Path:
    """Root of this repository."""
    return Path(__file__).resolve().parent.parent
