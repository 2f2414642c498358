"""Shared pytest fixtures for filefilter tests."""
import os
import tempfile
from datetime import timezone
from pathlib import Path
from typing import Any, Dict, Generator

import pytest
import yaml

from filefilter.infrastructure.config_manager import ENV_PREFIX, set_global_config
from filefilter.parsers.temporal import TemporalParser


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def utc_parser() -> TemporalParser:
    """Temporal parser reading offset-less text as UTC."""
    return TemporalParser(tz=timezone.utc)


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Provide a sample filefilter configuration."""
    return {
        "filefilter": {
            "filter": {
                "separator": "/",
                "case_fold": True,
                "whitelist": ["*.jpg", "*.png", "*.gif"],
                "blacklist": ["*.php.*"],
                "name_regex": "^[^0-9]*$",
                "size": "> 1 KB < 1 MB",
                "mtime": ">= 2021-01-01",
            },
            "logging": {
                "level": "DEBUG",
                "file": None,
            },
        }
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: Dict[str, Any]) -> Path:
    """Create a configuration file."""
    config_path = temp_dir / "filefilter.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove filefilter overrides inherited from the outer environment."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    yield


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the global config manager between tests."""
    yield
    set_global_config(None)
