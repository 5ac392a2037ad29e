# ABOUTME: Shared test fixtures for opml-doc.
# ABOUTME: Provides sample OPML documents and resets global logging/settings state.

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import structlog

from opml_doc.config import get_settings

SAMPLES_DIR = Path(__file__).parent / "samples"


@pytest.fixture(autouse=True)
def _reset_state() -> Generator[None]:
    """Undo CLI logging configuration and cached settings between tests."""
    yield
    structlog.reset_defaults()
    get_settings.cache_clear()


@pytest.fixture
def samples_dir() -> Path:
    """Directory holding the sample OPML files."""
    return SAMPLES_DIR


@pytest.fixture
def read_sample() -> Callable[[str], bytes]:
    """Read a sample OPML file as raw bytes."""

    def _read(name: str) -> bytes:
        return (SAMPLES_DIR / name).read_bytes()

    return _read
