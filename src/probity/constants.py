# topmark:header:start
#
#   project      : Probity
#   file         : constants.py
#   file_relpath : src/probity/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Probity Constants."""

from __future__ import annotations

import tempfile
from importlib.metadata import version as get_version
from pathlib import Path

PROBITY_VERSION: str = get_version("probity")

# Config file discovery (current working directory)
PROBITY_TOML_NAME: str = "probity.toml"
PYPROJECT_TOML_NAME: str = "pyproject.toml"
PYPROJECT_TOOL_SECTION: str = "probity"

# Runtime scratch area shared by all runs of the current user
PROBITY_TMP_DIR: Path = Path(tempfile.gettempdir()) / "probity"
DEFAULT_MEMORY_LIMIT_FILE: Path = PROBITY_TMP_DIR / ".memory_limit"
DEFAULT_CACHE_DIR: Path = PROBITY_TMP_DIR / "cache"

DEFAULT_LEVEL: int = 0
MAX_LEVEL: int = 2

# Sample the peak memory every N analysed files (progress mode only)
MEMORY_SAMPLE_INTERVAL: int = 100

TIMESTAMP_CACHE_KEY_PREFIX: str = "filemtime-"
