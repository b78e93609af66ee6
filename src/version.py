"""Release version lookup."""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_VERSION = "development"


def read_version(release_file_path: str | None = None) -> str:
    """Return the trimmed content of the release file, or "development"."""
    path = release_file_path or os.environ.get("RELEASE_FILE_PATH")
    if path:
        try:
            version = Path(path).read_text().strip()
        except OSError:
            return DEFAULT_VERSION
        if version:
            return version
    return DEFAULT_VERSION
