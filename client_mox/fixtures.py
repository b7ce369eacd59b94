"""Load canned responses from files on disk."""

from __future__ import annotations

import json
import logging
import os
import typing as t
from pathlib import Path

logger = logging.getLogger(__name__)


def load_fixture(path: str | os.PathLike[str]) -> t.Any:
    """Return the contents of *path*.

    Files ending in ``.json`` are parsed; anything else is returned as text.
    Relative paths resolve against the current working directory at call
    time. Read and parse errors propagate unchanged.
    """
    resolved = Path(path).resolve()
    content = resolved.read_text(encoding="utf-8")
    logger.debug("Loaded fixture %s (%d characters)", resolved, len(content))
    if resolved.suffix.casefold() == ".json":
        return json.loads(content)
    return content


__all__ = ["load_fixture"]
