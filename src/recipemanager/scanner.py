from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from .domain import DESCRIPTOR_NAME


logger = logging.getLogger(__name__)


def scan_recipe_dirs(scan_dirs: Iterable[str | Path]) -> list[Path]:
    """Return every directory below ``scan_dirs`` that holds a recipe descriptor.

    Roots are visited in the given order and missing roots are skipped.
    Inside a root the order is whatever the filesystem enumerates, so callers
    that need a stable order have to sort.
    """
    locations: list[Path] = []
    for entry in scan_dirs:
        root = Path(entry)
        if not root.is_dir():
            logger.debug("Skipping missing scan directory %s", root)
            continue

        for dirpath, _dirnames, filenames in os.walk(root):
            if DESCRIPTOR_NAME in filenames:
                locations.append(Path(dirpath).absolute())
    return locations
