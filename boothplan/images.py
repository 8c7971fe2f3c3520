from __future__ import annotations
from pathlib import Path
from typing import Tuple

from PySide6.QtGui import QImageReader

from .errors import PersistenceError


def read_image_size(path: Path) -> Tuple[int, int]:
    """Native pixel size of a raster image, read from its header."""
    reader = QImageReader(str(path))
    if not reader.canRead():
        raise PersistenceError(f"{Path(path).name} is not a readable image")
    size = reader.size()
    if not size.isValid() or size.width() <= 0 or size.height() <= 0:
        # some formats only report the size after decoding
        img = reader.read()
        if img.isNull():
            raise PersistenceError(f"Could not read {Path(path).name}: {reader.errorString()}")
        return img.width(), img.height()
    return size.width(), size.height()
