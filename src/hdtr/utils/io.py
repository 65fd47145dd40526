from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np

from ..errors import ErrorWritingFile, InputFileReadError


def read_image(path: str | Path) -> np.ndarray:
    """Decode an image file into an (H, W, 3) uint8 RGB array.

    Alpha is dropped and greyscale or 16-bit files are expanded to 8-bit RGB.
    """
    p = Path(path)
    if not p.is_file():
        raise InputFileReadError(p, "no such file")
    frame = cv2.imread(str(p), cv2.IMREAD_COLOR)
    if frame is None:
        raise InputFileReadError(p)
    return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)


def write_image(path: str | Path, pixels: np.ndarray) -> Path:
    p = Path(path)
    frame = cv2.cvtColor(np.ascontiguousarray(pixels, dtype=np.uint8), cv2.COLOR_RGB2BGR)
    try:
        ok = cv2.imwrite(str(p), frame)
    except cv2.error as err:
        raise ErrorWritingFile(p) from err
    if not ok:
        raise ErrorWritingFile(p)
    return p


def image_size(pixels: np.ndarray) -> tuple[int, int]:
    h, w = pixels.shape[:2]
    return int(w), int(h)
