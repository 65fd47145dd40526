from __future__ import annotations

from pathlib import Path

import numpy as np

from ..utils.io import write_image


def mask_path_for(image_path: str | Path) -> Path:
    p = Path(image_path)
    return p.parent / f"{p.stem}_mask.png"


def save_masks(image_paths: list[Path], masks: list[np.ndarray]) -> list[Path]:
    """Write each mask next to its source image as ``<stem>_mask.png``."""
    return [write_image(mask_path_for(path), mask) for path, mask in zip(image_paths, masks)]
