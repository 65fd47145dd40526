from __future__ import annotations

import numpy as np


def normalize_masks(masks: list[np.ndarray]) -> list[np.ndarray]:
    """Rescale masks so each pixel's weights are proportional shares of 255.

    The weight of a mask is its first channel. Each output is
    ``floor(255 * weight / total)`` painted on every channel, so the sum over
    masks ends within ``len(masks) - 1`` of 255. Pixels no mask covers
    (total of zero) stay at zero everywhere.
    """
    if not masks:
        return []
    weights = np.stack([m[..., 0] for m in masks]).astype(np.int64)
    total = weights.sum(axis=0)
    covered = total > 0
    safe_total = np.where(covered, total, 1)
    scaled = np.where(covered, (255 * weights) // safe_total, 0).astype(np.uint8)
    return [np.repeat(s[..., None], 3, axis=2) for s in scaled]
