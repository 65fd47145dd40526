from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

import numpy as np

from .logistic import logistic


@dataclass(frozen=True)
class VerticalFlat:
    pass


@dataclass(frozen=True)
class HorizontalFlat:
    pass


@dataclass(frozen=True)
class VerticalLogistic:
    k: float = 0.01


@dataclass(frozen=True)
class HorizontalLogistic:
    k: float = 0.01


MaskType = Union[VerticalFlat, HorizontalFlat, VerticalLogistic, HorizontalLogistic]

_FLAT_TYPES = {"VerticalFlat": VerticalFlat, "HorizontalFlat": HorizontalFlat}
_LOGISTIC_TYPES = {"VerticalLogistic": VerticalLogistic, "HorizontalLogistic": HorizontalLogistic}


def parse_mask_type(data: Any) -> MaskType:
    """Read ``"VerticalFlat"`` or ``{"VerticalLogistic": {"k": 0.01}}``."""
    if isinstance(data, str):
        if data in _FLAT_TYPES:
            return _FLAT_TYPES[data]()
        raise ValueError(f"Unknown mask type '{data}'")
    if isinstance(data, dict) and len(data) == 1:
        name, params = next(iter(data.items()))
        if name in _FLAT_TYPES and not params:
            return _FLAT_TYPES[name]()
        if name in _LOGISTIC_TYPES:
            if not isinstance(params, dict) or "k" not in params:
                raise ValueError(f"Mask type '{name}' requires a steepness 'k'")
            return _LOGISTIC_TYPES[name](k=float(params["k"]))
        raise ValueError(f"Unknown mask type '{name}'")
    raise ValueError(f"Mask type must be a name or a single-key mapping, got {data!r}")


def mask_type_to_data(mask_type: MaskType) -> Any:
    name = type(mask_type).__name__
    if isinstance(mask_type, (VerticalLogistic, HorizontalLogistic)):
        return {name: {"k": mask_type.k}}
    return name


def _stripe_bounds(axis_len: int, index: int, count: int) -> tuple[int, int]:
    size = axis_len / count
    return int(size * index), int(size * (index + 1))


def _logistic_profile(axis_len: int, index: int, count: int, k: float) -> np.ndarray:
    size = axis_len / count
    center = int(index * size + size / 2.0)
    distance = np.abs(np.arange(axis_len, dtype=np.float64) - center)
    weight = 1.0 - logistic(distance, k * size)
    # truncation, not rounding: the stripe centre lands on 127
    return np.clip(weight * 255.0, 0, 255).astype(np.uint8)


def generate_mask(index: int, count: int, width: int, height: int, mask_type: MaskType) -> np.ndarray:
    if count < 1:
        raise ValueError("At least one image is required to generate masks")
    if not 0 <= index < count:
        raise IndexError(f"Mask index {index} out of range for {count} images")

    canvas = np.zeros((height, width, 3), dtype=np.uint8)
    if isinstance(mask_type, VerticalFlat):
        x0, x1 = _stripe_bounds(width, index, count)
        canvas[:, x0:x1] = 255
    elif isinstance(mask_type, HorizontalFlat):
        y0, y1 = _stripe_bounds(height, index, count)
        canvas[y0:y1, :] = 255
    elif isinstance(mask_type, VerticalLogistic):
        canvas[:] = _logistic_profile(width, index, count, mask_type.k)[None, :, None]
    elif isinstance(mask_type, HorizontalLogistic):
        canvas[:] = _logistic_profile(height, index, count, mask_type.k)[:, None, None]
    else:
        raise TypeError(f"Unsupported mask type {mask_type!r}")
    return canvas


def generate_masks(count: int, width: int, height: int, mask_type: MaskType) -> list[np.ndarray]:
    if count < 1:
        raise ValueError("At least one image is required to generate masks")
    return [generate_mask(i, count, width, height, mask_type) for i in range(count)]


def default_masks(count: int, width: int, height: int) -> list[np.ndarray]:
    return generate_masks(count, width, height, VerticalFlat())
