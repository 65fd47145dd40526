from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

import numpy as np

from .errors import DimensionMismatch, NoInputFilesSpecified
from .masks.generate import MaskType, default_masks, generate_masks
from .masks.normalize import normalize_masks
from .render.blend import blend_layers
from .render.writer import save_masks
from .utils.io import image_size, read_image, write_image


@dataclass
class InputImage:
    path: Path
    pixels: np.ndarray

    @classmethod
    def open(cls, path: str | Path) -> "InputImage":
        return cls(path=Path(path), pixels=read_image(path))

    @property
    def size(self) -> tuple[int, int]:
        return image_size(self.pixels)


def _load_pair(image_path: str | Path, mask_path: str | Path | None) -> tuple[InputImage, np.ndarray | None]:
    image = InputImage.open(image_path)
    if mask_path is None:
        return image, None
    mask = read_image(mask_path)
    if image_size(mask) != image.size:
        raise DimensionMismatch(
            image.size,
            image_size(mask),
            f"{image_path} and its mask {mask_path} have different dimensions",
        )
    return image, mask


def _clamp_weights(values) -> np.ndarray:
    arr = np.asarray(values)
    if arr.dtype.kind == "f":
        arr = np.rint(arr)
    return np.clip(arr, 0, 255).astype(np.uint8)


class ImageSet:
    """Equal-sized input images paired index-for-index with weight masks.

    Every mask has the images' width and height; masks not supplied at
    construction default to equal-width vertical stripes.
    """

    def __init__(self, images: Sequence[InputImage], masks: Sequence[np.ndarray | None] | None = None):
        if not images:
            raise NoInputFilesSpecified()
        if masks is not None and len(masks) != len(images):
            raise ValueError(f"Got {len(images)} images but {len(masks)} masks")

        self.width, self.height = images[0].size
        for image in images[1:]:
            if image.size != self.size:
                raise DimensionMismatch(
                    self.size, image.size, f"{image.path} has different dimensions than {images[0].path}"
                )
        self.images = list(images)

        defaults = default_masks(len(self.images), self.width, self.height)
        self.masks = defaults
        for i, mask in enumerate(masks or []):
            if mask is not None:
                self.set_mask(i, mask)

    @classmethod
    def from_paths(
        cls,
        paths: Sequence[str | Path],
        mask_paths: Sequence[str | Path | None] | None = None,
        workers: int | None = None,
    ) -> "ImageSet":
        """Decode every image (and optional mask) on a thread pool, keeping input order."""
        if not paths:
            raise NoInputFilesSpecified()
        mask_paths = list(mask_paths) if mask_paths is not None else [None] * len(paths)
        if len(mask_paths) != len(paths):
            raise ValueError(f"Got {len(paths)} images but {len(mask_paths)} mask paths")

        loaded = []
        with ThreadPoolExecutor(max_workers=workers or None) as ex:
            futs = [ex.submit(lambda i=i: (i, _load_pair(paths[i], mask_paths[i]))) for i in range(len(paths))]
            for fut in as_completed(futs):
                loaded.append(fut.result())
        loaded.sort(key=lambda item: item[0])

        images = [pair[0] for _, pair in loaded]
        masks = [pair[1] for _, pair in loaded]
        return cls(images, masks)

    def __len__(self) -> int:
        return len(self.images)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.masks):
            raise IndexError(f"Invalid mask index {index} for {len(self.masks)} masks")

    def set_mask(self, index: int, mask: np.ndarray) -> None:
        self._check_index(index)
        mask = np.asarray(mask)
        received = image_size(mask)
        if received != self.size:
            raise DimensionMismatch(self.size, received, f"mask {index} does not match {self.images[index].path}")
        if mask.ndim == 2:
            mask = np.repeat(mask[..., None], 3, axis=2)
        self.masks[index] = _clamp_weights(mask[..., :3])

    def generate_masks(self, mask_type: MaskType) -> None:
        self.masks = generate_masks(len(self.images), self.width, self.height, mask_type)

    def normalize_masks(self) -> None:
        self.masks = normalize_masks(self.masks)

    def _paint(self, fn: Callable[[int, int], int]) -> np.ndarray:
        ys, xs = np.indices((self.height, self.width))
        values = np.vectorize(fn, otypes=[np.float64])(xs, ys)
        return np.repeat(_clamp_weights(values)[..., None], 3, axis=2)

    def create_masks(self, fn: Callable[[int, int, int], int]) -> None:
        """Replace every mask with ``fn(index, x, y)`` evaluated per pixel."""
        self.masks = [self._paint(lambda x, y, i=i: fn(i, x, y)) for i in range(len(self.images))]

    def create_mask(self, index: int, fn: Callable[[int, int], int]) -> None:
        self._check_index(index)
        self.masks[index] = self._paint(fn)

    def composite(self, workers: int | None = None) -> np.ndarray:
        return blend_layers([im.pixels for im in self.images], self.masks, workers=workers)

    def save(self, destination: str | Path, workers: int | None = None) -> Path:
        return write_image(destination, self.composite(workers=workers))

    def save_masks(self) -> list[Path]:
        return save_masks([im.path for im in self.images], self.masks)
