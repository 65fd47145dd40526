from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from ..errors import DimensionMismatch


def _check_layers(layers: list[np.ndarray], masks: list[np.ndarray]) -> tuple[int, int]:
    if not layers:
        raise ValueError("No layers to blend")
    if len(layers) != len(masks):
        raise ValueError(f"Got {len(layers)} layers but {len(masks)} masks")
    h, w = layers[0].shape[:2]
    for i, (layer, mask) in enumerate(zip(layers, masks)):
        for kind, arr in (("layer", layer), ("mask", mask)):
            if arr.shape[:2] != (h, w):
                raise DimensionMismatch(
                    (w, h), (arr.shape[1], arr.shape[0]), f"{kind} {i} differs from layer 0"
                )
    return h, w


def _as_rgb(arr: np.ndarray) -> np.ndarray:
    if arr.ndim == 2:
        return arr[..., None]
    return arr[..., :3]


def _blend_rows(layers: list[np.ndarray], masks: list[np.ndarray], out: np.ndarray, y0: int, y1: int) -> None:
    acc = np.zeros((y1 - y0, out.shape[1], 3), dtype=np.float64)
    for layer, mask in zip(layers, masks):
        acc += _as_rgb(layer[y0:y1]).astype(np.float64) * (_as_rgb(mask[y0:y1]).astype(np.float64) / 255.0)
    out[y0:y1] = np.clip(np.floor(acc), 0, 255).astype(np.uint8)


def blend_layers(layers: list[np.ndarray], masks: list[np.ndarray], workers: int | None = None) -> np.ndarray:
    """Weighted sum of ``layers``, each channel scaled by ``mask / 255``.

    Sums above 255 (masks that were never normalized) saturate instead of
    wrapping. With ``workers > 1`` the rows are split into bands and blended
    on a thread pool.
    """
    h, w = _check_layers(layers, masks)
    out = np.zeros((h, w, 3), dtype=np.uint8)
    n_bands = max(1, min(int(workers or 1), h))
    if n_bands == 1:
        _blend_rows(layers, masks, out, 0, h)
        return out

    edges = np.linspace(0, h, n_bands + 1).astype(int)
    with ThreadPoolExecutor(max_workers=n_bands) as ex:
        futs = [ex.submit(_blend_rows, layers, masks, out, int(y0), int(y1)) for y0, y1 in zip(edges[:-1], edges[1:])]
        for fut in futs:
            fut.result()
    return out
