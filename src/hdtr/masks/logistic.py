from __future__ import annotations

import numpy as np


def logistic(distance, k: float):
    """Logistic curve evaluated at ``k * distance``.

    ``logistic(0, k)`` is 0.5 and the value rises toward 1 with distance, so
    callers use ``1 - logistic(...)`` as a weight that peaks at the stripe
    centre. ``k`` is the steepness: around 0.01 is a good default, 0.1 gives a
    narrow band and 0.001 smears everything together. It is not clamped.
    """
    with np.errstate(over="ignore"):
        return 1.0 / (np.exp(-k * np.asarray(distance, dtype=np.float64)) + 1.0)
