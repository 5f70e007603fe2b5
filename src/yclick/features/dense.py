from __future__ import annotations
import logging
from typing import Iterable, List
import numpy as np

from yclick.data.schema import IndexedValue

logger = logging.getLogger(__name__)

# Feature dimensionality of the R6 click log (user and article contexts alike).
FEATURE_DIM = 6


def materialize_dense(pairs: Iterable[IndexedValue], dim: int = FEATURE_DIM) -> np.ndarray:
    """
    Sparse (index, value) pairs -> dense float64 vector of length dim.

    Index i (1-based) lands in position i-1. Duplicate indices: last write wins.
    Indices outside 1..dim are dropped silently; this is a data-cleaning rule
    of the source dataset, not an error.
    """
    if dim < 1:
        raise ValueError(f"feature dim must be >= 1, got {dim}")

    vec = np.zeros(dim, dtype=np.float64)
    for p in pairs:
        if 1 <= p.index <= dim:
            vec[p.index - 1] = p.value
        else:
            logger.debug("dropping out-of-range feature index %d (dim=%d)", p.index, dim)
    return vec


def to_feature_list(vec: np.ndarray) -> List[float]:
    return [float(x) for x in vec]
