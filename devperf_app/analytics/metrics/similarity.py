"""Cosine similarity over small numeric feature vectors."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between ``a`` and ``b``; 0.0 if either has zero magnitude.

    The denominator is computed as ``sqrt(|a|^2 * |b|^2)`` so that integer
    vectors compared with themselves yield exactly 1.0.
    """
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    if va.shape != vb.shape:
        raise ValueError(f"Vector shapes differ: {va.shape} vs {vb.shape}")
    denom = float(np.dot(va, va)) * float(np.dot(vb, vb))
    if denom == 0:
        return 0.0
    return float(np.clip(np.dot(va, vb) / np.sqrt(denom), -1.0, 1.0))


def cosine_similarities(query: Sequence[float], matrix: np.ndarray) -> np.ndarray:
    """Vectorised ``cosine_similarity(query, row)`` for every row of ``matrix``."""
    q = np.asarray(query, dtype=float)
    m = np.asarray(matrix, dtype=float)
    if m.size == 0:
        return np.zeros(0, dtype=float)
    dots = m @ q
    denoms = np.sqrt(np.einsum("ij,ij->i", m, m) * float(np.dot(q, q)))
    sims = np.divide(dots, denoms, out=np.zeros_like(dots), where=denoms != 0)
    return np.clip(sims, -1.0, 1.0)
