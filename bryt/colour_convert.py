# bryt/colour_convert.py
from __future__ import annotations

"""
Colour conversions and metrics (D65).

Exports:
  rgb_to_linear(srgb)
  rgb_to_lab(rgb)
  rgb_to_lab_pair(r, g, b)
  packed_to_lab(packed)
  delta_e94_pair(accepted, candidate)
  delta_e94_vec(accepted, candidates)

All maths is float64 so a Lab point computed here, cached, and reloaded gives
the same distances every time.
"""

import math
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from .constants import (
    CHROMA_WEIGHT,
    HUE_WEIGHT,
    LAB_EPSILON,
    LAB_LINEAR_OFFSET,
    LAB_LINEAR_SLOPE,
    RGB_TO_XYZ,
    SRGB_GAMMA,
    SRGB_LINEAR_CUTOFF,
    SRGB_LINEAR_SLOPE,
    WHITE_POINT,
)
from .core_types import Lab, LabTuple, unpack_rgb_array


# sRGB to linear


def rgb_to_linear(srgb: np.ndarray) -> np.ndarray:
    """
    Convert sRGB (non-linear 0..1) to linear RGB (0..1). Vectorised.
    Args:
      srgb: array of channel values in 0..1
    Returns:
      float64 array, same shape
    """
    srgb_f = np.asarray(srgb, dtype=np.float64)
    return np.where(
        srgb_f > SRGB_LINEAR_CUTOFF,
        np.power((srgb_f + 0.055) / 1.055, SRGB_GAMMA),
        srgb_f / SRGB_LINEAR_SLOPE,
    )


# sRGB to Lab (D65)


def _compress(t: np.ndarray) -> np.ndarray:
    return np.where(
        t > LAB_EPSILON,
        np.power(t, 1.0 / 3.0),
        LAB_LINEAR_SLOPE * t + LAB_LINEAR_OFFSET,
    )


def rgb_to_lab(rgb: np.ndarray) -> Lab:
    """
    8-bit sRGB to Lab (D65).
    Accepts channel values 0..255 in any shape (..., 3). Returns float64.
    """
    rgb_f = np.asarray(rgb, dtype=np.float64) / 255.0

    r_lin = rgb_to_linear(rgb_f[..., 0])
    g_lin = rgb_to_linear(rgb_f[..., 1])
    b_lin = rgb_to_linear(rgb_f[..., 2])

    (xr, xg, xb), (yr, yg, yb), (zr, zg, zb) = RGB_TO_XYZ
    Xn, Yn, Zn = WHITE_POINT
    x = (r_lin * xr + g_lin * xg + b_lin * xb) / Xn
    y = (r_lin * yr + g_lin * yg + b_lin * yb) / Yn
    z = (r_lin * zr + g_lin * zg + b_lin * zb) / Zn

    fx, fy, fz = _compress(x), _compress(y), _compress(z)

    out = np.empty(rgb_f.shape, dtype=np.float64)
    out[..., 0] = 116.0 * fy - 16.0
    out[..., 1] = 500.0 * (fx - fy)
    out[..., 2] = 200.0 * (fy - fz)
    return out


def rgb_to_lab_pair(r: int, g: int, b: int) -> LabTuple:
    """Scalar convenience: one (r, g, b) to an (L, A, B) tuple."""
    lab = rgb_to_lab(np.array([r, g, b], dtype=np.float64))
    return (float(lab[0]), float(lab[1]), float(lab[2]))


def packed_to_lab(packed: np.ndarray) -> Lab:
    """Packed 24-bit colours [N] to Lab [N,3]."""
    r, g, b = unpack_rgb_array(packed)
    return rgb_to_lab(np.stack([r, g, b], axis=-1))


# CIE94-style distance


def delta_e94_pair(
    accepted: Sequence[float] | NDArray[np.floating],
    candidate: Sequence[float] | NDArray[np.floating],
) -> float:
    """
    Perceptual distance between two Lab points.
    Chroma and hue weights use the first point's chroma, so the accepted
    colour must always be passed first.
    """
    L1, a1, b1 = float(accepted[0]), float(accepted[1]), float(accepted[2])
    L2, a2, b2 = float(candidate[0]), float(candidate[1]), float(candidate[2])

    dL = L1 - L2
    da = a1 - a2
    db = b1 - b2
    c1 = math.sqrt(a1 * a1 + b1 * b1)
    c2 = math.sqrt(a2 * a2 + b2 * b2)
    dC = c1 - c2
    dH2 = da * da + db * db - dC * dC
    dH = 0.0 if dH2 < 0.0 else math.sqrt(dH2)

    sc = 1.0 + CHROMA_WEIGHT * c1
    sh = 1.0 + HUE_WEIGHT * c1
    dCs = dC / sc
    dHs = dH / sh
    total = dL * dL + dCs * dCs + dHs * dHs
    return 0.0 if total < 0.0 else math.sqrt(total)


def delta_e94_vec(accepted: Sequence[float] | NDArray[np.floating], candidates: Lab) -> NDArray[np.float64]:
    """
    Distance from one accepted Lab point to many candidates.

    Args:
      accepted: Lab [3]
      candidates: Lab [N,3]
    Returns:
      float64 array [N]
    """
    L1, a1, b1 = float(accepted[0]), float(accepted[1]), float(accepted[2])
    cands = np.asarray(candidates, dtype=np.float64).reshape(-1, 3)
    L2 = cands[:, 0]
    a2 = cands[:, 1]
    b2 = cands[:, 2]

    dL = L1 - L2
    da = a1 - a2
    db = b1 - b2
    c1 = math.sqrt(a1 * a1 + b1 * b1)
    c2 = np.sqrt(a2 * a2 + b2 * b2)
    dC = c1 - c2
    dH2 = da * da + db * db - dC * dC
    dH = np.sqrt(np.maximum(dH2, 0.0))

    sc = 1.0 + CHROMA_WEIGHT * c1
    sh = 1.0 + HUE_WEIGHT * c1
    dCs = dC / sc
    dHs = dH / sh
    total = dL * dL + dCs * dCs + dHs * dHs
    return np.sqrt(np.maximum(total, 0.0))


__all__ = [
    "rgb_to_linear",
    "rgb_to_lab",
    "rgb_to_lab_pair",
    "packed_to_lab",
    "delta_e94_pair",
    "delta_e94_vec",
]
