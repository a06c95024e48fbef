"""Color blending in sRGB, CIE Lab and HCL, plus the intensity palette."""

from __future__ import annotations

import numpy as np
from matplotlib.colors import to_rgb

from .constants import (
    BACKGROUND_INTENSITY_CUTOFF,
    COLOR_BACKGROUND,
    COLOR_BLACK,
    COLOR_BLUE,
    COLOR_GREEN,
    COLOR_PURPLE,
    COLOR_RED,
    COLOR_YELLOW,
    INTENSITY_STEP,
)

RGB = tuple[float, float, float]

BACKGROUND: RGB = to_rgb(COLOR_BACKGROUND)
BLUE: RGB = to_rgb(COLOR_BLUE)
GREEN: RGB = to_rgb(COLOR_GREEN)
YELLOW: RGB = to_rgb(COLOR_YELLOW)
RED: RGB = to_rgb(COLOR_RED)
PURPLE: RGB = to_rgb(COLOR_PURPLE)
BLACK: RGB = to_rgb(COLOR_BLACK)

# D65 reference white.
_WHITE_REF = np.array([0.95047, 1.00000, 1.08883])
_RGB_TO_XYZ = np.array(
    [
        [0.41239079926595948, 0.35758433938387796, 0.18048078840183429],
        [0.21263900587151036, 0.71516867876775593, 0.072192315360733715],
        [0.019330818715591851, 0.11919477979462599, 0.95053215224966058],
    ]
)
_XYZ_TO_RGB = np.array(
    [
        [3.2409699419045214, -1.5373831775700935, -0.49861076029300328],
        [-0.96924363628087983, 1.8759675015077207, 0.041555057407175613],
        [0.055630079696993609, -0.20397695888897657, 1.0569715142428786],
    ]
)
_LAB_EPSILON = (6.0 / 29.0) ** 3
_CHROMA_EPSILON = 0.00015
_HUE_EPSILON = 1e-4


def segment_color(intensity: float) -> np.ndarray:
    """Map an intensity value onto the fixed seven-color palette.

    Each step of 60 intensity units blends one anchor into the next in Lab
    space, except red to purple, which blends in plain RGB. Above 240 the
    purple to black blend saturates after a further 300 units.
    """
    step = INTENSITY_STEP
    if intensity <= BACKGROUND_INTENSITY_CUTOFF:
        return np.array(BACKGROUND)
    if intensity <= 1 * step:
        return blend_lab(BLUE, GREEN, intensity / step)
    if intensity <= 2 * step:
        return blend_lab(GREEN, YELLOW, (intensity - 1 * step) / step)
    if intensity <= 3 * step:
        return blend_lab(YELLOW, RED, (intensity - 2 * step) / step)
    if intensity <= 4 * step:
        return blend_rgb(RED, PURPLE, (intensity - 3 * step) / step)
    fraction = min((intensity - 4 * step) / (5 * step), 1.0)
    return blend_lab(PURPLE, BLACK, fraction)


def blend_rgb(c1, c2, t) -> np.ndarray:
    """Linear interpolation of sRGB components."""
    c1, c2, t = _blend_args(c1, c2, t)
    return _with_endpoints(c1, c2, t, c1 + t * (c2 - c1))


def blend_lab(c1, c2, t) -> np.ndarray:
    """Interpolate in CIE Lab and convert back to sRGB (unclamped)."""
    c1, c2, t = _blend_args(c1, c2, t)
    lab1 = rgb_to_lab(c1)
    lab2 = rgb_to_lab(c2)
    blended = lab_to_rgb(lab1 + t * (lab2 - lab1))
    return _with_endpoints(c1, c2, t, blended)


def blend_hcl(c1, c2, t) -> np.ndarray:
    """Interpolate in HCL (LCh of Lab) along the shortest hue arc, clamped to gamut."""
    c1, c2, t = _blend_args(c1, c2, t)
    h1, ch1, l1 = np.moveaxis(lab_to_hcl(rgb_to_lab(c1)), -1, 0)
    h2, ch2, l2 = np.moveaxis(lab_to_hcl(rgb_to_lab(c2)), -1, 0)

    # A grey endpoint has no meaningful hue; borrow the other one.
    h1, h2 = np.broadcast_arrays(h1, h2)
    h1 = np.where((ch1 <= _CHROMA_EPSILON) & (ch2 >= _CHROMA_EPSILON), h2, h1)
    h2 = np.where((ch2 <= _CHROMA_EPSILON) & (ch1 >= _CHROMA_EPSILON), h1, h2)

    tt = t[..., 0]
    hcl = np.stack(
        [
            _interp_angle(h1, h2, tt),
            ch1 + tt * (ch2 - ch1),
            l1 + tt * (l2 - l1),
        ],
        axis=-1,
    )
    blended = np.clip(lab_to_rgb(hcl_to_lab(hcl)), 0.0, 1.0)
    return _with_endpoints(c1, c2, t, blended)


def rgb_to_lab(rgb) -> np.ndarray:
    """sRGB in [0, 1] to CIE Lab with L in [0, 1]."""
    linear = _linearize(np.asarray(rgb, dtype=float))
    xyz = linear @ _RGB_TO_XYZ.T
    fx, fy, fz = np.moveaxis(_lab_f(xyz / _WHITE_REF), -1, 0)
    return np.stack([1.16 * fy - 0.16, 5.0 * (fx - fy), 2.0 * (fy - fz)], axis=-1)


def lab_to_rgb(lab) -> np.ndarray:
    lab = np.asarray(lab, dtype=float)
    l, a, b = np.moveaxis(lab, -1, 0)
    fy = (l + 0.16) / 1.16
    f = np.stack([fy + a / 5.0, fy, fy - b / 2.0], axis=-1)
    xyz = _lab_finv(f) * _WHITE_REF
    return _delinearize(xyz @ _XYZ_TO_RGB.T)


def lab_to_hcl(lab) -> np.ndarray:
    l, a, b = np.moveaxis(np.asarray(lab, dtype=float), -1, 0)
    h = np.mod(np.degrees(np.arctan2(b, a)) + 360.0, 360.0)
    # Near-zero a, or a close to b, has no stable hue.
    h = np.where((np.abs(b - a) > _HUE_EPSILON) & (np.abs(a) > _HUE_EPSILON), h, 0.0)
    c = np.hypot(a, b)
    return np.stack([h, c, l], axis=-1)


def hcl_to_lab(hcl) -> np.ndarray:
    h, c, l = np.moveaxis(np.asarray(hcl, dtype=float), -1, 0)
    rad = np.radians(h)
    return np.stack([l, c * np.cos(rad), c * np.sin(rad)], axis=-1)


def to_rgba8(rgb) -> np.ndarray:
    """Quantize float colors to opaque 8-bit RGBA via a 16-bit intermediate."""
    rgb = np.clip(np.asarray(rgb, dtype=float), 0.0, 1.0)
    channels = (rgb * 65535.0 + 0.5).astype(np.uint32) >> 8
    alpha = np.full(channels.shape[:-1] + (1,), 255, dtype=np.uint32)
    return np.concatenate([channels, alpha], axis=-1).astype(np.uint8)


def _blend_args(c1, c2, t) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    c1 = np.asarray(c1, dtype=float)
    c2 = np.asarray(c2, dtype=float)
    t = np.asarray(t, dtype=float)[..., np.newaxis]
    return c1, c2, t


def _with_endpoints(c1: np.ndarray, c2: np.ndarray, t: np.ndarray, blended: np.ndarray) -> np.ndarray:
    return np.where(t <= 0.0, c1, np.where(t >= 1.0, c2, blended))


def _interp_angle(a0: np.ndarray, a1: np.ndarray, t: np.ndarray) -> np.ndarray:
    delta = np.mod(np.mod(a1 - a0, 360.0) + 540.0, 360.0) - 180.0
    return np.mod(a0 + t * delta + 360.0, 360.0)


def _linearize(v: np.ndarray) -> np.ndarray:
    safe = np.maximum(v, 0.0)
    return np.where(v <= 0.04045, v / 12.92, ((safe + 0.055) / 1.055) ** 2.4)


def _delinearize(v: np.ndarray) -> np.ndarray:
    # Out-of-gamut Lab blends can go slightly negative.
    safe = np.maximum(v, 0.0)
    return np.where(v <= 0.0031308, 12.92 * v, 1.055 * safe ** (1.0 / 2.4) - 0.055)


def _lab_f(t: np.ndarray) -> np.ndarray:
    return np.where(
        t > _LAB_EPSILON,
        np.cbrt(t),
        t / 3.0 * (29.0 / 6.0) ** 2 + 4.0 / 29.0,
    )


def _lab_finv(t: np.ndarray) -> np.ndarray:
    return np.where(
        t > 6.0 / 29.0,
        t**3,
        3.0 * (6.0 / 29.0) ** 2 * (t - 4.0 / 29.0),
    )
