import numpy as np

from numpy.typing import NDArray
from scipy.ndimage import correlate1d

from .curve import Curve, as_curve_array


def gaussian(x: float | NDArray, height: float = 1, center: float = 0, width: float = 1) -> float | NDArray:
    """A Gaussian bell of the given height, center and width, evaluated at `x`."""
    return height * np.exp(-(x - center) ** 2 / (2 * width ** 2))


def gaussian_kernel(window: int) -> NDArray[np.float64]:
    """
    Weights of the neighbors at index offsets -window, ..., window.

    The offsets are scaled by `window` before evaluating a unit Gaussian,
    so the outermost neighbors always get a weight of exp(-1/2).
    A window of 0 is treated as the minimum width of 1.
    """
    if window < 0:
        raise ValueError(f"Smoothing window must be non-negative; got {window}.")
    window = max(window, 1)
    offsets = np.arange(-window, window + 1)
    return gaussian(np.abs(offsets / window))


def gaussian_smooth(curve: Curve, window: int = 1) -> NDArray[np.float64]:
    """
    Smooth each dimension of a curve with a truncated Gaussian moving average.

    For the point at index i, every neighbor j with `|j - i| <= window` contributes
    with weight `exp(-((j - i) / window) ** 2 / 2)`. The kernel runs over sample
    index rather than over the x spacing. Near the edges the window is truncated
    and the weights renormalized; no padding takes place.

    Parameters
    ----------
    curve : sequence of point-like, ndarray or DataFrame
        Points of any (positive) dimension.

    window : int, default 1
        Half-width of the kernel, in samples. 0 is treated as 1.

    Returns
    -------
    ndarray, shape (n_points, n_dims)
        Smoothed copy of the curve.

    Raises
    ------
    EmptyInput, DimensionMismatch, InvalidDimension
        If the curve is not a valid collection of points.
    """
    data = as_curve_array(curve)
    kernel = gaussian_kernel(window)
    weighted_sums = correlate1d(data, kernel, axis=0, mode='constant', cval=0)
    weight_totals = correlate1d(np.ones(len(data)), kernel, mode='constant', cval=0)
    return weighted_sums / weight_totals[:, np.newaxis]
