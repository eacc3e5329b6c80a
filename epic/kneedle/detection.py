import numpy as np
import pandas as pd

from typing import NamedTuple
from numpy.typing import ArrayLike, NDArray
from scipy.signal import argrelmin, argrelmax
from epic.logging import get_logger

from .smoothing import gaussian_smooth
from .errors import DimensionMismatch
from .curve import Curve, as_curve_array, as_point_sequence, take_points
from .normalization import minmax_normalize, difference_curve


class KneedleTrace(NamedTuple):
    """Intermediate and final results of a single run of the Kneedle pipeline."""
    difference: NDArray[np.float64]
    candidates: NDArray[np.intp]
    average_step: float
    knees: NDArray[np.intp]


def find_candidates(curve: Curve, seek_minima: bool) -> NDArray[np.intp]:
    """
    Find the strict local extrema of the y values of a 2-D curve.

    Only interior points qualify, and only when both neighbors are strictly
    greater (minima) or strictly smaller (maxima). Points on a plateau are
    never candidates.

    Parameters
    ----------
    curve : sequence of point-like, ndarray or DataFrame
        Typically the difference curve.

    seek_minima : bool
        Whether to look for local minima (True) or local maxima (False).

    Returns
    -------
    ndarray of ints
        Indices of the candidates, in ascending order.
    """
    y = as_curve_array(curve, n_dims=2)[:, 1]
    if len(y) < 3:
        return np.empty(0, dtype=np.intp)
    finder = argrelmin if seek_minima else argrelmax
    return finder(y, mode='clip')[0].astype(np.intp)


def average_step(curve: Curve) -> float:
    """Mean difference between consecutive x values of a 2-D curve (0 for a single point)."""
    x = as_curve_array(curve, n_dims=2)[:, 0]
    if len(x) < 2:
        return 0.
    return float(np.diff(x).mean())


def _confirm_indices(
        difference: NDArray,
        candidates: NDArray,
        sensitivity: float,
        seek_knee: bool,
        step: float,
) -> NDArray[np.intp]:
    y = difference[:, 1]
    # Knees must be followed by a drop, elbows by a rise.
    step = -sensitivity * step if seek_knee else sensitivity * step
    ends = np.append(candidates[1:], len(y))
    confirmed = []
    for candidate, end in zip(candidates, ends):
        window = y[candidate + 1:end]
        threshold = y[candidate] + step
        if np.any(window < threshold if seek_knee else window > threshold):
            confirmed.append(candidate)
    return np.asarray(confirmed, dtype=np.intp)


def confirm(
        original: Curve,
        difference: Curve,
        candidates: ArrayLike,
        sensitivity: float,
        seek_knee: bool,
) -> list | NDArray | pd.DataFrame:
    """
    Keep only the candidates that pass the Kneedle threshold test.

    The threshold of a candidate c is `y[c] - sensitivity * step` for a knee and
    `y[c] + sensitivity * step` for an elbow, where `step` is the average x step
    of `difference`. A knee is confirmed if the difference curve drops below its
    threshold (an elbow: rises above it) before the next candidate, or before the
    end of the data for the last candidate.

    Parameters
    ----------
    original : sequence of point-like, ndarray or DataFrame
        The original curve, from which confirmed points are taken.

    difference : sequence of point-like, ndarray or DataFrame
        The difference curve, with the same number of points as `original`.

    candidates : array-like of ints
        Candidate indices, in ascending order.

    sensitivity : float
        Number of average steps the curve must continue to drop (or rise).

    seek_knee : bool
        True for knees (falling threshold), False for elbows (rising threshold).

    Returns
    -------
    list, ndarray or DataFrame
        The confirmed points of `original`, in ascending index order.
        See `take_points` for the container type.
    """
    original = as_point_sequence(original)
    difference = as_curve_array(difference, n_dims=2)
    if len(original) != len(difference):
        raise DimensionMismatch(
            f"Original and difference curves have different lengths: {len(original)} != {len(difference)}."
        )
    candidates = np.asarray(candidates, dtype=np.intp)
    knees = _confirm_indices(difference, candidates, sensitivity, seek_knee, average_step(difference))
    return take_points(original, knees)


def trace_kneedle(
        curve: Curve,
        sensitivity: float = 1,
        smoothing_window: int = 1,
        find_elbow: bool = False,
) -> KneedleTrace:
    """
    Run the Kneedle pipeline and return the indices of the knees along with intermediate results.

    See `detect_knees` for a description of the parameters.
    """
    log = get_logger()
    data = as_curve_array(curve, n_dims=2)
    if smoothing_window < 0:
        raise ValueError(f"Smoothing window must be non-negative; got {smoothing_window}.")
    if sensitivity < 0:
        log.warning(f"Negative sensitivity {sensitivity} inverts the direction of the threshold test.")
    kind = "elbow" if find_elbow else "knee"
    if len(data) < 3:
        log.warning(f"Curve has only {len(data)} points; at least 3 are needed to find a {kind}.")
        empty = np.empty(0, dtype=np.intp)
        diff = difference_curve(minmax_normalize(data))
        return KneedleTrace(diff, empty, average_step(diff), empty)

    diff = difference_curve(minmax_normalize(gaussian_smooth(data, smoothing_window)))
    candidates = find_candidates(diff, seek_minima=find_elbow)
    log.debug(f"found {len(candidates)} {kind} candidates")
    step = average_step(diff)
    knees = _confirm_indices(diff, candidates, sensitivity, not find_elbow, step)
    log.debug(f"confirmed {len(knees)} of {len(candidates)} {kind} candidates")
    return KneedleTrace(diff, candidates, step, knees)


def detect_knees(
        curve: Curve,
        sensitivity: float = 1,
        smoothing_window: int = 1,
        find_elbow: bool = False,
) -> list | NDArray | pd.DataFrame:
    """
    Kneedle in a Haystack - Find knee (or elbow) points of a curve.

    The curve is smoothed, normalized into the unit square, and the normalized x
    is subtracted from the normalized y. Knees are local maxima of this difference
    curve (elbows are local minima), after which the difference curve drops
    (rises) by more than `sensitivity` average x steps before the next extremum.

    The curve is assumed to have increasing x. For a decreasing curve, apply
    `flip_x` beforehand.

    Parameters
    ----------
    curve : sequence of point-like, ndarray or DataFrame
        The points (x, y) of the curve, ordered by x.
        Any element exposing an indexable pair of reals may be used as a point.
        A one-shot iterable of points is materialized into a list first.

    sensitivity : float, default 1
        Algorithm sensitivity parameter.
        Higher values make for fewer, more conservative detections.

    smoothing_window : int, default 1
        Half-width, in samples, of the Gaussian smoothing kernel.
        0 is treated as the minimum width of 1.

    find_elbow : bool, default False
        Whether to find elbows of a convex curve rather than knees of a concave one.

    Returns
    -------
    list, ndarray or DataFrame
        The points of the original (unsmoothed, unnormalized) curve where knees
        were found, in ascending order.
        - For a DataFrame, a DataFrame of the selected rows.
        - For an ndarray, an ndarray of the selected rows.
        - Otherwise, a list of the very same element objects of `curve`.

    Raises
    ------
    EmptyInput
        If the curve has no points.

    InvalidDimension
        If the points are not 2-dimensional.

    DimensionMismatch
        If the points do not all have the same dimension.

    Notes
    -----
    This is an implementation of the Kneedle algorithm for finding "knee-points"
    in 2D curves, described in [1]_.

    References
    ----------
    .. [1] V. Satopaa, J. Albrecht, D. Irwin and B. Raghavan, "Finding a "Kneedle"
       in a Haystack: Detecting Knee Points in System Behavior," 2011 31st International
       Conference on Distributed Computing Systems Workshops, Minneapolis, MN, USA, 2011,
       pp. 166-171, doi: 10.1109/ICDCSW.2011.20.
       https://www1.icsi.berkeley.edu/~barath/papers/kneedle-simplex11.pdf
    """
    curve = as_point_sequence(curve)
    trace = trace_kneedle(curve, sensitivity, smoothing_window, find_elbow)
    return take_points(curve, trace.knees)


def kneedle(
        x: ArrayLike,
        y: ArrayLike,
        sensitivity: float = 1,
        smoothing_window: int = 1,
        find_elbow: bool = False,
) -> list[tuple[float, float]]:
    """
    Find knee points in the curve y(x).

    Same as `detect_knees`, but with the coordinates given as two separate arrays.

    Parameters
    ----------
    x : array-like
        The x values of the curve.

    y : array-like
        The y values of the curve.
        Should have the same length as `x`.

    sensitivity : float, default 1
        Algorithm sensitivity parameter.

    smoothing_window : int, default 1
        Half-width, in samples, of the Gaussian smoothing kernel.

    find_elbow : bool, default False
        Whether to find elbows instead of knees.

    Returns
    -------
    list of 2-tuples of floats
        Points (x, y) where knees were found.
    """
    x = np.ravel(x)
    y = np.ravel(y)
    if len(x) != len(y):
        raise DimensionMismatch("lengths of x and y do not match")
    knees = trace_kneedle(np.column_stack((x, y)), sensitivity, smoothing_window, find_elbow).knees
    return list(zip(x[knees].tolist(), y[knees].tolist()))
