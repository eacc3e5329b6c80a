import numpy as np

from numpy.typing import NDArray
from sklearn.preprocessing import MinMaxScaler
from epic.logging import get_logger

from .curve import Curve, as_curve_array


def minmax_normalize(curve: Curve) -> NDArray[np.float64]:
    """
    Rescale each dimension of a curve into the unit interval.

    Every value v of a dimension is mapped to `(v - min) / (max - min)`.
    A constant dimension, for which the range is zero, is mapped to all zeros
    by `sklearn.preprocessing.MinMaxScaler`, which does the scaling.

    Parameters
    ----------
    curve : sequence of point-like, ndarray or DataFrame
        Points of any (positive) dimension.

    Returns
    -------
    ndarray, shape (n_points, n_dims)
        Normalized copy of the curve.

    Raises
    ------
    EmptyInput, DimensionMismatch, InvalidDimension
        If the curve is not a valid collection of points.
    """
    data = as_curve_array(curve)
    scaler = MinMaxScaler()
    normalized = scaler.fit_transform(data)
    if np.any(constant := scaler.data_range_ == 0):
        get_logger().warning(f"Constant dimensions {np.flatnonzero(constant).tolist()} are normalized to 0.")
    return normalized


def difference_curve(normalized: Curve) -> NDArray[np.float64]:
    """
    Subtract the normalized x from the normalized y of a 2-D curve.

    The x values are kept as they are. For a concave curve the result peaks
    at the knee, and for a convex one it bottoms out at the elbow.
    """
    diff = as_curve_array(normalized, n_dims=2)
    diff[:, 1] -= diff[:, 0]
    return diff
