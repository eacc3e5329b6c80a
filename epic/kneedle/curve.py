import numpy as np
import pandas as pd

from typing import Protocol
from numpy.typing import ArrayLike, NDArray
from collections.abc import Sequence

from .errors import EmptyInput, InvalidDimension, DimensionMismatch


class PointLike(Protocol):
    """Anything exposing an indexable pair of reals, e.g. a tuple `(x, y)` or a row object."""
    def __getitem__(self, item: int) -> float:
        ...

    def __len__(self) -> int:
        ...


Curve = Sequence[PointLike] | NDArray | pd.DataFrame


def as_curve_array(curve: Curve | ArrayLike, n_dims: int | None = None) -> NDArray[np.float64]:
    """
    Validate a curve and convert it into a 2-D float array.

    Parameters
    ----------
    curve : sequence of point-like, ndarray or DataFrame
        The points of the curve, one per row.

    n_dims : int, optional
        Required number of components per point.
        If not given, any positive number of components is accepted.

    Returns
    -------
    ndarray, shape (n_points, n_dims)
        A new array; `curve` itself is never modified.

    Raises
    ------
    EmptyInput
        If `curve` has no points.

    DimensionMismatch
        If the points do not all have the same number of components.

    InvalidDimension
        If the points have no components, or not `n_dims` of them.
    """
    if isinstance(curve, (np.ndarray, pd.DataFrame)):
        array = np.array(curve, dtype=float)
        if array.ndim != 2:
            raise InvalidDimension(f"Expected a 2-D array of points; got {array.ndim}-D instead.")
        if array.shape[0] == 0:
            raise EmptyInput("Curve has no points.")
    else:
        rows = [np.asarray(point, dtype=float) for point in curve]
        if not rows:
            raise EmptyInput("Curve has no points.")
        if any(row.ndim != 1 for row in rows):
            raise InvalidDimension("Every point must be a 1-D sequence of components.")
        sizes = {row.size for row in rows}
        if len(sizes) > 1:
            raise DimensionMismatch(f"All points must have the same dimension; got dimensions {sorted(sizes)}.")
        array = np.vstack(rows)
    dims = array.shape[1]
    if dims == 0:
        raise InvalidDimension("Dimension of points cannot be 0.")
    if n_dims is not None and dims != n_dims:
        raise InvalidDimension(f"All points should be {n_dims}-dimensional; got {dims} components instead.")
    return array


def take_points(curve: Curve, indices: ArrayLike) -> list | NDArray | pd.DataFrame:
    """
    Select points of the original curve by position, preserving the container type.

    DataFrames yield a DataFrame of the selected rows, arrays an array,
    and any other sequence a list holding the very same element objects.
    """
    indices = np.asarray(indices, dtype=np.intp)
    if isinstance(curve, pd.DataFrame):
        return curve.iloc[indices]
    if isinstance(curve, np.ndarray):
        return curve[indices]
    if not isinstance(curve, Sequence):
        curve = list(curve)
    return [curve[i] for i in indices]


def flip_x(curve: Curve) -> list[tuple[float, float]] | NDArray | pd.DataFrame:
    """
    Mirror the x-axis of a curve.

    Every x is replaced by `max(x) - x` and the order of the points is reversed,
    so a decreasing curve becomes an increasing one (x increasing) and the
    Kneedle pipeline applies to it as is. Knees found on the flipped curve
    are in flipped coordinates; mirroring them back is up to the caller.

    Parameters
    ----------
    curve : sequence of point-like, ndarray or DataFrame
        The curve to flip. Must be 2-dimensional.

    Returns
    -------
    list of 2-tuples, ndarray or DataFrame
        A new curve, of the same kind as `curve`.
        A plain sequence yields a list of `(x, y)` tuples.
    """
    array = as_curve_array(curve, n_dims=2)
    flipped = array[::-1].copy()
    flipped[:, 0] = array[:, 0].max() - flipped[:, 0]
    if isinstance(curve, pd.DataFrame):
        return pd.DataFrame(flipped, index=curve.index[::-1], columns=curve.columns)
    if isinstance(curve, np.ndarray):
        return flipped
    return [(x, y) for x, y in flipped.tolist()]


def as_point_sequence(curve: Curve) -> Curve:
    """Materialize a one-shot iterable of points, so it can be both validated and indexed."""
    if isinstance(curve, (Sequence, np.ndarray, pd.DataFrame)):
        return curve
    return list(curve)
