import numpy as np
import pandas as pd

from typing import Literal, TypeVar
from numpy.typing import ArrayLike, NDArray

from sklearn.base import BaseEstimator
from sklearn.utils.validation import check_is_fitted
from epic.logging import ClassLogger

from .errors import DimensionMismatch
from .detection import trace_kneedle
from .curve import Curve, as_curve_array, as_point_sequence, take_points, flip_x

KL = TypeVar('KL', bound='KneeLocator')


class KneeLocator(BaseEstimator):
    """
    Locate the knees (or elbows) of a curve with the Kneedle algorithm.

    Unlike `detect_knees`, the curve may also be decreasing; it is then
    flipped along the x-axis before the search, and the results are mapped
    back onto the points of the original curve.

    Parameters
    ----------
    sensitivity : float, default 1
        Algorithm sensitivity parameter.
        Higher values make for fewer, more conservative detections.

    smoothing_window : int, default 1
        Half-width, in samples, of the Gaussian smoothing kernel.

    find_elbow : bool, default False
        Whether to find elbows of a convex curve rather than knees of a concave one.

    direction : {'increasing', 'decreasing'}, default 'increasing'
        Direction of the curve, as x grows.

    Attributes
    ----------
    knee_indices_ : ndarray of ints
        Positions, in the fitted curve, of the confirmed knees.

    knees_ : list, ndarray or DataFrame
        The points of the fitted curve at `knee_indices_`.

    candidate_indices_ : ndarray of ints
        Positions, in the fitted curve, of the local extrema of the difference curve.

    difference_curve_ : ndarray, shape (n_points, 2)
        The difference curve, row-aligned with the fitted curve. For a decreasing
        curve it is computed on the flipped curve, so its x values decrease.

    average_step_ : float
        Average x step of the difference curve.
    """
    logger = ClassLogger()

    def __init__(
            self,
            sensitivity: float = 1,
            smoothing_window: int = 1,
            find_elbow: bool = False,
            direction: Literal['increasing', 'decreasing'] = 'increasing',
    ):
        self.sensitivity = sensitivity
        self.smoothing_window = smoothing_window
        self.find_elbow = find_elbow
        self.direction = direction

    def fit(self: KL, X: Curve | ArrayLike, y: ArrayLike | None = None) -> KL:
        """
        Find the knees of a curve.

        Parameters
        ----------
        X : sequence of point-like, ndarray or DataFrame
            If `y` is not given, the (x, y) points of the curve.
            Otherwise, the x values of the curve.

        y : array-like, optional
            The y values of the curve.

        Returns
        -------
        KneeLocator
            The fitted estimator.
        """
        if self.direction not in ('increasing', 'decreasing'):
            raise ValueError(f"Invalid direction `{self.direction}`; possible values: increasing, decreasing.")
        if y is not None:
            X, y = np.ravel(X), np.ravel(y)
            if len(X) != len(y):
                raise DimensionMismatch("lengths of x and y do not match")
            X = np.column_stack((X, y))
        else:
            X = as_point_sequence(X)
        data = as_curve_array(X, n_dims=2)
        flipped = self.direction == 'decreasing'
        trace = trace_kneedle(flip_x(data) if flipped else data, self.sensitivity, self.smoothing_window, self.find_elbow)
        knees, candidates, difference = trace.knees, trace.candidates, trace.difference
        if flipped:
            knees = np.sort(len(data) - 1 - knees)
            candidates = np.sort(len(data) - 1 - candidates)
            difference = difference[::-1].copy()
        self.logger.info(f"found {len(knees)} {'elbows' if self.find_elbow else 'knees'} in {len(data)} points")
        self.knee_indices_ = knees
        self.knees_ = take_points(X, knees)
        self.candidate_indices_ = candidates
        self.difference_curve_ = difference
        self.average_step_ = trace.average_step
        return self

    def _first_knee(self) -> tuple[float, float] | None:
        check_is_fitted(self, 'knee_indices_')
        if len(self.knee_indices_) == 0:
            return None
        knees = self.knees_
        if isinstance(knees, pd.DataFrame):
            return tuple(knees.iloc[0].tolist())
        if isinstance(knees, np.ndarray):
            return tuple(knees[0].tolist())
        return knees[0]

    @property
    def knee(self) -> tuple[float, float] | None:
        """The first knee found, or None if there is none."""
        return self._first_knee()

    @property
    def elbow(self) -> tuple[float, float] | None:
        """Alias of `knee`, for convex curves."""
        return self._first_knee()

    @property
    def knee_mask_(self) -> NDArray[np.bool_]:
        """Boolean mask over the points of the fitted curve, True where a knee was found."""
        check_is_fitted(self, 'knee_indices_')
        mask = np.zeros(len(self.difference_curve_), dtype=np.bool_)
        mask[self.knee_indices_] = True
        return mask
