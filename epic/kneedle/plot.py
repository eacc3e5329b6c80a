import numpy as np

from matplotlib.axes import Axes
from matplotlib import pyplot as plt
from epic.common.general import coalesce

from .detection import trace_kneedle
from .curve import Curve, as_curve_array


def plot_knees(
        curve: Curve,
        *,
        sensitivity: float = 1,
        smoothing_window: int = 1,
        find_elbow: bool = False,
        difference: bool = False,
        knee_color: str | None = None,
        ax: Axes | None = None,
        **kwargs,
) -> Axes:
    """
    Plot a curve, with its knees (or elbows) marked by vertical lines.

    This is a visual aid for choosing the sensitivity and smoothing window.

    Parameters
    ----------
    curve : sequence of point-like, ndarray or DataFrame
        The points (x, y) of the curve, ordered by x.

    sensitivity : float, default 1
        Algorithm sensitivity parameter.

    smoothing_window : int, default 1
        Half-width, in samples, of the Gaussian smoothing kernel.

    find_elbow : bool, default False
        Whether to find elbows instead of knees.

    difference : bool, default False
        If True, plot the difference curve used for the detection instead of
        the original curve. Candidates which were rejected are marked as well.

    knee_color : str, optional
        Color of the knee markers. Defaults to red.

    ax : Axes, optional
        Axes on which to plot.

    **kwargs :
        Additional arguments sent to `Axes.plot` when plotting the curve.

    Returns
    -------
    Axes
    """
    data = as_curve_array(curve, n_dims=2)
    trace = trace_kneedle(data, sensitivity, smoothing_window, find_elbow)
    points = trace.difference if difference else data
    knee_color = coalesce(knee_color, 'red')
    if ax is None:
        ax = plt.axes()
    ax.plot(points[:, 0], points[:, 1], **kwargs)
    if difference:
        rejected = np.setdiff1d(trace.candidates, trace.knees)
        ax.scatter(points[rejected, 0], points[rejected, 1], marker='x', color='gray', label="rejected")
    for i, knee in enumerate(trace.knees):
        ax.axvline(x=points[knee, 0], color=knee_color, linestyle="--", label=None if i else ("elbow" if find_elbow else "knee"))
    ax.set_xlabel("x (normalized)" if difference else "x")
    ax.set_ylabel("y - x (normalized)" if difference else "y")
    if len(trace.knees) or (difference and len(trace.candidates)):
        ax.legend()
    return ax
