from .errors import KneedleError, EmptyInput, InvalidDimension, DimensionMismatch
from .curve import PointLike, as_curve_array, flip_x
from .smoothing import gaussian_smooth
from .normalization import minmax_normalize, difference_curve
from .detection import (
    find_candidates,
    average_step,
    confirm,
    trace_kneedle,
    detect_knees,
    kneedle,
)
from .locator import KneeLocator
