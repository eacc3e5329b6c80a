import pytest
import numpy as np
import pandas as pd

from epic.kneedle import (
    flip_x,
    find_candidates,
    average_step,
    confirm,
    trace_kneedle,
    detect_knees,
    kneedle,
)
from epic.kneedle.errors import EmptyInput, InvalidDimension, DimensionMismatch

CONCAVE = [
    (0, 0), (0.1, .55), (0.2, .75), (0.35, .825), (0.45, .875),
    (0.55, .9), (0.675, .925), (0.775, .95), (0.875, .975), (1, 1),
]
CONVEX = [(0, 1), (1, 2), (2, 3), (3, 4), (4, 5), (5, 10), (6, 15), (7, 20), (8, 40), (9, 100)]
CONVEX_DECREASING = [(0, 100), (1, 40), (2, 20), (3, 15), (4, 10), (5, 5), (6, 4), (7, 3), (8, 2), (9, 1)]


class Sample:
    """A row carrying a payload besides its coordinates."""
    def __init__(self, x, y, label):
        self.x = x
        self.y = y
        self.label = label

    def __len__(self):
        return 2

    def __getitem__(self, item):
        return (self.x, self.y)[item]


def test_find_candidates():
    curve = [(0, 0), (1, 2), (2, 1), (3, 3), (4, 0)]
    assert find_candidates(curve, seek_minima=False).tolist() == [1, 3]
    assert find_candidates(curve, seek_minima=True).tolist() == [2]


def test_find_candidates_strict():
    assert find_candidates([(0, 0), (1, 1), (2, 1), (3, 0)], seek_minima=False).tolist() == []
    assert find_candidates([(0, 1), (1, 0), (2, 0), (3, 1)], seek_minima=True).tolist() == []
    assert find_candidates([(0, 1), (1, 1), (2, 1)], seek_minima=True).tolist() == []
    # edges are never candidates
    assert find_candidates([(0, 5), (1, 0), (2, 5)], seek_minima=False).tolist() == []


def test_find_candidates_short_curves():
    assert find_candidates([(0, 1)], seek_minima=True).tolist() == []
    assert find_candidates([(0, 1), (1, 0)], seek_minima=False).tolist() == []


def test_average_step():
    assert average_step([(0, 0), (0.25, 1), (1, 0)]) == pytest.approx(0.5)
    assert average_step([(3, 3)]) == 0


def test_confirm_knee():
    original = [(0, 10), (1, 20), (2, 30), (3, 40), (4, 50)]
    diff = [(0, 0), (0.25, 0.5), (0.5, 0.45), (0.75, 0.1), (1, 0)]
    assert confirm(original, diff, [1], 1, seek_knee=True) == [(1, 20)]
    assert confirm(original, diff, [1], 2, seek_knee=True) == []
    assert confirm(original, diff, [], 1, seek_knee=True) == []


def test_confirm_elbow():
    original = [(0, 10), (1, 20), (2, 30), (3, 40), (4, 50)]
    diff = [(0, 0), (0.25, -0.5), (0.5, -0.45), (0.75, -0.1), (1, 0)]
    assert confirm(original, diff, [1], 1, seek_knee=False) == [(1, 20)]
    assert confirm(original, diff, [1], 3, seek_knee=False) == []


def test_confirm_scans_up_to_next_candidate():
    original = [(0, 10), (1, 20), (2, 30), (3, 40), (4, 50)]
    diff = [(0, 0), (0.25, 0.5), (0.5, 0.4), (0.75, 0.45), (1, 0)]
    assert find_candidates(diff, seek_minima=False).tolist() == [1, 3]
    assert confirm(original, diff, [1, 3], 1, seek_knee=True) == [(3, 40)]


def test_confirm_length_mismatch():
    with pytest.raises(DimensionMismatch):
        confirm([(0, 1), (1, 2)], [(0, 0), (0.5, 1), (1, 0)], [1], 1, seek_knee=True)


def test_golden_knee():
    assert detect_knees(CONCAVE, sensitivity=1, smoothing_window=1, find_elbow=False) == [(0.2, 0.75)]


def test_golden_elbow():
    assert detect_knees(CONVEX, 1, 1, find_elbow=True) == [(7, 20)]


def test_golden_flipped_elbow():
    assert detect_knees(flip_x(CONVEX_DECREASING), 1, 1, True) == [(7, 20)]


def test_flipped_results_mirror_back():
    [(x, y)] = detect_knees(flip_x(CONVEX_DECREASING), 1, 1, True)
    x_max = max(x for x, _ in CONVEX_DECREASING)
    assert (x_max - x, y) in CONVEX_DECREASING
    assert (x_max - x, y) == (2, 20)


def test_trace():
    trace = trace_kneedle(CONCAVE)
    assert trace.difference.shape == (10, 2)
    assert trace.candidates.tolist() == [2]
    assert trace.knees.tolist() == [2]
    assert trace.average_step == pytest.approx(1 / 9)
    assert trace.difference[0, 1] == pytest.approx(0)
    assert trace.difference[-1, 1] == pytest.approx(0)


def test_determinism():
    first = detect_knees(CONVEX, 1, 2, True)
    second = detect_knees(CONVEX, 1, 2, True)
    assert first == second


def test_scale_invariance():
    data = np.array(CONCAVE)
    scaled = data * [1, 1000]
    for find_elbow in (False, True):
        expected = trace_kneedle(data, find_elbow=find_elbow).knees
        assert np.all(trace_kneedle(scaled, find_elbow=find_elbow).knees == expected)
    convex = np.array(CONVEX, dtype=float)
    assert trace_kneedle(convex * [1, 0.01], find_elbow=True).knees.tolist() == [7]


@pytest.mark.parametrize('window', [1, 2, 3])
@pytest.mark.parametrize('find_elbow', [False, True])
def test_monotone_linear_curve(window, find_elbow):
    line = [(x, x) for x in np.linspace(0, 1, 10)]
    assert trace_kneedle(line, smoothing_window=window, find_elbow=find_elbow).candidates.tolist() == []
    assert detect_knees(line, smoothing_window=window, find_elbow=find_elbow) == []


def test_sensitivity():
    assert detect_knees(CONCAVE, sensitivity=0) == [(0.2, 0.75)]
    assert detect_knees(CONCAVE, sensitivity=10) == []


def test_zero_smoothing_window():
    assert detect_knees(CONVEX, smoothing_window=0, find_elbow=True) == [(7, 20)]
    noisy = [(x, np.sqrt(x) + 0.05 * (-1) ** x) for x in range(30)]
    assert trace_kneedle(noisy, 1, 0).knees.tolist() == trace_kneedle(noisy, 1, 1).knees.tolist()


def test_wrong_kind():
    assert detect_knees(CONCAVE, find_elbow=True) == []
    assert detect_knees(CONVEX, find_elbow=False) == []


def test_short_curves():
    assert detect_knees([(0, 0), (1, 1)]) == []
    assert detect_knees([(0, 0)], find_elbow=True) == []


def test_containers():
    arr = np.array(CONCAVE)
    knees = detect_knees(arr)
    assert isinstance(knees, np.ndarray)
    assert np.all(knees == [[0.2, 0.75]])

    df = pd.DataFrame(CONCAVE, columns=['x', 'y'], index=list('abcdefghij'))
    knees = detect_knees(df)
    assert isinstance(knees, pd.DataFrame)
    assert knees.index.tolist() == ['c']
    assert knees.iloc[0].tolist() == [0.2, 0.75]


def test_generic_elements():
    samples = [Sample(x, y, f"s{i}") for i, (x, y) in enumerate(CONVEX)]
    knees = detect_knees(samples, find_elbow=True)
    assert len(knees) == 1
    assert knees[0] is samples[7]
    assert knees[0].label == "s7"


def test_detect_knees_errors():
    with pytest.raises(EmptyInput):
        detect_knees([])
    with pytest.raises(InvalidDimension):
        detect_knees([(0, 1, 2), (1, 2, 3), (2, 3, 4)])
    with pytest.raises(InvalidDimension):
        detect_knees([(), (), ()])
    with pytest.raises(DimensionMismatch):
        detect_knees([(0, 1), (1, 2), (2,)])
    with pytest.raises(ValueError):
        detect_knees(CONCAVE, smoothing_window=-1)


def test_kneedle():
    x, y = zip(*CONVEX)
    assert kneedle(x, y, find_elbow=True) == [(7, 20)]
    x, y = zip(*CONCAVE)
    knees = kneedle(np.array(x), np.array(y))
    assert knees == [(0.2, 0.75)]
    assert all(isinstance(v, float) for v in knees[0])
    with pytest.raises(DimensionMismatch):
        kneedle([0, 1, 2], [0, 1])


def test_one_shot_iterables():
    assert detect_knees(iter(CONVEX), find_elbow=True) == [(7, 20)]
    assert detect_knees((point for point in CONCAVE)) == [(0.2, 0.75)]
    diff = [(0, 0), (0.25, 0.5), (0.5, 0.45), (0.75, 0.1), (1, 0)]
    assert confirm(iter([(0, 10), (1, 20), (2, 30), (3, 40), (4, 50)]), diff, [1], 1, seek_knee=True) == [(1, 20)]


def test_short_curve_average_step_is_normalized():
    trace = trace_kneedle([(0, 0), (10, 5)])
    assert trace.average_step == pytest.approx(1)
    assert trace.difference.shape == (2, 2)
    assert trace.knees.tolist() == []
