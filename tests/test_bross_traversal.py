import numpy as np
import pytest

from seqplan.bross.decision_map import DecisionMap, load_bross_map
from seqplan.bross.errors import InvalidInputError, OutOfBoundsError
from seqplan.bross.pairs import informative_pairs, validate_pairs
from seqplan.bross.schema import DecisionCode, Position, RegionCode
from seqplan.bross.traversal import run_traversal, seqanalysis

EXAMPLE = [
    (1, 1), (1, 0), (0, 0), (1, 0), (1, 0), (1, 1), (0, 1), (1, 1), (1, 0), (1, 0),
    (1, 0), (1, 1), (1, 0), (0, 1), (0, 0), (1, 0), (1, 0), (1, 0), (1, 1), (1, 0),
]

A = (1, 0)
B = (0, 1)


def test_example_regression():
    res = seqanalysis(EXAMPLE)
    assert res.decision == DecisionCode.A_BETTER
    assert res.message == "A is better"
    assert res.n_pairs == 20
    assert res.n_informative == 13
    assert res.n_consumed == 13
    assert not res.stopped_early
    assert res.path[-1] == Position(19, 3)

    grid = res.grid
    assert grid[18, 2] == int(RegionCode.BOUNDARY)
    for pos in res.path[:-1]:
        assert grid[pos.as_index()] == int(RegionCode.PATH)
    # start cell is not marked
    assert grid[29, 0] == int(RegionCode.TWILIGHT)


def test_no_informative_pairs_is_absent():
    res = seqanalysis([(1, 1), (0, 0)])
    assert res.decision is None
    assert res.grid is None
    assert np.isnan(res.code)
    assert res.message == "No informative pairs"
    assert res.warnings

    assert run_traversal([]).decision is None


def test_early_exit_ignores_remaining_pairs():
    base = [A] * 9
    res = run_traversal(base)
    assert res.decision == DecisionCode.A_BETTER
    assert res.n_consumed == 9

    longer = run_traversal(base + [B] * 20)
    assert longer.decision == DecisionCode.A_BETTER
    assert longer.n_consumed == 9
    assert longer.stopped_early
    assert np.array_equal(longer.grid, res.grid)


def test_b_better():
    res = run_traversal([B] * 9)
    assert res.decision == DecisionCode.B_BETTER
    assert res.path[-1] == Position(30, 10)


def test_no_difference_after_balanced_preferences():
    res = run_traversal([A, B] * 11)
    assert res.decision == DecisionCode.NO_DIFFERENCE
    assert res.path[-1] == Position(19, 12)
    assert res.grid[18, 11] == int(RegionCode.BOUNDARY)

    res_ba = run_traversal([B, A] * 11)
    assert res_ba.decision == DecisionCode.NO_DIFFERENCE


def test_twilight_when_pairs_run_out():
    res = run_traversal([A, B])
    assert res.decision == DecisionCode.TWILIGHT
    assert res.n_consumed == 2
    # intermediate cell keeps the path marker, the last cell the boundary marker
    assert res.grid[28, 0] == int(RegionCode.PATH)
    assert res.grid[28, 1] == int(RegionCode.BOUNDARY)


def test_single_pair_twilight():
    res = run_traversal([B])
    assert res.decision == DecisionCode.TWILIGHT
    assert res.grid[29, 1] == int(RegionCode.BOUNDARY)


def test_traversal_is_deterministic_and_leaves_map_untouched():
    before = load_bross_map().initial_grid()
    r1 = seqanalysis(EXAMPLE)
    r2 = seqanalysis(EXAMPLE)
    assert r1.decision == r2.decision
    assert np.array_equal(r1.grid, r2.grid)
    assert r1.grid is not r2.grid
    assert np.array_equal(load_bross_map().initial_grid(), before)


def test_non_informative_pairs_do_not_change_the_result():
    rng = np.random.default_rng(7)
    informative = [A, A, B, A, B, B, A, A, A, B, A, A]
    expected = run_traversal(informative).decision

    for _ in range(20):
        mixed = []
        for p in informative:
            for _ in range(int(rng.integers(0, 3))):
                mixed.append((1, 1) if rng.random() < 0.5 else (0, 0))
            mixed.append(p)
        assert seqanalysis(mixed).decision == expected


def test_run_traversal_rejects_non_informative_pairs():
    with pytest.raises(InvalidInputError):
        run_traversal([A, (1, 1)])


@pytest.mark.parametrize(
    "bad",
    [
        [(2, 0)],
        [(-1, 0)],
        [(0.7, 1)],
        [[1, 0, 0, 1]],
        [1, 0, 0, 1],
        [(1, 0, 1)],
        [(np.nan, 1)],
    ],
)
def test_run_traversal_rejects_malformed_pairs(bad):
    with pytest.raises(InvalidInputError):
        run_traversal(bad)


@pytest.mark.parametrize("empty", [[], np.empty((0, 2))])
def test_run_traversal_empty_input_is_absent(empty):
    res = run_traversal(empty)
    assert res.decision is None
    assert res.grid is None


@pytest.mark.parametrize(
    "bad",
    [
        [],
        [(1, 2)],
        [(1, 0, 1)],
        [(0.5, 1)],
        [(np.nan, 1)],
        [[1, 0], [1]],
        "10",
    ],
)
def test_invalid_pair_matrix(bad):
    with pytest.raises(InvalidInputError):
        validate_pairs(bad)


def test_informative_filter_keeps_order():
    pairs = validate_pairs(EXAMPLE)
    info = informative_pairs(pairs)
    assert len(info) == 13
    assert info[:, 0].tolist() == [1, 1, 1, 0, 1, 1, 1, 1, 0, 1, 1, 1, 1]


def test_walk_off_the_map_raises():
    # an all-twilight map lets a long A run reach row 1 and step past it
    dmap = DecisionMap(grid=np.full((31, 31), int(RegionCode.TWILIGHT)))
    with pytest.raises(OutOfBoundsError):
        run_traversal([A] * 30, decision_map=dmap)

    res = run_traversal([A] * 29, decision_map=dmap)
    assert res.path[-1] == Position(1, 1)
    assert res.decision == DecisionCode.TWILIGHT


def test_cells_with_markers_do_not_decide():
    grid = np.full((31, 31), int(RegionCode.TWILIGHT))
    grid[29, 1] = int(RegionCode.PATH)
    grid[29, 2] = int(RegionCode.A_BETTER)
    dmap = DecisionMap(grid=grid)

    assert run_traversal([B], decision_map=dmap).decision is None
    assert run_traversal([B, B], decision_map=dmap).decision == DecisionCode.A_BETTER
