import random

import automatone.cellular.grid
import automatone.config


def live_cells (grid: automatone.cellular.grid.Grid) -> set:

	return {(x, y) for y, row in enumerate(grid) for x, cell in enumerate(row) if cell}


def test_new_state_is_empty () -> None:

	"""A fresh state holds one all-dead generation."""

	state = automatone.cellular.grid.GridState(4, 3)

	assert state.grid == ((0, 0, 0, 0),) * 3
	assert state.history == [state.grid]
	assert state.generation == 0


def test_initialize_center () -> None:

	"""The center seed sets exactly the middle cell."""

	state = automatone.cellular.grid.GridState(8, 6)
	grid = state.initialize("center")

	assert live_cells(grid) == {(4, 3)}


def test_initialize_glider_position () -> None:

	"""The glider is placed a quarter of the way into the grid."""

	state = automatone.cellular.grid.GridState(16, 16)
	grid = state.initialize(automatone.config.InitialCondition.GLIDER)

	assert live_cells(grid) == {(5, 4), (6, 5), (4, 6), (5, 6), (6, 6)}


def test_initialize_glider_too_small_is_empty () -> None:

	"""A grid too small for the glider starts empty."""

	state = automatone.cellular.grid.GridState(2, 2)
	grid = state.initialize("glider")

	assert automatone.cellular.grid.live_count(grid) == 0


def test_initialize_random_density_extremes () -> None:

	"""Density 0 seeds nothing and density 1 seeds everything."""

	state = automatone.cellular.grid.GridState(5, 5, rng=random.Random(3))

	assert automatone.cellular.grid.live_count(state.initialize("random", density=0.0)) == 0
	assert automatone.cellular.grid.live_count(state.initialize("random", density=1.0)) == 25


def test_initialize_custom_ignores_out_of_bounds () -> None:

	"""Custom cells outside the grid are dropped."""

	state = automatone.cellular.grid.GridState(4, 4)
	grid = state.initialize("custom", custom_cells=[(0, 0), (3, 3), (9, 9), (-1, 2)])

	assert live_cells(grid) == {(0, 0), (3, 3)}


def test_initialize_custom_without_cells_falls_back_to_center () -> None:

	state = automatone.cellular.grid.GridState(4, 4)

	assert live_cells(state.initialize("custom")) == {(2, 2)}


def test_initialize_resets_history () -> None:

	"""Seeding discards earlier generations."""

	state = automatone.cellular.grid.GridState(4, 4)
	state.commit(automatone.cellular.grid.empty_grid(4, 4))
	state.commit(automatone.cellular.grid.empty_grid(4, 4))

	state.initialize("center")

	assert len(state.history) == 1
	assert state.generation == 0


def test_initialize_1d_modes () -> None:

	"""1-D seeds: center, single, custom and random rows."""

	state = automatone.cellular.grid.GridState(rng=random.Random(1))

	assert state.initialize_1d(7, "center") == (0, 0, 0, 1, 0, 0, 0)
	assert state.initialize_1d(5, "single") == (1, 0, 0, 0, 0)
	assert state.initialize_1d(5, "custom", [(1, 0), (4, 0), (8, 0)]) == (0, 1, 0, 0, 1)

	row = state.initialize_1d(32, "random")

	assert len(row) == 32
	assert set(row) <= {0, 1}


def test_initialize_1d_sets_single_row_grid () -> None:

	state = automatone.cellular.grid.GridState(16, 16)
	row = state.initialize_1d(9)

	assert state.grid == (row,)
	assert state.width == 9
	assert state.height == 1


def test_commit_appends_and_counts () -> None:

	state = automatone.cellular.grid.GridState(2, 1)
	state.commit([[1, 0]])

	assert state.grid == ((1, 0),)
	assert state.history[-1] == state.grid
	assert state.generation == 1


def test_history_is_capped () -> None:

	"""History never exceeds its cap and evicts the oldest generations first."""

	state = automatone.cellular.grid.GridState(3, 1)

	for i in range(50):
		state.commit([[i % 2, 0, 0]])

	assert len(state.history) == automatone.cellular.grid.HISTORY_CAP
	assert state.generation == 50
	assert state.history[-1] == state.grid


def test_commit_copies_input () -> None:

	"""Mutating the list passed to commit does not change the stored grid."""

	state = automatone.cellular.grid.GridState(2, 1)
	cells = [[1, 1]]
	state.commit(cells)
	cells[0][0] = 0

	assert state.grid == ((1, 1),)


def test_cell_at_out_of_bounds_is_dead () -> None:

	state = automatone.cellular.grid.GridState(3, 3)
	state.initialize("center")

	assert state.cell_at(1, 1) == 1
	assert state.cell_at(-1, 0) == 0
	assert state.cell_at(3, 1) == 0
	assert state.cell_at(1, 7) == 0
