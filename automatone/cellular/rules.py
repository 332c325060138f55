"""Evolution rules for the two automaton families.

Elementary (1-D) automata follow Wolfram's numbering: the states of a cell
and its left and right neighbours form a 3-bit index (left is the most
significant bit) and bit ``index`` of the 8-bit rule number is the cell's
next state. Cells beyond either end of the row count as dead.

The life-like (2-D) automaton applies Conway's B3/S23 rule over the Moore
neighbourhood. Cells outside the grid count as dead (no wraparound).

Malformed parameters produce an empty result instead of an exception.
"""

import logging
import typing

import automatone.cellular.grid
import automatone.events


logger = logging.getLogger(__name__)

Row = automatone.cellular.grid.Row
Grid = automatone.cellular.grid.Grid

# Moore neighbourhood offsets
NEIGHBOUR_OFFSETS: typing.Tuple[typing.Tuple[int, int], ...] = (
	(-1, -1), (0, -1), (1, -1),
	(-1, 0), (1, 0),
	(-1, 1), (0, 1), (1, 1),
)


def _is_count (value: typing.Any) -> bool:

	return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def is_valid_rule (rule: typing.Any) -> bool:

	"""True when ``rule`` is an integer elementary rule number (0-255)."""

	return _is_count(rule) and rule <= 255


def apply_1d_rule (row: typing.Sequence[int], rule: int) -> Row:

	"""
	Return the next generation of a 1-D row under an elementary rule.
	"""

	width = len(row)
	cells = [1 if cell else 0 for cell in row]
	next_row = []

	for i in range(width):
		left = cells[i - 1] if i > 0 else 0
		right = cells[i + 1] if i < width - 1 else 0
		index = (left << 2) | (cells[i] << 1) | right
		next_row.append((rule >> index) & 1)

	return tuple(next_row)


def evolve_1d (initial_row: typing.Sequence[int], rule: int, generation_count: int) -> typing.List[Row]:

	"""Run an elementary automaton and return every generation.

	The initial row is generation 0, so exactly ``generation_count`` rows come
	back, each as wide as the initial row.

	Parameters:
		initial_row: Seed cells (0/1).
		rule: Wolfram rule number, 0-255.
		generation_count: Number of rows to return.

	Returns:
		The generations in order, or an empty list when ``rule`` or
		``generation_count`` is invalid.

	Example:
		```python
		rows = evolve_1d((0, 0, 1, 0, 0), rule=90, generation_count=3)
		# [(0, 0, 1, 0, 0), (0, 1, 0, 1, 0), (1, 0, 0, 0, 1)]
		```
	"""

	if not is_valid_rule(rule):
		logger.warning(f"Rule {rule!r} is not an elementary rule (0-255) - no generations produced")
		return []

	if not _is_count(generation_count):
		logger.warning(f"Generation count {generation_count!r} is invalid - no generations produced")
		return []

	if generation_count == 0:
		return []

	rows: typing.List[Row] = [tuple(1 if cell else 0 for cell in initial_row)]

	while len(rows) < generation_count:
		rows.append(apply_1d_rule(rows[-1], rule))

	return rows


def count_neighbours (grid: Grid, x: int, y: int) -> int:

	"""Count the live Moore neighbours of ``(x, y)``; cells off the grid are dead."""

	height = len(grid)
	total = 0

	for dx, dy in NEIGHBOUR_OFFSETS:
		nx = x + dx
		ny = y + dy
		if 0 <= ny < height and 0 <= nx < len(grid[ny]):
			total += grid[ny][nx]

	return total


def life_step (grid: Grid, generation: int = 0) -> typing.Tuple[Grid, typing.List[automatone.events.CellChange]]:

	"""Apply one Conway step.

	A live cell with two or three live neighbours survives; a dead cell with
	exactly three is born; everything else is dead in the next generation.

	Parameters:
		grid: Current generation.
		generation: Iteration index recorded on each change.

	Returns:
		The next grid and one :class:`~automatone.events.CellChange` per
		flipped cell, in row-major order.
	"""

	changes: typing.List[automatone.events.CellChange] = []
	next_rows: typing.List[Row] = []

	for y, row in enumerate(grid):

		next_row = []

		for x, cell in enumerate(row):

			neighbours = count_neighbours(grid, x, y)

			if cell:
				alive = 1 if neighbours in (2, 3) else 0
				if not alive:
					changes.append(automatone.events.CellChange(x, y, automatone.events.ChangeType.DEATH, generation))

			else:
				alive = 1 if neighbours == 3 else 0
				if alive:
					changes.append(automatone.events.CellChange(x, y, automatone.events.ChangeType.BIRTH, generation))

			next_row.append(alive)

		next_rows.append(tuple(next_row))

	return tuple(next_rows), changes


def evolve_grid (grid_state: automatone.cellular.grid.GridState, iteration_count: int) -> typing.List[automatone.events.CellChange]:

	"""Evolve a grid state in place and collect every cell change.

	Each iteration's grid is committed to ``grid_state`` (so its history keeps
	the most recent generations) and its changes are tagged with the
	iteration index.

	Returns:
		All changes across all iterations, oldest first; empty when
		``iteration_count`` is invalid.
	"""

	if not _is_count(iteration_count):
		logger.warning(f"Iteration count {iteration_count!r} is invalid - grid left unchanged")
		return []

	all_changes: typing.List[automatone.events.CellChange] = []

	for iteration in range(iteration_count):
		next_grid, changes = life_step(grid_state.grid, iteration)
		grid_state.commit(next_grid)
		all_changes.extend(changes)

	return all_changes
