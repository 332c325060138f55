"""Grid state for the cellular automata.

:class:`GridState` owns the current cell matrix and a sliding window of the
most recent generations. Grids are tuples of tuples, so a committed
generation can never change underneath the history that refers to it.
"""

import collections
import logging
import random
import typing

import automatone.config


logger = logging.getLogger(__name__)

Row = typing.Tuple[int, ...]
Grid = typing.Tuple[Row, ...]
CellInput = typing.Sequence[typing.Sequence[int]]

# Generations retained in history; older ones are evicted first.
HISTORY_CAP = 20

# Live probability for a random 1-D seed row.
RANDOM_ROW_DENSITY = 0.3

# Glider cells relative to its anchor (x, y), heading down and right.
GLIDER_CELLS: typing.Tuple[typing.Tuple[int, int], ...] = ((1, 0), (2, 1), (0, 2), (1, 2), (2, 2))


def empty_grid (width: int, height: int) -> Grid:

	"""Return an all-dead grid."""

	return tuple(tuple(0 for _ in range(width)) for _ in range(height))


def freeze_grid (cells: CellInput) -> Grid:

	"""Copy a nested sequence of cells into an immutable binary grid."""

	return tuple(tuple(1 if cell else 0 for cell in row) for row in cells)


def grid_from_cells (width: int, height: int, live: typing.Iterable[typing.Tuple[int, int]]) -> Grid:

	"""Build a grid with the given ``(x, y)`` cells alive; out-of-bounds cells are ignored."""

	rows = [[0] * width for _ in range(height)]

	for x, y in live:
		if 0 <= x < width and 0 <= y < height:
			rows[y][x] = 1

	return freeze_grid(rows)


def live_count (grid: Grid) -> int:

	"""Return the number of live cells in a grid."""

	return sum(sum(row) for row in grid)


class GridState:

	"""
	The current grid plus a bounded, oldest-first generation history.

	Invariants: ``len(history) <= history_cap`` and ``history[-1] == grid``.
	"""

	def __init__ (self, width: int = 16, height: int = 16, rng: typing.Optional[random.Random] = None, history_cap: int = HISTORY_CAP) -> None:

		"""Create an empty state. Negative dimensions are clamped to zero.

		Parameters:
			width: Cells per row.
			height: Number of rows.
			rng: Random source for the random seed pattern.
			history_cap: Maximum number of generations kept in history.
		"""

		self.width = max(0, int(width))
		self.height = max(0, int(height))
		self.rng: random.Random = rng or random.Random()
		self.history_cap = max(1, history_cap)

		self._grid: Grid = empty_grid(self.width, self.height)
		self._history: typing.Deque[Grid] = collections.deque([self._grid])
		self.generation = 0

	@property
	def grid (self) -> Grid:

		"""The current generation."""

		return self._grid

	@property
	def history (self) -> typing.List[Grid]:

		"""Retained generations, oldest first."""

		return list(self._history)

	def initialize (
		self,
		mode: typing.Union[automatone.config.InitialCondition, str] = automatone.config.InitialCondition.CENTER,
		density: float = 0.3,
		custom_cells: typing.Sequence[typing.Tuple[int, int]] = ()
	) -> Grid:

		"""Seed the 2-D grid and reset history and the step counter.

		Parameters:
			mode: ``center``, ``random``, ``glider`` or ``custom``. Anything else
				(including ``single``, which only applies to 1-D rows) seeds
				the center cell.
			density: Live-cell probability for ``random``.
			custom_cells: ``(x, y)`` cells for ``custom``; an empty list falls
				back to ``center``.
		"""

		mode = automatone.config.InitialCondition.resolve(mode, automatone.config.InitialCondition.CENTER)

		if mode == automatone.config.InitialCondition.RANDOM:
			grid = freeze_grid([
				[1 if self.rng.random() < density else 0 for _ in range(self.width)]
				for _ in range(self.height)
			])

		elif mode == automatone.config.InitialCondition.GLIDER:
			grid = self._glider()

		elif mode == automatone.config.InitialCondition.CUSTOM and custom_cells:
			grid = grid_from_cells(self.width, self.height, custom_cells)

		else:
			grid = self._center()

		self._reset(grid)

		return grid

	def initialize_1d (
		self,
		width: int,
		mode: typing.Union[automatone.config.InitialCondition, str] = automatone.config.InitialCondition.CENTER,
		custom_cells: typing.Sequence[typing.Tuple[int, int]] = ()
	) -> Row:

		"""Seed a single row and make it the whole grid.

		Parameters:
			width: Cells in the row; the state's width follows it.
			mode: ``center`` (middle cell), ``single`` (index 0), ``random``
				(each cell with probability 0.3) or ``custom`` (the ``x`` of
				each custom cell). Anything else seeds the middle cell.
			custom_cells: Cells for ``custom``; an empty list falls back to ``center``.
		"""

		width = max(0, int(width))
		mode = automatone.config.InitialCondition.resolve(mode, automatone.config.InitialCondition.CENTER)
		cells = [0] * width

		if mode == automatone.config.InitialCondition.RANDOM:
			cells = [1 if self.rng.random() < RANDOM_ROW_DENSITY else 0 for _ in range(width)]

		elif mode == automatone.config.InitialCondition.SINGLE:
			if width:
				cells[0] = 1

		elif mode == automatone.config.InitialCondition.CUSTOM and custom_cells:
			for x, _ in custom_cells:
				if 0 <= x < width:
					cells[x] = 1

		elif width:
			cells[width // 2] = 1

		row: Row = tuple(cells)

		self.width = width
		self.height = 1
		self._reset((row,))

		return row

	def commit (self, new_grid: CellInput) -> Grid:

		"""Make ``new_grid`` current and append it to history, evicting the oldest past the cap."""

		grid = freeze_grid(new_grid)

		self._grid = grid
		self._history.append(grid)
		self.generation += 1

		while len(self._history) > self.history_cap:
			self._history.popleft()

		return grid

	def cell_at (self, x: int, y: int) -> int:

		"""Return the cell at ``(x, y)``, or 0 when the coordinate is outside the grid."""

		if 0 <= y < len(self._grid) and 0 <= x < len(self._grid[y]):
			return self._grid[y][x]

		return 0

	def _reset (self, grid: Grid) -> None:

		self._grid = grid
		self._history = collections.deque([grid])
		self.generation = 0

	def _center (self) -> Grid:

		if not self.width or not self.height:
			return empty_grid(self.width, self.height)

		return grid_from_cells(self.width, self.height, [(self.width // 2, self.height // 2)])

	def _glider (self) -> Grid:

		start_x = self.width // 4
		start_y = self.height // 4

		if start_x + 2 >= self.width or start_y + 2 >= self.height:
			logger.debug(f"Glider does not fit a {self.width}x{self.height} grid - starting empty")
			return empty_grid(self.width, self.height)

		return grid_from_cells(self.width, self.height, [(start_x + dx, start_y + dy) for dx, dy in GLIDER_CELLS])
