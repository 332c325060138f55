"""Map automaton state to note events.

Every live cell becomes a note. Its column picks a degree of the configured
scale (wrapping into higher octaves along a 1-D row, or into higher octaves
every four rows of a 2-D grid) above the first note of the configured
register. Velocity comes from one of four strategies chosen once when the
mapper is built:

- ``linear`` - rises from 70 to 127 left to right.
- ``distance`` - loudest at the center, falling to 47 at the far edge.
- ``random`` - uniform 60-127 from the run's seeded random source.
- ``cellular`` - 80, plus 23 for each live horizontal neighbour.

With ``emphasize_births`` a 2-D cell born during the run plays at 110 and a
cell that died during the run is left out. A live cell without a change
record (a steady-state cell) keeps its strategy velocity.

The mapper reads grids and never changes them.
"""

import logging
import math
import random
import typing

import automatone.cellular.grid
import automatone.config
import automatone.constants.velocity
import automatone.events
import automatone.intervals


logger = logging.getLogger(__name__)

Row = automatone.cellular.grid.Row
Grid = automatone.cellular.grid.Grid

# Rows of a 2-D grid per octave step
ROWS_PER_OCTAVE = 4

RowVelocity = typing.Callable[[typing.Sequence[int], int], float]
GridVelocity = typing.Callable[[Grid, int, int], float]


def _horizontal_neighbours (row: typing.Sequence[int], i: int) -> int:

	left = row[i - 1] if i > 0 else 0
	right = row[i + 1] if i < len(row) - 1 else 0

	return left + right


def _row_linear (row: typing.Sequence[int], i: int) -> float:

	return 70 + math.floor(i / len(row) * 57)


def _row_distance (row: typing.Sequence[int], i: int) -> float:

	center = len(row) // 2
	max_distance = max(center, len(row) - center)

	return 127 - math.floor(abs(i - center) / max_distance * 80)


def _row_cellular (row: typing.Sequence[int], i: int) -> float:

	return 80 + _horizontal_neighbours(row, i) * 23


def _grid_linear (grid: Grid, x: int, y: int) -> float:

	return _row_linear(grid[y], x)


def _grid_distance (grid: Grid, x: int, y: int) -> float:

	center_x = len(grid[0]) // 2
	center_y = len(grid) // 2
	max_distance = math.hypot(center_x, center_y)

	if not max_distance:
		return automatone.constants.velocity.MAX_VELOCITY

	return 127 - math.floor(math.hypot(x - center_x, y - center_y) / max_distance * 80)


def _grid_cellular (grid: Grid, x: int, y: int) -> float:

	return _row_cellular(grid[y], x)


class NoteMapper:

	"""
	Turns rows and grids into note-event steps for one configuration.
	"""

	def __init__ (self, config: typing.Optional[automatone.config.CellularConfig] = None, rng: typing.Optional[random.Random] = None) -> None:

		"""Resolve the scale, register and velocity strategy for ``config``.

		Parameters:
			config: Validated generator configuration (defaults when ``None``).
			rng: Random source for the ``random`` velocity strategy.
		"""

		self.config = config or automatone.config.CellularConfig()
		self.rng: random.Random = rng or random.Random()

		self.scale: typing.List[int] = automatone.intervals.get_scale(self.config.scale.value)
		self.note_range: typing.List[int] = automatone.intervals.get_note_range(self.config.note_range.value)
		self.base_note: int = self.note_range[0] if self.note_range else 48

		row_strategies: typing.Dict[automatone.config.VelocityMap, RowVelocity] = {
			automatone.config.VelocityMap.LINEAR: _row_linear,
			automatone.config.VelocityMap.DISTANCE: _row_distance,
			automatone.config.VelocityMap.RANDOM: self._random_velocity,
			automatone.config.VelocityMap.CELLULAR: _row_cellular,
		}

		grid_strategies: typing.Dict[automatone.config.VelocityMap, GridVelocity] = {
			automatone.config.VelocityMap.LINEAR: _grid_linear,
			automatone.config.VelocityMap.DISTANCE: _grid_distance,
			automatone.config.VelocityMap.RANDOM: self._random_velocity,
			automatone.config.VelocityMap.CELLULAR: _grid_cellular,
		}

		self._row_velocity = row_strategies[self.config.velocity_map]
		self._grid_velocity = grid_strategies[self.config.velocity_map]

	def _random_velocity (self, *_: typing.Any) -> float:

		return self.rng.randint(60, 127)

	def map_1d_generation (self, row: typing.Sequence[int], step_index: int) -> automatone.events.Step:

		"""Map one 1-D generation to a single step.

		Parameters:
			row: Cells of the generation.
			step_index: Position of the step; also the ``row`` of each note.

		Returns:
			A step at ``step_index * note_interval`` ms. Rows with no live
			cells produce a rest (a step with no notes).
		"""

		step = automatone.events.Step(step=step_index, time=step_index * self.config.note_interval)

		for i, cell in enumerate(row):

			if not cell:
				continue

			step.notes.append(automatone.events.NoteEvent(
				pitch = automatone.intervals.scale_degree_pitch(self.base_note, self.scale, i),
				velocity = automatone.constants.velocity.clamp(self._row_velocity(row, i)),
				duration = self.config.note_duration,
				column = i,
				row = step_index,
				state = "active",
			))

		return step

	def map_2d_grid (self, grid: Grid, cell_changes: typing.Sequence[automatone.events.CellChange] = ()) -> typing.List[automatone.events.Step]:

		"""Map a 2-D grid to one step per row that has notes.

		Parameters:
			grid: Generation to map (normally the final one).
			cell_changes: Changes recorded during the run, used for emphasis.

		Returns:
			Steps indexed by row; rows with no sounding cells are omitted.
		"""

		if not grid or not grid[0]:
			return []

		changes = self._index_changes(cell_changes)
		scale_length = len(self.scale)
		sequence: typing.List[automatone.events.Step] = []

		for y, row in enumerate(grid):

			step = automatone.events.Step(step=y, time=y * self.config.note_interval)
			octave_offset = (y // ROWS_PER_OCTAVE) * 12

			for x, cell in enumerate(row):

				if not cell:
					continue

				change = changes.get((x, y))

				if change is not None and self.config.emphasize_births:

					if change == automatone.events.ChangeType.DEATH:
						continue

					velocity: float = automatone.constants.velocity.BIRTH_VELOCITY

				else:
					velocity = self._grid_velocity(grid, x, y)

				step.notes.append(automatone.events.NoteEvent(
					pitch = self.base_note + self.scale[x % scale_length] + octave_offset,
					velocity = automatone.constants.velocity.clamp(velocity),
					duration = self.config.note_duration,
					column = x,
					row = y,
					state = change.value if change is not None else "active",
				))

			if step.notes:
				sequence.append(step)

		return sequence

	def map_generations (
		self,
		generations: typing.Sequence[typing.Any],
		cell_changes: typing.Sequence[automatone.events.CellChange] = ()
	) -> typing.List[automatone.events.Step]:

		"""Map a run's generations to a sequence.

		Flat rows (1-D runs) become one step each. Rectangular grids (2-D
		runs) are mapped through :meth:`map_2d_grid` using the final grid.
		"""

		if not generations:
			return []

		first = generations[0]

		if len(first) == 0 or not isinstance(first[0], (list, tuple)):
			return [self.map_1d_generation(row, index) for index, row in enumerate(generations)]

		return self.map_2d_grid(automatone.cellular.grid.freeze_grid(generations[-1]), cell_changes)

	@staticmethod
	def _index_changes (cell_changes: typing.Sequence[automatone.events.CellChange]) -> typing.Dict[typing.Tuple[int, int], automatone.events.ChangeType]:

		"""Collapse change records to one type per cell; a death outranks a birth."""

		index: typing.Dict[typing.Tuple[int, int], automatone.events.ChangeType] = {}

		for change in cell_changes:
			if index.get((change.x, change.y)) != automatone.events.ChangeType.DEATH:
				index[(change.x, change.y)] = change.type

		return index
