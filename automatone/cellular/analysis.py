"""Complexity and pattern analysis over a generation history.

:func:`analyze_complexity` reduces a history to two scores in ``[0, 1]``:

- **complexity** - the mean fraction of cells that flip between consecutive
  generations. A frozen pattern scores 0; a grid that inverts every step
  scores 1.
- **entropy** - how unpredictable the live-cell density is across the
  history. Each generation's live fraction falls into one of ten bins and
  the Shannon entropy of the bin counts is divided by ``log2(10)``.

Both depend only on change counts and densities, never on coordinates, so
translating or rotating every generation leaves them unchanged.

The still-life and oscillator detectors report which cells have settled
into fixed or periodic behaviour; their counts ride along on the result.
"""

import dataclasses
import logging
import math
import typing

import automatone.cellular.grid


logger = logging.getLogger(__name__)

Grid = automatone.cellular.grid.Grid

ENTROPY_BINS = 10

# Minimum history lengths for the detectors.
STILL_LIFE_MIN_GENERATIONS = 5
OSCILLATOR_MIN_GENERATIONS = 6
OSCILLATOR_PERIODS = (2, 3)


@dataclasses.dataclass(frozen=True)
class AnalysisResult:

	"""
	Scores derived from one run's history.

	Attributes:
		complexity: Mean fraction of cells changing per step (0.0-1.0).
		entropy: Normalized entropy of the per-generation density (0.0-1.0).
		active_cell_ratio: Live fraction of the final generation.
		stable_count: Live cells unchanged over the last few generations.
		oscillator_count: Cells cycling with period 2 or 3.
	"""

	complexity: float = 0.0
	entropy: float = 0.0
	active_cell_ratio: float = 0.0
	stable_count: int = 0
	oscillator_count: int = 0


@dataclasses.dataclass(frozen=True)
class Oscillator:

	"""A cell repeating a short cycle of states."""

	x: int
	y: int
	period: int
	states: typing.Tuple[int, ...]


def _cell_count (grid: Grid) -> int:

	return sum(len(row) for row in grid)


def _changed_cells (a: Grid, b: Grid) -> int:

	return sum(
		1
		for row_a, row_b in zip(a, b)
		for cell_a, cell_b in zip(row_a, row_b)
		if cell_a != cell_b
	)


def _live_fraction (grid: Grid) -> float:

	total = _cell_count(grid)

	if not total:
		return 0.0

	return automatone.cellular.grid.live_count(grid) / total


def change_rate (history: typing.Sequence[Grid]) -> float:

	"""Mean fraction of cells that changed between consecutive generations."""

	if len(history) < 2:
		return 0.0

	total_cells = _cell_count(history[-1])

	if not total_cells:
		return 0.0

	rates = [_changed_cells(a, b) / total_cells for a, b in zip(history, history[1:])]

	return min(1.0, sum(rates) / len(rates))


def density_entropy (history: typing.Sequence[Grid], bins: int = ENTROPY_BINS) -> float:

	"""Normalized Shannon entropy of the binned live fraction of each generation."""

	if len(history) < 2 or bins < 2:
		return 0.0

	counts = [0] * bins

	for grid in history:
		index = min(int(_live_fraction(grid) * bins), bins - 1)
		counts[index] += 1

	samples = len(history)
	entropy = 0.0

	for count in counts:
		if count:
			p = count / samples
			entropy -= p * math.log2(p)

	return min(1.0, entropy / math.log2(bins))


def detect_still_lifes (history: typing.Sequence[Grid]) -> typing.Set[typing.Tuple[int, int]]:

	"""Return the live cells that kept their state over the last four generations.

	Needs at least five generations; shorter histories report nothing.
	"""

	if len(history) < STILL_LIFE_MIN_GENERATIONS:
		return set()

	window = history[-min(len(history), 4):]
	stable: typing.Set[typing.Tuple[int, int]] = set()

	for y, row in enumerate(window[0]):
		for x, state in enumerate(row):
			if state == 1 and all(grid[y][x] == state for grid in window[1:]):
				stable.add((x, y))

	return stable


def detect_oscillators (history: typing.Sequence[Grid], exclude: typing.Optional[typing.Set[typing.Tuple[int, int]]] = None) -> typing.List[Oscillator]:

	"""Return cells whose last ``period`` states repeat the ``period`` before them.

	Periods 2 and 3 are checked. A cell only counts if its state actually
	changes within the cycle. Needs at least six generations.

	Parameters:
		history: Generations, oldest first.
		exclude: Cells to skip (typically the still lifes).
	"""

	if len(history) < OSCILLATOR_MIN_GENERATIONS:
		return []

	exclude = exclude or set()
	length = len(history)
	found: typing.List[Oscillator] = []

	for period in OSCILLATOR_PERIODS:

		for y, row in enumerate(history[-1]):
			for x in range(len(row)):

				if (x, y) in exclude:
					continue

				states = tuple(history[g][y][x] for g in range(length - period, length))
				previous = tuple(history[g][y][x] for g in range(length - 2 * period, length - period))

				if states == previous and len(set(states)) > 1:
					found.append(Oscillator(x, y, period, states))

	return found


def analyze_complexity (history: typing.Sequence[Grid]) -> AnalysisResult:

	"""Score a generation history.

	Parameters:
		history: Generations oldest first, as kept by
			:class:`~automatone.cellular.grid.GridState`. 1-D runs pass
			single-row grids.

	Returns:
		An :class:`AnalysisResult`; every field is zero for an empty history
		or a grid with no cells.

	Example:
		```python
		result = analyze_complexity(state.history)
		if result.complexity > 0.5:
			...
		```
	"""

	if not history or not _cell_count(history[-1]):
		return AnalysisResult()

	stable = detect_still_lifes(history)
	oscillators = detect_oscillators(history, exclude=stable)

	result = AnalysisResult(
		complexity = change_rate(history),
		entropy = density_entropy(history),
		active_cell_ratio = _live_fraction(history[-1]),
		stable_count = len(stable),
		oscillator_count = len(oscillators),
	)

	logger.debug(f"Analysis: complexity={result.complexity:.3f} entropy={result.entropy:.3f} stable={result.stable_count} oscillators={result.oscillator_count}")

	return result
