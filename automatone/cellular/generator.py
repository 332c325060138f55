"""The cellular-automaton note generator.

:class:`CellularGenerator` runs the whole pipeline for one configuration:
seed the grid, evolve it, score the history, map cells to notes and
optionally apply the rhythmic filter. Each :meth:`~CellularGenerator.generate`
call is independent and always returns a (possibly empty) list of steps.

The rhythmic filter thins a sequence to a pulse and accents part of what is
left, choosing both from the run's analysis: busier histories get sparser
pulses, and more varied densities space the accents further apart.

Example:
	```python
	import automatone.cellular.generator

	config = automatone.config.CellularConfig.from_dict({"mode": "lifeLike", "initialCondition": "glider", "iterations": 4})
	generator = automatone.cellular.generator.CellularGenerator(config)
	steps = generator.generate()
	changes = generator.cell_changes    # for a renderer
	```

A generator instance belongs to one caller; run independent generations on
independent instances.
"""

import dataclasses
import logging
import random
import typing

import automatone.cellular.analysis
import automatone.cellular.grid
import automatone.cellular.mapper
import automatone.cellular.rules
import automatone.config
import automatone.constants.velocity
import automatone.events


logger = logging.getLogger(__name__)

# Pulse divisions, indexed by complexity
PULSE_DIVISIONS: typing.Tuple[int, ...] = (2, 3, 4, 5, 7, 8, 16)

# Accent spacing in pulses, indexed by entropy
ACCENT_INTERVALS: typing.Tuple[int, ...] = (1, 2, 3)


def _pick (table: typing.Sequence[int], score: float) -> int:

	index = int(max(0.0, score) * len(table))

	return table[min(index, len(table) - 1)]


def apply_rhythmic_filter (
	sequence: typing.Sequence[automatone.events.Step],
	analysis: automatone.cellular.analysis.AnalysisResult
) -> typing.List[automatone.events.Step]:

	"""Gate a sequence to a pulse and accent every few pulses.

	The pulse division is chosen from ``PULSE_DIVISIONS`` by ``complexity``
	and the accent spacing from ``ACCENT_INTERVALS`` by ``entropy``. Steps
	whose list position is not a multiple of the pulse lose their notes;
	steps on a multiple of ``pulse * accent`` have every velocity multiplied
	by 1.3 (capped at 127). Steps left with no notes are dropped.

	Parameters:
		sequence: Steps to filter. Not modified.
		analysis: Scores for the run that produced ``sequence``.

	Returns:
		A new list of new steps.
	"""

	pulses = _pick(PULSE_DIVISIONS, analysis.complexity)
	accent_every = _pick(ACCENT_INTERVALS, analysis.entropy)

	logger.debug(f"Rhythmic filter: pulse every {pulses}, accent every {accent_every} pulses")

	filtered: typing.List[automatone.events.Step] = []

	for i, step in enumerate(sequence):

		if i % pulses != 0 or not step.notes:
			continue

		notes = list(step.notes)

		if i % (pulses * accent_every) == 0:
			notes = [
				dataclasses.replace(note, velocity=automatone.constants.velocity.clamp(note.velocity * automatone.constants.velocity.ACCENT_MULTIPLIER))
				for note in notes
			]

		filtered.append(automatone.events.Step(step=step.step, time=step.time, notes=notes))

	return filtered


class CellularGenerator:

	"""
	Generates note sequences from an elementary or life-like automaton.
	"""

	def __init__ (self, config: typing.Optional[automatone.config.CellularConfig] = None, rng: typing.Optional[random.Random] = None) -> None:

		"""Prepare a generator.

		Parameters:
			config: Validated configuration (defaults when ``None``).
			rng: Random source. When omitted, each run uses a fresh
				``random.Random(config.seed)`` so seeded runs repeat exactly.
		"""

		self.config = config or automatone.config.CellularConfig()
		self._rng = rng

		self.grid_state = automatone.cellular.grid.GridState(self.config.width, self.config.height)
		self.cell_changes: typing.List[automatone.events.CellChange] = []
		self.analysis = automatone.cellular.analysis.AnalysisResult()
		self.generations: typing.List[typing.Any] = []

	@property
	def grid (self) -> automatone.cellular.grid.Grid:

		"""The final grid of the last run."""

		return self.grid_state.grid

	@property
	def history (self) -> typing.List[automatone.cellular.grid.Grid]:

		"""The generations retained from the last run, oldest first."""

		return self.grid_state.history

	def generate (self) -> typing.List[automatone.events.Step]:

		"""Run the configured automaton and return its note sequence.

		Never raises: an unexpected failure is logged and yields an empty
		sequence.
		"""

		rng = self._rng or random.Random(self.config.seed)

		self.grid_state = automatone.cellular.grid.GridState(self.config.width, self.config.height, rng=rng)
		self.cell_changes = []
		self.analysis = automatone.cellular.analysis.AnalysisResult()
		self.generations = []

		try:
			mapper = automatone.cellular.mapper.NoteMapper(self.config, rng=rng)

			if self.config.mode == automatone.config.Mode.LIFE_LIKE:
				sequence = self._generate_life(mapper)
			else:
				sequence = self._generate_1d(mapper)

			if self.config.rhythmic_filter:
				sequence = apply_rhythmic_filter(sequence, self.analysis)

		except Exception:
			logger.exception("Cellular generation failed (mode %s) - returning an empty sequence", self.config.mode.value)
			return []

		logger.debug(f"Cellular {self.config.mode.value}: {len(sequence)} steps, {automatone.events.count_notes(sequence)} notes")

		return sequence

	def _generate_1d (self, mapper: automatone.cellular.mapper.NoteMapper) -> typing.List[automatone.events.Step]:

		"""Evolve a row and map every generation to a step."""

		initial = self.grid_state.initialize_1d(self.config.width, self.config.initial_condition, self.config.custom_cells)
		rows = automatone.cellular.rules.evolve_1d(initial, self.config.rule, self.config.iterations)

		for row in rows[1:]:
			self.grid_state.commit((row,))

		self.generations = list(rows)
		self.analysis = automatone.cellular.analysis.analyze_complexity(self.grid_state.history)

		return mapper.map_generations(rows)

	def _generate_life (self, mapper: automatone.cellular.mapper.NoteMapper) -> typing.List[automatone.events.Step]:

		"""Evolve the 2-D grid and map its final state."""

		self.grid_state.initialize(self.config.initial_condition, self.config.density, self.config.custom_cells)
		self.cell_changes = automatone.cellular.rules.evolve_grid(self.grid_state, self.config.iterations)
		self.generations = self.grid_state.history
		self.analysis = automatone.cellular.analysis.analyze_complexity(self.grid_state.history)

		return mapper.map_2d_grid(self.grid_state.grid, self.cell_changes)
