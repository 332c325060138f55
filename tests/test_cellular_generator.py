import random
import unittest

import pytest

import automatone.cellular.analysis
import automatone.cellular.generator
import automatone.cellular.grid
import automatone.cellular.mapper
import automatone.config
import automatone.events


def make_generator (**params: object) -> automatone.cellular.generator.CellularGenerator:

	return automatone.cellular.generator.CellularGenerator(automatone.config.CellularConfig.from_dict(params))


def single_note_steps (count: int, velocity: int = 50) -> list:

	return [
		automatone.events.Step(step=i, time=i * 250, notes=[automatone.events.NoteEvent(pitch=60, velocity=velocity)])
		for i in range(count)
	]


class OneDimensionalTests (unittest.TestCase):

	"""
	Elementary automaton runs.
	"""

	def test_one_step_per_generation (self) -> None:

		"""Every generation becomes a step, spaced by the note interval."""

		steps = make_generator(rule=30, width=16, iterations=32).generate()

		self.assertEqual(len(steps), 32)
		self.assertEqual([s.time for s in steps[:3]], [0, 250, 500])


	def test_first_step_is_the_seed (self) -> None:

		steps = make_generator(rule=30, width=16, iterations=4).generate()

		self.assertEqual([n.column for n in steps[0].notes], [8])
		self.assertEqual(steps[0].notes[0].pitch, 67)


	def test_history_holds_generations (self) -> None:

		generator = make_generator(rule=90, width=8, iterations=50)
		generator.generate()

		self.assertEqual(len(generator.history), automatone.cellular.grid.HISTORY_CAP)
		self.assertEqual(len(generator.generations), 50)
		self.assertEqual(generator.history[-1], (generator.generations[-1],))


	def test_zero_iterations_is_empty (self) -> None:

		self.assertEqual(make_generator(iterations=0).generate(), [])


def test_glider_end_to_end () -> None:

	"""A glider on a 16x16 grid produces at most three sounding rows and a handful of notes."""

	generator = make_generator(mode="lifeLike", initialCondition="glider", width=16, height=16, iterations=4)
	steps = generator.generate()

	assert 1 <= len(steps) <= 3
	assert 1 <= automatone.events.count_notes(steps) <= 5
	assert generator.cell_changes
	assert all(1 <= note.velocity <= 127 for step in steps for note in step.notes)
	assert automatone.cellular.grid.live_count(generator.grid) == 5


def test_glider_on_a_ten_by_ten_grid () -> None:

	"""After four generations the glider has moved one cell down and right.

	Its cells are (4,3), (5,4), (3,5), (4,5) and (5,5). Every one of them was
	born during the run, but (4,3) also died along the way, and a death
	outranks a birth, so row 3 falls silent. The rest sound as births.
	"""

	steps = make_generator(mode="lifeLike", width=10, height=10, initialCondition="glider", iterations=4).generate()

	assert [s.step for s in steps] == [4, 5]
	assert [s.time for s in steps] == [1000, 1250]
	assert [n.column for n in steps[0].notes] == [5]
	assert [n.column for n in steps[1].notes] == [3, 4, 5]
	assert [n.pitch for n in steps[0].notes] == [60]
	assert [n.pitch for n in steps[1].notes] == [67, 69, 60]

	for step in steps:
		for note in step.notes:
			assert note.velocity == 110
			assert note.state == "birth"
			assert note.row == step.step


def test_glider_with_random_velocities () -> None:

	"""Without birth emphasis every live cell sounds, at a seeded random velocity."""

	params = {
		"mode": "lifeLike", "width": 10, "height": 10, "initialCondition": "glider", "iterations": 4,
		"velocityMap": "random", "emphasizeBirths": False, "seed": 8,
	}

	steps = make_generator(**params).generate()
	again = make_generator(**params).generate()

	assert [s.step for s in steps] == [3, 4, 5]
	assert [[n.column for n in s.notes] for s in steps] == [[4], [5], [3, 4, 5]]
	assert [n.state for n in steps[0].notes] == ["death"]
	assert all(60 <= note.velocity <= 127 for step in steps for note in step.notes)
	assert automatone.events.sequence_to_dicts(steps) == automatone.events.sequence_to_dicts(again)


def test_glider_history_is_capped () -> None:

	generator = make_generator(mode="2d", initialCondition="random", width=12, height=12, iterations=50, seed=3)
	generator.generate()

	assert len(generator.history) == automatone.cellular.grid.HISTORY_CAP


def test_seeded_runs_repeat () -> None:

	"""The same seed gives the same sequence, for random seeds and random velocities alike."""

	params = {"mode": "lifeLike", "initialCondition": "random", "velocityMap": "random", "iterations": 6, "seed": 11}

	first = make_generator(**params).generate()
	second = make_generator(**params).generate()

	assert automatone.events.sequence_to_dicts(first) == automatone.events.sequence_to_dicts(second)


def test_each_run_is_independent () -> None:

	generator = make_generator(initialCondition="random", seed=4)

	assert automatone.events.sequence_to_dicts(generator.generate()) == automatone.events.sequence_to_dicts(generator.generate())


def test_injected_rng_is_used () -> None:

	config = automatone.config.CellularConfig.from_dict({"initialCondition": "random", "iterations": 3})

	first = automatone.cellular.generator.CellularGenerator(config, rng=random.Random(9)).generate()
	second = automatone.cellular.generator.CellularGenerator(config, rng=random.Random(9)).generate()

	assert automatone.events.sequence_to_dicts(first) == automatone.events.sequence_to_dicts(second)


def test_analysis_is_recorded () -> None:

	generator = make_generator(rule=30, iterations=16)
	generator.generate()

	assert generator.analysis.complexity > 0.0


def test_generation_failure_returns_empty (monkeypatch: pytest.MonkeyPatch) -> None:

	"""An unexpected error inside a run is logged and yields an empty sequence."""

	def explode (self: object, *args: object) -> None:
		raise RuntimeError("boom")

	monkeypatch.setattr(automatone.cellular.mapper.NoteMapper, "map_generations", explode)

	assert make_generator().generate() == []


def test_filter_option_is_applied () -> None:

	plain = make_generator(rule=30, iterations=32).generate()
	filtered = make_generator(rule=30, iterations=32, rhythmicFilter=True).generate()

	assert len(filtered) < len(plain)


# ---------------------------------------------------------------------------
# apply_rhythmic_filter
# ---------------------------------------------------------------------------

def test_filter_lowest_scores () -> None:

	"""Zero complexity and entropy keep every other step and accent each one kept."""

	analysis = automatone.cellular.analysis.AnalysisResult(complexity=0.0, entropy=0.0)
	filtered = automatone.cellular.generator.apply_rhythmic_filter(single_note_steps(8), analysis)

	assert [s.step for s in filtered] == [0, 2, 4, 6]
	assert [s.notes[0].velocity for s in filtered] == [65] * 4


def test_filter_pulse_and_accent_selection () -> None:

	"""Complexity 0.3 picks a pulse of 4; entropy 0.5 accents every second pulse."""

	analysis = automatone.cellular.analysis.AnalysisResult(complexity=0.3, entropy=0.5)
	filtered = automatone.cellular.generator.apply_rhythmic_filter(single_note_steps(16), analysis)

	assert [s.step for s in filtered] == [0, 4, 8, 12]
	assert [s.notes[0].velocity for s in filtered] == [65, 50, 65, 50]


def test_filter_highest_scores () -> None:

	analysis = automatone.cellular.analysis.AnalysisResult(complexity=1.0, entropy=1.0)
	filtered = automatone.cellular.generator.apply_rhythmic_filter(single_note_steps(40), analysis)

	assert [s.step for s in filtered] == [0, 16, 32]
	assert [s.notes[0].velocity for s in filtered] == [65, 50, 50]


def test_filter_caps_velocity_and_drops_rests () -> None:

	steps = single_note_steps(4, velocity=120)
	steps[2] = automatone.events.Step(step=2, time=500)

	analysis = automatone.cellular.analysis.AnalysisResult()
	filtered = automatone.cellular.generator.apply_rhythmic_filter(steps, analysis)

	assert [s.step for s in filtered] == [0]
	assert filtered[0].notes[0].velocity == 127


def test_filter_leaves_input_untouched () -> None:

	steps = single_note_steps(4)
	automatone.cellular.generator.apply_rhythmic_filter(steps, automatone.cellular.analysis.AnalysisResult())

	assert [s.notes[0].velocity for s in steps] == [50] * 4
