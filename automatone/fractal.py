"""Self-similar melodies by midpoint displacement.

A melodic contour is drawn between two fixed points at the middle of the
pitch range: each segment's midpoint is the average of its ends plus a random
displacement that shrinks with the segment, so large gestures contain
smaller copies of themselves. Each contour value then picks a scale degree
and an octave around the root, and now and then a second note a third
(two scale degrees) higher joins it.
"""

import dataclasses
import logging
import math
import random
import typing

import automatone.config
import automatone.constants.timing
import automatone.events
import automatone.intervals
import automatone.sequence_utils


logger = logging.getLogger(__name__)

# Contour end points, as a fraction of the pitch range
CONTOUR_START = 0.5
CONTOUR_END = 0.5

# Sequence length when none is given: MIN_LENGTH + complexity * LENGTH_SPAN
MIN_LENGTH = 8
LENGTH_SPAN = 24

# Harmony probability at full complexity
HARMONY_CHANCE = 0.2

# Velocities fall in MIN_VELOCITY .. MIN_VELOCITY + VELOCITY_SPREAD - 1
MIN_VELOCITY = 80
VELOCITY_SPREAD = 40


@dataclasses.dataclass(frozen=True)
class FractalConfig:

	"""
	Parameters for the fractal generator.

	Attributes:
		complexity: Roughness of the contour, 0 (a flat line) to 1; also
			scales the default length and the chance of harmony notes.
		length: Steps to generate; derived from ``complexity`` when omitted.
		base_note: Root MIDI note; the contour spans octaves above and below it.
		scale: Scale the contour is quantized to.
		octave_range: Octaves the contour spans.
		note_interval: Milliseconds between steps.
		seed: Seed for every random decision in a run.
	"""

	complexity: float = 0.5
	length: typing.Optional[int] = None
	base_note: int = 60
	scale: automatone.config.ScaleName = automatone.config.ScaleName.MAJOR
	octave_range: int = 2
	note_interval: int = automatone.constants.timing.DEFAULT_NOTE_INTERVAL_MS
	seed: typing.Optional[int] = None

	@property
	def step_count (self) -> int:

		if self.length is not None:
			return self.length

		return MIN_LENGTH + int(self.complexity * LENGTH_SPAN)

	@classmethod
	def from_dict (cls, params: typing.Optional[typing.Mapping[str, typing.Any]] = None) -> "FractalConfig":

		"""Build a config from raw parameters, replacing anything invalid with its default."""

		p = automatone.config.normalize_keys(params)
		defaults = cls()

		# "rootNote" is the name the browser front end sends
		root_key = "root_note" if "root_note" in p and "base_note" not in p else "base_note"

		return cls(
			complexity = automatone.config.read_float(p, "complexity", defaults.complexity, 0.0, 1.0),
			length = automatone.config.read_int(p, "length", defaults.length, 1, 1024),  # type: ignore[arg-type]
			base_note = automatone.config.read_int(p, root_key, defaults.base_note, 0, 127),
			scale = automatone.config.ScaleName.resolve(p.get("scale"), defaults.scale),
			octave_range = automatone.config.read_int(p, "octave_range", defaults.octave_range, 1, 4),
			note_interval = automatone.config.read_int(p, "note_interval", defaults.note_interval, 1, 60000),
			seed = automatone.config.read_seed(p),
		)


def midpoint_displacement (start: float, end: float, length: int, roughness: float, rng: random.Random) -> typing.List[float]:

	"""Return a ``length``-point contour from ``start`` to ``end`` with values in 0-1.

	Each midpoint moves by up to half of ``roughness`` times its segment's
	share of the whole contour, so displacements halve at every level.

	Example:
		```python
		midpoint_displacement(0.5, 0.5, 5, 0.0, random.Random(1))
		# [0.5, 0.5, 0.5, 0.5, 0.5]
		```
	"""

	if length < 1:
		return []

	if length == 1:
		return [start]

	contour = [0.0] * length
	contour[0] = start
	contour[-1] = end

	def divide (low: int, high: int) -> None:

		if high - low <= 1:
			return

		middle = (low + high) // 2
		displacement = (rng.random() - 0.5) * roughness * (high - low) / length
		contour[middle] = max(0.0, min(1.0, (contour[low] + contour[high]) / 2 + displacement))

		divide(low, middle)
		divide(middle, high)

	divide(0, length - 1)

	return contour


def contour_degree (value: float, scale_size: int) -> int:

	"""Scale degree index for a contour value; 1.0 lands on the top degree."""

	return min(int(value * scale_size), scale_size - 1)


def contour_octave (value: float, octave_range: int) -> int:

	"""Semitone offset of the octave a contour value falls in, centred on the root."""

	return math.floor(value * octave_range - octave_range / 2) * 12


class FractalGenerator:

	"""
	Turns a midpoint-displacement contour into a melody.
	"""

	def __init__ (self, config: typing.Optional[FractalConfig] = None, rng: typing.Optional[random.Random] = None) -> None:

		self.config = config or FractalConfig()
		self._rng = rng
		self.contour: typing.List[float] = []

	def generate (self) -> typing.List[automatone.events.Step]:

		"""Return one sounding step per contour point."""

		rng = self._rng or random.Random(self.config.seed)
		c = self.config

		scale = automatone.intervals.get_scale(c.scale.value)
		self.contour = midpoint_displacement(CONTOUR_START, CONTOUR_END, c.step_count, c.complexity, rng)

		sequence: typing.List[automatone.events.Step] = []

		for i, value in enumerate(self.contour):

			step = automatone.events.Step(step=i, time=i * c.note_interval)
			degree = contour_degree(value, len(scale))
			octave = contour_octave(value, c.octave_range)

			harmony: typing.Optional[automatone.events.NoteEvent] = None

			if automatone.sequence_utils.probability_gate(HARMONY_CHANCE * c.complexity, rng):
				harmony = automatone.events.NoteEvent(
					pitch = max(0, min(127, c.base_note + scale[(degree + 2) % len(scale)] + octave)),
					velocity = MIN_VELOCITY + rng.randrange(VELOCITY_SPREAD),
					column = i,
					state = "harmony",
				)

			step.notes.append(automatone.events.NoteEvent(
				pitch = max(0, min(127, c.base_note + scale[degree] + octave)),
				velocity = MIN_VELOCITY + rng.randrange(VELOCITY_SPREAD),
				column = i,
				state = "active",
			))

			if harmony is not None:
				step.notes.append(harmony)

			sequence.append(step)

		logger.debug(f"Fractal (complexity {c.complexity}): {len(sequence)} steps, {automatone.events.count_notes(sequence)} notes")

		return sequence
