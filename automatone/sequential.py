"""Patterns from number sequences.

Each step reads one value of a Fibonacci, pi-digit, prime or layered-modulo
('buchla') sequence. The value's position within the sequence's range picks a
scale degree and octave; an accent table in the chosen meter sets velocity;
high values and strong beats make a note (and a harmony note) more likely.
"""

import dataclasses
import logging
import random
import typing

import automatone.config
import automatone.constants.timing
import automatone.events
import automatone.intervals
import automatone.sequence_utils


logger = logging.getLogger(__name__)

# Primes cycle after this many, keeping long patterns inside the pitch range
PRIME_POOL = 40

MIN_HARMONY_VELOCITY = 40
HARMONY_VELOCITY_DROP = 20


class SequenceType (automatone.config.Choice):

	"""Number sequence a pattern reads from."""

	FIBONACCI = "fibonacci"
	PI = "pi"
	PRIME = "prime"
	BUCHLA = "buchla"


class AccentPattern (automatone.config.Choice):

	"""Meter of the accent table."""

	FOUR_FOUR = "4/4"
	THREE_FOUR = "3/4"
	FIVE_FOUR = "5/4"
	SEVEN_EIGHT = "7/8"
	FIVE_EIGHT = "5/8"
	COMPLEX = "complex"


# Accent weight per step; 0 is a ghost note
ACCENT_TABLES: typing.Dict[AccentPattern, typing.Tuple[float, ...]] = {
	AccentPattern.FOUR_FOUR: (1, 0, 0.5, 0, 0.7, 0, 0.5, 0, 1, 0, 0.5, 0, 0.7, 0, 0.5, 0),
	AccentPattern.THREE_FOUR: (1, 0, 0.5, 1, 0, 0.5, 1, 0, 0.5, 1, 0, 0.5),
	AccentPattern.FIVE_FOUR: (1, 0, 0.7, 0, 0.5, 1, 0, 0.7, 0, 0.5, 1, 0, 0.7, 0, 0.5, 1, 0, 0.7, 0, 0.5),
	AccentPattern.SEVEN_EIGHT: (1, 0, 0.7, 1, 0, 1, 0.7, 0, 0.5, 1, 0, 0.7, 0.5),
	AccentPattern.FIVE_EIGHT: (1, 0, 0.7, 0, 0.5, 1, 0, 0.7, 0, 0.5),
	AccentPattern.COMPLEX: (1, 0, 0.7, 0, 0.3, 0, 0.8, 0, 0.5, 0, 0.6, 0, 1, 0, 0.4, 0),
}

ACCENT_ALIASES: typing.Dict[str, AccentPattern] = {
	"44": AccentPattern.FOUR_FOUR,
	"34": AccentPattern.THREE_FOUR,
	"54": AccentPattern.FIVE_FOUR,
	"78": AccentPattern.SEVEN_EIGHT,
	"58": AccentPattern.FIVE_EIGHT,
}


@dataclasses.dataclass(frozen=True)
class SequentialConfig:

	"""
	Parameters for the sequential generator.

	Attributes:
		sequence: Number sequence to read.
		length: Steps to generate.
		base_note: Lowest MIDI note.
		scale: Scale the values are quantized to.
		octave_range: Octaves the pitches span.
		rhythm_density: Base probability that a step sounds.
		accent_pattern: Meter of the velocity accents.
		note_interval: Milliseconds between steps.
		seed: Seed for every random decision in a run.
	"""

	sequence: SequenceType = SequenceType.FIBONACCI
	length: int = 16
	base_note: int = 60
	scale: automatone.config.ScaleName = automatone.config.ScaleName.PENTATONIC
	octave_range: int = 2
	rhythm_density: float = 0.7
	accent_pattern: AccentPattern = AccentPattern.FOUR_FOUR
	note_interval: int = automatone.constants.timing.DEFAULT_NOTE_INTERVAL_MS
	seed: typing.Optional[int] = None

	@classmethod
	def from_dict (cls, params: typing.Optional[typing.Mapping[str, typing.Any]] = None) -> "SequentialConfig":

		"""Build a config from raw parameters, replacing anything invalid with its default."""

		p = automatone.config.normalize_keys(params)
		defaults = cls()

		return cls(
			sequence = SequenceType.resolve(p.get("sequence"), defaults.sequence),
			length = automatone.config.read_int(p, "length", defaults.length, 0, 1024),
			base_note = automatone.config.read_int(p, "base_note", defaults.base_note, 0, 127),
			scale = automatone.config.ScaleName.resolve(p.get("scale"), defaults.scale),
			octave_range = automatone.config.read_int(p, "octave_range", defaults.octave_range, 1, 4),
			rhythm_density = automatone.config.read_float(p, "rhythm_density", defaults.rhythm_density, 0.0, 1.0),
			accent_pattern = AccentPattern.resolve(p.get("accent_pattern"), defaults.accent_pattern, ACCENT_ALIASES),
			note_interval = automatone.config.read_int(p, "note_interval", defaults.note_interval, 1, 60000),
			seed = automatone.config.read_seed(p),
		)


def number_sequence (kind: SequenceType, length: int, rng: random.Random) -> typing.List[int]:

	"""Return the values a pattern of ``length`` steps reads from.

	The pi sequence stops at the digits available; callers wrap around it.
	"""

	if kind == SequenceType.PI:
		return list(automatone.sequence_utils.PI_DIGITS[:length])

	if kind == SequenceType.PRIME:
		primes = automatone.sequence_utils.generate_prime_sequence(min(length, PRIME_POOL))
		return [primes[i % len(primes)] for i in range(length)]

	if kind == SequenceType.BUCHLA:
		return automatone.sequence_utils.generate_pulse_sequence(length, rng)

	return automatone.sequence_utils.generate_fibonacci_sequence(length)


def accent_velocity (accent: float, rng: random.Random) -> int:

	"""Velocity for an accent weight: strong 100-126, medium 80-99, light 60-79, ghost 30-59."""

	if accent > 0.8:
		return 100 + rng.randrange(27)
	if accent > 0.4:
		return 80 + rng.randrange(20)
	if accent > 0:
		return 60 + rng.randrange(20)

	return 30 + rng.randrange(30)


def harmony_interval (normalized: float) -> int:

	"""Semitones above the note: minor third, major third, fifth, octave or fourth by value."""

	if normalized < 0.2:
		return 3
	if normalized < 0.4:
		return 4
	if normalized < 0.6:
		return 7
	if normalized < 0.8:
		return 12

	return 5


class SequentialGenerator:

	"""
	Maps a number sequence onto a scale and a meter.
	"""

	def __init__ (self, config: typing.Optional[SequentialConfig] = None, rng: typing.Optional[random.Random] = None) -> None:

		self.config = config or SequentialConfig()
		self._rng = rng

	def _step_probability (self, index: int, normalized: float) -> float:

		probability = self.config.rhythm_density

		if index % 4 == 0:
			probability += 0.3
		elif normalized > 0.7:
			probability += 0.2

		return probability

	@staticmethod
	def _harmony_probability (index: int, normalized: float) -> float:

		if index % 4 == 0 and normalized > 0.6:
			return 0.8
		if normalized > 0.8:
			return 0.6

		return 0.3

	def generate (self) -> typing.List[automatone.events.Step]:

		"""Return ``length`` steps read from the configured sequence."""

		rng = self._rng or random.Random(self.config.seed)
		c = self.config

		values = number_sequence(c.sequence, c.length, rng)
		scale = automatone.intervals.get_scale(c.scale.value)
		accents = ACCENT_TABLES[c.accent_pattern]

		sequence: typing.List[automatone.events.Step] = []

		for i in range(c.length):

			step = automatone.events.Step(step=i, time=i * c.note_interval)
			value = values[i % len(values)]
			normalized = automatone.sequence_utils.normalize_value(value, values)

			if automatone.sequence_utils.probability_gate(self._step_probability(i, normalized), rng):

				interval = scale[int(normalized * len(scale)) % len(scale)]
				pitch = c.base_note + interval + int(normalized * c.octave_range) * 12
				velocity = accent_velocity(accents[i % len(accents)], rng)

				step.notes.append(automatone.events.NoteEvent(pitch=pitch, velocity=velocity, column=i, state="active"))

				if automatone.sequence_utils.probability_gate(self._harmony_probability(i, normalized), rng):
					step.notes.append(automatone.events.NoteEvent(
						pitch = pitch + harmony_interval(normalized),
						velocity = max(MIN_HARMONY_VELOCITY, velocity - HARMONY_VELOCITY_DROP),
						column = i,
						state = "harmony",
					))

			sequence.append(step)

		logger.debug(f"Sequential ({c.sequence.value}, {c.accent_pattern.value}): {automatone.events.count_notes(sequence)} notes")

		return sequence
