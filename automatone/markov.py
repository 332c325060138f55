"""Markov-chain melodies.

A chain of order ``n`` is learned from a short training phrase (a scale run,
a jazz ii-V-I with approach notes, pentatonic figures or Fibonacci leaps) and
walked for ``length`` steps. Each step sounds with probability ``density``.
When it sounds, the chain either follows its learned transitions or (with
probability ``randomness``, or when it reaches a context it never saw) jumps
to a random note of the configured scale.

The note is rendered in one of three ways:

- ``melody`` - the note alone.
- ``harmony`` - a diatonic chord built on the note, the root louder.
- ``rhythm`` - the note alone, accented every four steps.
"""

import dataclasses
import logging
import random
import typing

import automatone.config
import automatone.constants.timing
import automatone.constants.velocity
import automatone.events
import automatone.intervals
import automatone.markov_chain
import automatone.sequence_utils


logger = logging.getLogger(__name__)

Context = typing.Tuple[int, ...]


class PatternType (automatone.config.Choice):

	"""How each chosen note is voiced."""

	MELODY = "melody"
	HARMONY = "harmony"
	RHYTHM = "rhythm"


class LearningPattern (automatone.config.Choice):

	"""The phrase the chain is trained on."""

	ASCEND_DESCEND = "ascend_descend"
	JAZZ_CHORDS = "jazz_chords"
	PENTATONIC = "pentatonic"
	FIBONACCI = "fibonacci"
	CHROMATIC = "chromatic"


# Degrees of a ii-V-I and some inversions, relative to the base note
JAZZ_VOICINGS: typing.Tuple[typing.Tuple[int, int, int, int], ...] = (
	(2, 5, 9, 12),
	(7, 11, 14, 17),
	(0, 4, 7, 11),
	(5, 9, 12, 14),
	(11, 14, 17, 21),
	(4, 7, 11, 14),
)

FIBONACCI_INTERVALS: typing.Tuple[int, ...] = (1, 1, 2, 3, 5, 8, 13)
FIBONACCI_PHRASE_LENGTH = 24

PENTATONIC_OFFSETS: typing.Tuple[int, ...] = (0, 2, 4, 7, 9)

# Chord quality per scale degree for the two diatonic scales
DEGREE_QUALITIES: typing.Dict[str, typing.Tuple[str, ...]] = {
	"major": ("maj", "min", "min", "maj", "dom7", "min", "dim"),
	"minor": ("min", "dim", "maj", "min", "min", "maj", "dom7"),
}

# Walk velocity range: 70-109
MIN_WALK_VELOCITY = 70
MAX_WALK_VELOCITY = 109

HARMONY_VELOCITY_DROP = 20
ACCENT_EVERY = 4
ACCENT_BOOST = 20
UNACCENTED_DROP = 10


@dataclasses.dataclass(frozen=True)
class MarkovConfig:

	"""
	Parameters for the Markov generator.

	Attributes:
		order: Notes of context each transition depends on (1-4).
		length: Steps to generate.
		base_note: MIDI note the training phrase and random notes start from.
		scale: Scale used for random notes and chord building.
		density: Probability that a step sounds.
		octave_range: Octaves the training phrase and random notes span.
		pattern_type: How each note is voiced.
		learning_pattern: Training phrase.
		randomness: Probability of ignoring the chain for a random in-scale note.
		note_interval: Milliseconds between steps.
		seed: Seed for every random decision in a run.
	"""

	order: int = 1
	length: int = 16
	base_note: int = 60
	scale: automatone.config.ScaleName = automatone.config.ScaleName.MAJOR
	density: float = 0.8
	octave_range: int = 2
	pattern_type: PatternType = PatternType.MELODY
	learning_pattern: LearningPattern = LearningPattern.ASCEND_DESCEND
	randomness: float = 0.3
	note_interval: int = automatone.constants.timing.DEFAULT_NOTE_INTERVAL_MS
	seed: typing.Optional[int] = None

	@classmethod
	def from_dict (cls, params: typing.Optional[typing.Mapping[str, typing.Any]] = None) -> "MarkovConfig":

		"""Build a config from raw parameters, replacing anything invalid with its default."""

		p = automatone.config.normalize_keys(params)
		defaults = cls()

		return cls(
			order = automatone.config.read_int(p, "order", defaults.order, 1, 4),
			length = automatone.config.read_int(p, "length", defaults.length, 0, 1024),
			base_note = automatone.config.read_int(p, "base_note", defaults.base_note, 0, 127),
			scale = automatone.config.ScaleName.resolve(p.get("scale"), defaults.scale),
			density = automatone.config.read_float(p, "density", defaults.density, 0.0, 1.0),
			octave_range = automatone.config.read_int(p, "octave_range", defaults.octave_range, 1, 4),
			pattern_type = PatternType.resolve(p.get("pattern_type"), defaults.pattern_type),
			learning_pattern = LearningPattern.resolve(p.get("learning_pattern"), defaults.learning_pattern),
			randomness = automatone.config.read_float(p, "randomness", defaults.randomness, 0.0, 1.0),
			note_interval = automatone.config.read_int(p, "note_interval", defaults.note_interval, 1, 60000),
			seed = automatone.config.read_seed(p),
		)


def learning_sequence (pattern: LearningPattern, base_note: int, octave_range: int) -> typing.List[int]:

	"""Return the training phrase for ``pattern``."""

	span = octave_range * 12

	if pattern == LearningPattern.ASCEND_DESCEND:
		return [base_note + i for i in range(span)] + [base_note + i for i in reversed(range(span))]

	if pattern == LearningPattern.JAZZ_CHORDS:

		phrase: typing.List[int] = []

		for voicing in JAZZ_VOICINGS:
			chord = [base_note + offset for offset in voicing]
			phrase.extend(chord)
			# chromatic approach notes
			phrase.extend([chord[0] - 1, chord[1] + 1, chord[2] - 2, chord[3] + 2])

		return phrase

	if pattern == LearningPattern.PENTATONIC:

		phrase = []

		for octave in range(octave_range):
			root = base_note + octave * 12
			offsets = PENTATONIC_OFFSETS
			phrase.extend(root + o for o in offsets)
			phrase.extend(root + o for o in reversed(offsets))
			phrase.extend(root + offsets[i] for i in (0, 2, 1, 3, 4, 2))

		return phrase

	if pattern == LearningPattern.FIBONACCI:

		phrase = []
		note = base_note

		for i in range(FIBONACCI_PHRASE_LENGTH):
			phrase.append(note)
			interval = FIBONACCI_INTERVALS[i % len(FIBONACCI_INTERVALS)]
			note = note + interval if i % 2 == 0 else note - interval
			note = max(base_note - 12, min(note, base_note + span))

		return phrase

	return [base_note + i for i in range(span)]


def build_chord (root_note: int, scale_name: str) -> typing.List[int]:

	"""Return a diatonic chord on ``root_note``.

	In major and minor the quality follows the note's scale degree; other
	scales get a minor triad when their name contains 'minor' and a major
	triad otherwise. A root outside the scale is moved to the tonic of its
	octave.
	"""

	scale = automatone.intervals.get_scale(scale_name)
	pitch_class = root_note % 12

	if pitch_class in scale:
		degree = scale.index(pitch_class)
		root = root_note
	else:
		degree = 0
		root = root_note - pitch_class + scale[0]

	if scale_name in DEGREE_QUALITIES:
		qualities = DEGREE_QUALITIES[scale_name]
		quality = qualities[degree % len(qualities)]
	else:
		quality = "min" if "minor" in scale_name else "maj"

	return [root + interval for interval in automatone.intervals.get_chord_intervals(quality)]


class MarkovGenerator:

	"""
	Walks a learned note chain to produce a melody, chord line or rhythm.
	"""

	def __init__ (self, config: typing.Optional[MarkovConfig] = None, rng: typing.Optional[random.Random] = None) -> None:

		self.config = config or MarkovConfig()
		self._rng = rng

	def _random_note (self, rng: random.Random) -> int:

		scale = automatone.intervals.get_scale(self.config.scale.value)
		octave = rng.randint(0, self.config.octave_range)

		return self.config.base_note + octave * 12 + rng.choice(scale)

	def _next_note (self, chain: automatone.markov_chain.MarkovChain[Context], rng: random.Random) -> int:

		if chain.can_step() and rng.random() >= self.config.randomness:
			return chain.step()[-1]

		note = self._random_note(rng)
		chain.advance(note)

		return note

	def _voice (self, note: int, index: int, rng: random.Random) -> typing.List[automatone.events.NoteEvent]:

		velocity = rng.randint(MIN_WALK_VELOCITY, MAX_WALK_VELOCITY)
		clamp = automatone.constants.velocity.clamp

		if self.config.pattern_type == PatternType.HARMONY:
			return [
				automatone.events.NoteEvent(
					pitch = pitch,
					velocity = clamp(velocity if i == 0 else velocity - HARMONY_VELOCITY_DROP),
					column = index,
					row = i,
					state = "active" if i == 0 else "harmony",
				)
				for i, pitch in enumerate(build_chord(note, self.config.scale.value))
			]

		if self.config.pattern_type == PatternType.RHYTHM:
			accent = index % ACCENT_EVERY == 0
			return [automatone.events.NoteEvent(
				pitch = note,
				velocity = clamp(velocity + ACCENT_BOOST if accent else velocity - UNACCENTED_DROP),
				column = index,
				row = 0,
				state = "birth" if accent else "active",
			)]

		return [automatone.events.NoteEvent(pitch=note, velocity=clamp(velocity), column=index, row=note % 12)]

	def generate (self) -> typing.List[automatone.events.Step]:

		"""Return ``length`` steps, each a rest or the voicing of the chain's next note."""

		rng = self._rng or random.Random(self.config.seed)

		phrase = learning_sequence(self.config.learning_pattern, self.config.base_note, self.config.octave_range)
		chain = automatone.markov_chain.MarkovChain.from_sequence(phrase, self.config.order, rng=rng)
		chain.state = (self.config.base_note,) * self.config.order

		sequence: typing.List[automatone.events.Step] = []

		for i in range(self.config.length):

			step = automatone.events.Step(step=i, time=i * self.config.note_interval)

			if automatone.sequence_utils.probability_gate(self.config.density, rng):
				step.notes.extend(self._voice(self._next_note(chain, rng), i, rng))

			sequence.append(step)

		logger.debug(f"Markov ({self.config.learning_pattern.value}, order {self.config.order}): {automatone.events.count_notes(sequence)} notes")

		return sequence
