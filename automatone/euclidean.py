"""Euclidean drum patterns.

Distributes hits as evenly as possible across a bar (Bjorklund's algorithm,
after Toussaint's "The Euclidean Algorithm Generates Traditional Musical
Rhythms") for four General MIDI drum voices. ``fills`` sets the overall
density: the kick plays three quarters of it, the snare half (offset by half
a bar), the closed hat twice as many and the clap a quarter (offset by a
quarter bar).
"""

import dataclasses
import logging
import math
import random
import typing

import automatone.config
import automatone.constants.drums
import automatone.constants.timing
import automatone.constants.velocity
import automatone.events
import automatone.sequence_utils


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class DrumVoice:

	"""A drum voice: its note, base velocity and share of the fills."""

	name: str
	pitch: int
	velocity: int
	density: float
	offset: float = 0.0		# fraction of the bar the pattern is pushed along


DRUM_VOICES: typing.Tuple[DrumVoice, ...] = (
	DrumVoice("kick", automatone.constants.drums.KICK, 100, 0.75),
	DrumVoice("snare", automatone.constants.drums.SNARE, 90, 0.5, 0.5),
	DrumVoice("hihat", automatone.constants.drums.HI_HAT_CLOSED, 80, 2.0),
	DrumVoice("clap", automatone.constants.drums.HAND_CLAP, 85, 0.25, 0.25),
)

# Velocity jitter applied to every hit: -10..+9
HUMANIZE_RANGE = 10


@dataclasses.dataclass(frozen=True)
class EuclideanConfig:

	"""
	Parameters for the Euclidean generator.

	Attributes:
		steps: Steps in the bar (1-64).
		fills: Base number of hits to distribute.
		rotation: Steps every pattern is rotated by.
		note_interval: Milliseconds between steps.
		seed: Seed for the velocity jitter.
	"""

	steps: int = 16
	fills: int = 4
	rotation: int = 0
	note_interval: int = automatone.constants.timing.DEFAULT_NOTE_INTERVAL_MS
	seed: typing.Optional[int] = None

	@classmethod
	def from_dict (cls, params: typing.Optional[typing.Mapping[str, typing.Any]] = None) -> "EuclideanConfig":

		"""Build a config from raw parameters, replacing anything invalid with its default."""

		p = automatone.config.normalize_keys(params)
		defaults = cls()

		return cls(
			steps = automatone.config.read_int(p, "steps", defaults.steps, 1, 64),
			fills = automatone.config.read_int(p, "fills", defaults.fills, 0, 64),
			rotation = automatone.config.read_int(p, "rotation", defaults.rotation, 0, 1024),
			note_interval = automatone.config.read_int(p, "note_interval", defaults.note_interval, 1, 60000),
			seed = automatone.config.read_seed(p),
		)


def euclidean_pattern (steps: int, pulses: int, rotation: int = 0) -> typing.List[int]:

	"""Return a rotated Euclidean pattern, clamping ``pulses`` to ``0..steps``.

	Example:
		```python
		euclidean_pattern(8, 3)        # [1, 0, 0, 1, 0, 0, 1, 0]
		euclidean_pattern(8, 3, 1)     # [0, 0, 1, 0, 0, 1, 0, 1]
		```
	"""

	if steps <= 0:
		return []

	pulses = max(0, min(pulses, steps))
	sequence = automatone.sequence_utils.generate_euclidean_sequence(steps, pulses)

	return automatone.sequence_utils.rotate_sequence(sequence, rotation)


class EuclideanGenerator:

	"""
	Generates a four-voice Euclidean drum pattern.
	"""

	def __init__ (self, config: typing.Optional[EuclideanConfig] = None, rng: typing.Optional[random.Random] = None) -> None:

		self.config = config or EuclideanConfig()
		self._rng = rng

	def patterns (self) -> typing.Dict[str, typing.List[int]]:

		"""Return the hit pattern of each voice, keyed by voice name."""

		steps = self.config.steps

		return {
			voice.name: euclidean_pattern(
				steps,
				math.ceil(self.config.fills * voice.density),
				self.config.rotation + int(steps * voice.offset),
			)
			for voice in DRUM_VOICES
		}

	def generate (self) -> typing.List[automatone.events.Step]:

		"""Return one step per bar position, with a note for each voice that hits there."""

		rng = self._rng or random.Random(self.config.seed)
		patterns = self.patterns()
		sequence: typing.List[automatone.events.Step] = []

		for i in range(self.config.steps):

			step = automatone.events.Step(step=i, time=i * self.config.note_interval)

			for voice in DRUM_VOICES:
				if patterns[voice.name][i]:
					jitter = rng.randint(-HUMANIZE_RANGE, HUMANIZE_RANGE - 1)
					step.notes.append(automatone.events.NoteEvent(
						pitch = voice.pitch,
						velocity = automatone.constants.velocity.clamp(voice.velocity + jitter),
						column = i,
						state = voice.name,
					))

			sequence.append(step)

		logger.debug(f"Euclidean: {self.config.steps} steps, {automatone.events.count_notes(sequence)} hits")

		return sequence
