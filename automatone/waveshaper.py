"""Waveshaper patterns.

A periodic waveform (plus a few overtones) is sampled once per step, pushed
through a wavefolder and rescaled to 0-1. The sampled value then drives
everything else about the step:

- whether it sounds (density, boosted on strong beats and high values),
- its pitch (quantized to a scale, or a continuous semitone offset),
- its velocity (60-120 from the value, with a small downbeat groove),
- and whether a few harmony notes are stacked on top.

Waveform samples depend only on their shape parameters, so they are memoized
in a small least-recently-used :class:`WaveformCache` that an engine can share
across runs.
"""

import collections
import dataclasses
import logging
import math
import random
import typing

import automatone.config
import automatone.constants.timing
import automatone.constants.velocity
import automatone.events
import automatone.intervals
import automatone.sequence_utils


logger = logging.getLogger(__name__)

CacheKey = typing.Tuple[typing.Any, ...]

DEFAULT_CACHE_SIZE = 64

# Stepped probability curve the note gate follows
BUCHLA_CURVE_STEPS: typing.Tuple[float, ...] = (0.0, 0.25, 0.4, 0.8, 1.0)

HARMONY_VELOCITY_DROP = 20


class Waveform (automatone.config.Choice):

	"""Base oscillator shape."""

	SINE = "sine"
	TRIANGLE = "triangle"
	SQUARE = "square"
	SAW = "saw"
	NOISE = "noise"


class Shaper (automatone.config.Choice):

	"""Transfer function applied after the overtones are summed."""

	BUCHLA = "buchla"
	FOLD = "fold"
	ASYMMETRIC_FOLD = "asymmetric_fold"
	RECTIFY = "rectify"
	SATURATE = "saturate"


def base_waveform (waveform: Waveform, phase: float) -> float:

	"""Sample ``waveform`` at ``phase`` (in cycles); the result is in -1..1 except for noise."""

	if waveform == Waveform.TRIANGLE:
		return 2 * abs(2 * (phase - math.floor(phase + 0.5))) - 1

	if waveform == Waveform.SQUARE:
		return 1.0 if phase % 1 < 0.5 else -1.0

	if waveform == Waveform.SAW:
		return 2 * (phase - math.floor(phase + 0.5))

	if waveform == Waveform.NOISE:
		# repeatable for a given phase
		return math.sin(phase * 100000) * 2 - 1

	return math.sin(phase * math.pi * 2)


def fold (value: float, amount: float) -> float:

	"""Reflect the part of the signal beyond a threshold that drops as ``amount`` rises."""

	threshold = 1 - amount * 0.8

	if value > threshold:
		return threshold - (value - threshold)

	if value < -threshold:
		return -threshold + (-threshold - value)

	return value


def asymmetric_fold (value: float, amount: float) -> float:

	"""Fold the positive and negative halves at different thresholds and slopes."""

	positive = 1 - amount * 0.8
	negative = -0.7 + amount * 0.3

	if value > positive:
		return positive - (value - positive) * (1 + amount)

	if value < negative:
		return negative + (negative - value) * (0.8 + amount * 0.4)

	return value


def rectify (value: float, amount: float) -> float:

	"""Blend the signal with its half-wave rectified copy."""

	return value * (1 - amount) + max(0.0, value) * amount


def saturate (value: float, amount: float) -> float:

	"""Soft-clip with tanh."""

	return math.tanh(value * (1 + amount * 5)) / (1 + amount * 0.5)


def buchla_fold (value: float, amount: float) -> float:

	"""Multi-fold transfer curve after the Buchla 259 wavefolder.

	The signal is amplified by ``1 + 3 * amount``; anything beyond +-1 is
	folded back, positive folds are slightly attenuated, and the result is
	soft-clipped with tanh.
	"""

	value *= 1 + amount * 3

	if abs(value) > 1:
		value = math.copysign(2 - abs(math.fmod(value, 2)), value)
		if value > 0:
			value *= 0.9 + amount * 0.1

	return math.tanh(value)


SHAPERS: typing.Dict[Shaper, typing.Callable[[float, float], float]] = {
	Shaper.BUCHLA: buchla_fold,
	Shaper.FOLD: fold,
	Shaper.ASYMMETRIC_FOLD: asymmetric_fold,
	Shaper.RECTIFY: rectify,
	Shaper.SATURATE: saturate,
}


def buchla_curve (t: float) -> float:

	"""Piecewise-linear stepped response used to weight the note gate."""

	steps = BUCHLA_CURVE_STEPS
	index = min(int(t * len(steps)), len(steps) - 1)
	following = min(index + 1, len(steps) - 1)
	frac = t * len(steps) - index

	return steps[index] * (1 - frac) + steps[following] * frac


def harmony_intervals (value: float) -> typing.List[int]:

	"""Intervals stacked on a note; brighter chords for higher values."""

	if value > 0.8:
		return [4, 7, 11]
	if value > 0.6:
		return [4, 7]
	if value > 0.4:
		return [3, 7]
	if value > 0.2:
		return [7]

	return [12]


class WaveformCache:

	"""
	Bounded least-recently-used memo of sampled waveforms.

	Example:
		```python
		cache = WaveformCache(capacity=2)
		cache.put(("sine", 4), (0.5, 1.0))
		cache.get(("sine", 4))    # (0.5, 1.0), now most recently used
		```
	"""

	def __init__ (self, capacity: int = DEFAULT_CACHE_SIZE) -> None:

		if capacity < 1:
			logger.warning(f"Waveform cache capacity {capacity} is below 1 - using 1")
			capacity = 1

		self.capacity = capacity
		self._entries: "collections.OrderedDict[CacheKey, typing.Tuple[float, ...]]" = collections.OrderedDict()

	def get (self, key: CacheKey) -> typing.Optional[typing.Tuple[float, ...]]:

		"""Return the cached samples for ``key`` and mark them recently used."""

		if key not in self._entries:
			return None

		self._entries.move_to_end(key)

		return self._entries[key]

	def put (self, key: CacheKey, values: typing.Sequence[float]) -> None:

		"""Store samples, evicting the least recently used entry when full."""

		self._entries[key] = tuple(values)
		self._entries.move_to_end(key)

		while len(self._entries) > self.capacity:
			self._entries.popitem(last=False)

	def clear (self) -> None:

		self._entries.clear()

	def __contains__ (self, key: object) -> bool:

		return key in self._entries

	def __len__ (self) -> int:

		return len(self._entries)


@dataclasses.dataclass(frozen=True)
class WaveshaperConfig:

	"""
	Parameters for the waveshaper generator.

	Attributes:
		waveform: Base oscillator shape.
		frequency: Cycles across the whole pattern.
		harmonics: Highest overtone added (1 adds none).
		folding: Shaper amount (0 bypasses the shaper).
		shaper: Transfer function applied when folding is above 0.
		quantize: Snap pitches to ``scale``; otherwise use raw semitones.
		scale: Scale for quantized pitches.
		base_note: Lowest MIDI note.
		octave_range: Octaves the pitches span.
		density: Base probability that a step sounds.
		length: Steps to generate.
		note_interval: Milliseconds between steps.
		seed: Seed for every random decision in a run.
	"""

	waveform: Waveform = Waveform.SINE
	frequency: float = 4.0
	harmonics: int = 3
	folding: float = 0.3
	shaper: Shaper = Shaper.BUCHLA
	quantize: bool = True
	scale: automatone.config.ScaleName = automatone.config.ScaleName.PENTATONIC
	base_note: int = 60
	octave_range: int = 2
	density: float = 0.8
	length: int = 16
	note_interval: int = automatone.constants.timing.DEFAULT_NOTE_INTERVAL_MS
	seed: typing.Optional[int] = None

	@classmethod
	def from_dict (cls, params: typing.Optional[typing.Mapping[str, typing.Any]] = None) -> "WaveshaperConfig":

		"""Build a config from raw parameters, replacing anything invalid with its default."""

		p = automatone.config.normalize_keys(params)
		defaults = cls()

		return cls(
			waveform = Waveform.resolve(p.get("waveform"), defaults.waveform),
			frequency = automatone.config.read_float(p, "frequency", defaults.frequency, 0.0, 64.0),
			harmonics = automatone.config.read_int(p, "harmonics", defaults.harmonics, 1, 16),
			folding = automatone.config.read_float(p, "folding", defaults.folding, 0.0, 1.0),
			shaper = Shaper.resolve(p.get("shaper"), defaults.shaper),
			quantize = automatone.config.read_bool(p, "quantize", defaults.quantize),
			scale = automatone.config.ScaleName.resolve(p.get("scale"), defaults.scale),
			base_note = automatone.config.read_int(p, "base_note", defaults.base_note, 0, 127),
			octave_range = automatone.config.read_int(p, "octave_range", defaults.octave_range, 1, 4),
			density = automatone.config.read_float(p, "density", defaults.density, 0.0, 1.0),
			length = automatone.config.read_int(p, "length", defaults.length, 0, 1024),
			note_interval = automatone.config.read_int(p, "note_interval", defaults.note_interval, 1, 60000),
			seed = automatone.config.read_seed(p),
		)

	def cache_key (self) -> CacheKey:

		"""The parameters that determine the sampled waveform."""

		return (self.waveform, self.frequency, self.harmonics, self.folding, self.shaper, self.length)


class WaveshaperGenerator:

	"""
	Turns a shaped waveform into a melodic pattern.
	"""

	def __init__ (
		self,
		config: typing.Optional[WaveshaperConfig] = None,
		rng: typing.Optional[random.Random] = None,
		cache: typing.Optional[WaveformCache] = None
	) -> None:

		self.config = config or WaveshaperConfig()
		self._rng = rng
		self.cache = cache if cache is not None else WaveformCache()

	def wave_values (self) -> typing.Tuple[float, ...]:

		"""Sample the shaped waveform once per step, rescaled to 0-1."""

		key = self.config.cache_key()
		cached = self.cache.get(key)

		if cached is not None:
			return cached

		c = self.config
		shaper = SHAPERS[c.shaper]
		values: typing.List[float] = []

		for i in range(c.length):

			phase = i / c.length * c.frequency
			value = base_waveform(c.waveform, phase)

			for h in range(2, c.harmonics + 1):
				value += base_waveform(c.waveform, (phase * h) % 1) / h

			value = max(-1.0, min(1.0, value))

			if c.folding > 0:
				value = shaper(value, c.folding)

			values.append(max(0.0, min(1.0, (value + 1) / 2)))

		self.cache.put(key, values)

		return tuple(values)

	def _note_probability (self, index: int, value: float) -> float:

		probability = self.config.density

		if index % 4 == 0:
			probability += 0.3
		elif index % 2 == 0:
			probability += 0.15

		return probability + buchla_curve(value) * 0.2

	def _pitch (self, value: float, scale: typing.Sequence[int]) -> int:

		if self.config.quantize:
			interval = scale[int(value * len(scale)) % len(scale)]
			return self.config.base_note + interval + int(value * self.config.octave_range) * 12

		return self.config.base_note + int(value * self.config.octave_range * 12)

	@staticmethod
	def _velocity (value: float, index: int) -> int:

		velocity = 60 + int(value * 60)

		if index % 4 == 0:
			velocity += 7
		elif index % 2 == 0:
			velocity += 3
		else:
			velocity -= 5

		return automatone.constants.velocity.clamp(velocity)

	@staticmethod
	def _harmony_probability (value: float, index: int) -> float:

		probability = 0.2

		if index % 4 == 0:
			probability += 0.3
		if value > 0.7:
			probability += 0.3

		return probability

	def generate (self) -> typing.List[automatone.events.Step]:

		"""Return ``length`` steps driven by the shaped waveform."""

		rng = self._rng or random.Random(self.config.seed)
		scale = automatone.intervals.get_scale(self.config.scale.value)
		values = self.wave_values()

		sequence: typing.List[automatone.events.Step] = []

		for i, value in enumerate(values):

			step = automatone.events.Step(step=i, time=i * self.config.note_interval)

			if automatone.sequence_utils.probability_gate(self._note_probability(i, value), rng):

				pitch = self._pitch(value, scale)
				velocity = self._velocity(value, i)
				step.notes.append(automatone.events.NoteEvent(pitch=pitch, velocity=velocity, column=i, state="active"))

				if automatone.sequence_utils.probability_gate(self._harmony_probability(value, i), rng):
					for interval in harmony_intervals(value):
						step.notes.append(automatone.events.NoteEvent(
							pitch = pitch + interval,
							velocity = automatone.constants.velocity.clamp(velocity - HARMONY_VELOCITY_DROP),
							column = i,
							state = "harmony",
						))

			sequence.append(step)

		logger.debug(f"Waveshaper ({self.config.waveform.value}/{self.config.shaper.value}): {automatone.events.count_notes(sequence)} notes, cache size {len(self.cache)}")

		return sequence
