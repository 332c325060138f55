"""Dispatch generation requests to the right generator.

:class:`AlgorithmEngine` turns an algorithm name and a raw parameter mapping
into a validated config, runs the matching generator and returns its steps.
Unknown names fall back to the cellular generator, and a generator that fails
unexpectedly yields an empty sequence rather than an exception.

Example:
	```python
	engine = automatone.engine.AlgorithmEngine()
	steps = engine.generate("euclidean", {"steps": 16, "fills": 5}, seed=7)
	```
"""

import dataclasses
import logging
import random
import typing

import automatone.cellular.generator
import automatone.config
import automatone.euclidean
import automatone.events
import automatone.fractal
import automatone.harmony
import automatone.markov
import automatone.sequential
import automatone.waveshaper


logger = logging.getLogger(__name__)


class Algorithm (automatone.config.Choice):

	"""The available generators."""

	CELLULAR = "cellular"
	EUCLIDEAN = "euclidean"
	MARKOV = "markov"
	WAVESHAPER = "waveshaper"
	SEQUENTIAL = "sequential"
	HARMONY = "harmony"
	FRACTAL = "fractal"


ALGORITHM_ALIASES: typing.Dict[str, Algorithm] = {
	"ruleBasedHarmony": Algorithm.HARMONY,
	"automaton": Algorithm.CELLULAR,
	"drums": Algorithm.EUCLIDEAN,
}


@dataclasses.dataclass(frozen=True)
class AlgorithmSpec:

	"""Config type and generator factory for one algorithm."""

	config_type: typing.Any
	generator_type: typing.Any


ALGORITHMS: typing.Dict[Algorithm, AlgorithmSpec] = {
	Algorithm.CELLULAR: AlgorithmSpec(automatone.config.CellularConfig, automatone.cellular.generator.CellularGenerator),
	Algorithm.EUCLIDEAN: AlgorithmSpec(automatone.euclidean.EuclideanConfig, automatone.euclidean.EuclideanGenerator),
	Algorithm.MARKOV: AlgorithmSpec(automatone.markov.MarkovConfig, automatone.markov.MarkovGenerator),
	Algorithm.WAVESHAPER: AlgorithmSpec(automatone.waveshaper.WaveshaperConfig, automatone.waveshaper.WaveshaperGenerator),
	Algorithm.SEQUENTIAL: AlgorithmSpec(automatone.sequential.SequentialConfig, automatone.sequential.SequentialGenerator),
	Algorithm.HARMONY: AlgorithmSpec(automatone.harmony.HarmonyConfig, automatone.harmony.HarmonyGenerator),
	Algorithm.FRACTAL: AlgorithmSpec(automatone.fractal.FractalConfig, automatone.fractal.FractalGenerator),
}


def resolve_algorithm (name: typing.Any) -> Algorithm:

	"""Map a name (or alias) to an :class:`Algorithm`, defaulting to cellular."""

	return Algorithm.resolve(name, Algorithm.CELLULAR, ALGORITHM_ALIASES)


class AlgorithmEngine:

	"""
	Runs any generator by name.

	The waveshaper's waveform cache belongs to the engine, so repeated
	waveshaper runs on one engine reuse sampled waveforms. ``last_generator``
	holds the generator of the most recent run (e.g. for a renderer that
	wants a cellular run's cell changes).
	"""

	def __init__ (self, cache_size: int = automatone.waveshaper.DEFAULT_CACHE_SIZE) -> None:

		self.waveform_cache = automatone.waveshaper.WaveformCache(cache_size)
		self.last_generator: typing.Optional[typing.Any] = None

	def create_generator (
		self,
		name: typing.Any,
		params: typing.Optional[typing.Mapping[str, typing.Any]] = None,
		seed: typing.Optional[int] = None
	) -> typing.Any:

		"""Validate ``params`` for the named algorithm and return a ready generator.

		A ``seed`` overrides any seed in ``params``.
		"""

		algorithm = resolve_algorithm(name)
		spec = ALGORITHMS[algorithm]
		config = spec.config_type.from_dict(params)
		rng = random.Random(seed) if seed is not None else None

		if algorithm == Algorithm.WAVESHAPER:
			return spec.generator_type(config, rng=rng, cache=self.waveform_cache)

		return spec.generator_type(config, rng=rng)

	def generate (
		self,
		name: typing.Any,
		params: typing.Optional[typing.Mapping[str, typing.Any]] = None,
		seed: typing.Optional[int] = None
	) -> typing.List[automatone.events.Step]:

		"""Run the named algorithm and return its steps (empty on failure)."""

		generator = self.create_generator(name, params, seed)
		self.last_generator = generator

		try:
			sequence = generator.generate()
		except Exception:
			logger.exception(f"Generator {type(generator).__name__} failed - returning an empty sequence")
			return []

		logger.debug(f"{type(generator).__name__}: {len(sequence)} steps")

		return sequence
