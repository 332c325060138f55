"""Configuration values and validation.

Every generator takes a frozen dataclass config built by ``from_dict()``. The
readers in this module coerce raw values (from YAML, JSON or the front end),
and any value that is missing, of the wrong type or out of range is replaced
by its documented default with a logged warning. Nothing here raises for bad
input: a creative tool should play something rather than stop.

String-tagged options are closed enumerations (:class:`Choice` subclasses),
resolved once here so generators never compare strings per cell.

Example:
	```python
	config = CellularConfig.from_dict({"mode": "lifeLike", "initialCondition": "glider"})
	config.mode              # Mode.LIFE_LIKE
	config.velocity_map      # VelocityMap.LINEAR
	```
"""

import dataclasses
import enum
import logging
import os
import re
import typing

import yaml

import automatone.constants.timing


logger = logging.getLogger(__name__)

ChoiceType = typing.TypeVar("ChoiceType", bound="Choice")


def _normalize_token (value: str) -> str:

	"""Lower-case a name and drop separators so 'life_like' matches 'lifeLike'."""

	return re.sub(r"[\s_\-]", "", value).lower()


class Choice (str, enum.Enum):

	"""
	Base class for the closed sets of named options.
	"""

	@classmethod
	def resolve (
		cls: typing.Type[ChoiceType],
		value: typing.Any,
		default: ChoiceType,
		aliases: typing.Optional[typing.Dict[str, ChoiceType]] = None
	) -> ChoiceType:

		"""Return the member named by ``value``, or ``default`` when it names nothing.

		Matching ignores case and separators and checks member values, member
		names and then ``aliases`` (keys normalized the same way).
		"""

		if isinstance(value, cls):
			return value

		if isinstance(value, str):

			token = _normalize_token(value)

			for member in cls:
				if token in (_normalize_token(member.value), _normalize_token(member.name)):
					return member

			if aliases:
				for alias, member in aliases.items():
					if token == _normalize_token(alias):
						return member

		if value is not None:
			logger.warning(f"Unknown {cls.__name__} '{value}', using '{default.value}'")

		return default


class Mode (Choice):

	"""Which automaton family the cellular generator runs."""

	ONE_D = "oneD"
	LIFE_LIKE = "lifeLike"


class InitialCondition (Choice):

	"""Seed pattern for the first generation."""

	CENTER = "center"
	RANDOM = "random"
	GLIDER = "glider"
	CUSTOM = "custom"
	SINGLE = "single"


class VelocityMap (Choice):

	"""Strategy for turning a cell's position into a note velocity."""

	LINEAR = "linear"
	DISTANCE = "distance"
	RANDOM = "random"
	CELLULAR = "cellular"


class ScaleName (Choice):

	"""Named scales available to every mapper (see ``automatone.intervals``)."""

	MAJOR = "major"
	MINOR = "minor"
	PENTATONIC = "pentatonic"
	BLUES = "blues"
	CHROMATIC = "chromatic"
	WHOLETONE = "wholetone"
	DIMINISHED = "diminished"
	HARMONIC_MINOR = "harmonicminor"
	DORIAN = "dorian"


class NoteRange (Choice):

	"""Register the cellular mapper draws its base note from."""

	LOW = "low"
	MID = "mid"
	HIGH = "high"


MODE_ALIASES: typing.Dict[str, Mode] = {
	"1d": Mode.ONE_D,
	"elementary": Mode.ONE_D,
	"2d": Mode.LIFE_LIKE,
	"gameOfLife": Mode.LIFE_LIKE,
	"life": Mode.LIFE_LIKE,
	"conway": Mode.LIFE_LIKE,
}


# ---------------------------------------------------------------------------
# Raw value readers
# ---------------------------------------------------------------------------

def normalize_keys (params: typing.Optional[typing.Mapping[str, typing.Any]]) -> typing.Dict[str, typing.Any]:

	"""Return a copy of ``params`` with camelCase keys converted to snake_case."""

	if not params:
		return {}

	if not isinstance(params, typing.Mapping):
		logger.warning(f"Expected a mapping of parameters, got {type(params).__name__} - using defaults")
		return {}

	return {re.sub(r"(?<!^)(?=[A-Z])", "_", str(key)).lower(): value for key, value in params.items()}


def read_int (params: typing.Mapping[str, typing.Any], key: str, default: int, minimum: typing.Optional[int] = None, maximum: typing.Optional[int] = None) -> int:

	"""Read an integer, falling back to ``default`` when absent, malformed or out of range."""

	if key not in params or params[key] is None:
		return default

	raw = params[key]

	# bool is an int subclass; True is not a width.
	if isinstance(raw, bool):
		logger.warning(f"{key}: expected a number, got {raw!r} - using {default}")
		return default

	try:
		value = int(raw)
	except (TypeError, ValueError):
		logger.warning(f"{key}: expected a number, got {raw!r} - using {default}")
		return default

	if isinstance(raw, float) and raw != value:
		logger.warning(f"{key}: {raw!r} truncated to {value}")

	if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
		logger.warning(f"{key}: {value} outside {minimum}..{maximum} - using {default}")
		return default

	return value


def read_float (params: typing.Mapping[str, typing.Any], key: str, default: float, minimum: typing.Optional[float] = None, maximum: typing.Optional[float] = None) -> float:

	"""Read a float, falling back to ``default`` when absent, malformed or out of range."""

	if key not in params or params[key] is None:
		return default

	raw = params[key]

	if isinstance(raw, bool):
		logger.warning(f"{key}: expected a number, got {raw!r} - using {default}")
		return default

	try:
		value = float(raw)
	except (TypeError, ValueError):
		logger.warning(f"{key}: expected a number, got {raw!r} - using {default}")
		return default

	if value != value:
		logger.warning(f"{key}: NaN - using {default}")
		return default

	if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
		logger.warning(f"{key}: {value} outside {minimum}..{maximum} - using {default}")
		return default

	return value


def read_bool (params: typing.Mapping[str, typing.Any], key: str, default: bool) -> bool:

	"""Read a flag; accepts booleans, 0/1 and the usual yes/no spellings."""

	if key not in params or params[key] is None:
		return default

	raw = params[key]

	if isinstance(raw, bool):
		return raw

	if isinstance(raw, int) and raw in (0, 1):
		return bool(raw)

	if isinstance(raw, str):
		token = raw.strip().lower()
		if token in ("true", "yes", "on", "1"):
			return True
		if token in ("false", "no", "off", "0"):
			return False

	logger.warning(f"{key}: expected a boolean, got {raw!r} - using {default}")
	return default


def read_seed (params: typing.Mapping[str, typing.Any]) -> typing.Optional[int]:

	"""Read an optional integer random seed."""

	if params.get("seed") is None:
		return None

	return read_int(params, "seed", 0)


def read_cells (params: typing.Mapping[str, typing.Any], key: str) -> typing.Tuple[typing.Tuple[int, int], ...]:

	"""Read a list of live cells for a custom seed.

	Items may be ``[x, y]`` pairs (2-D) or bare column indices (1-D, stored
	with ``y = 0``). Malformed items are skipped.
	"""

	raw = params.get(key)

	if not raw:
		return ()

	if not isinstance(raw, (list, tuple)):
		logger.warning(f"{key}: expected a list of cells, got {raw!r} - ignoring")
		return ()

	cells: typing.List[typing.Tuple[int, int]] = []

	for item in raw:

		if isinstance(item, int) and not isinstance(item, bool):
			cells.append((item, 0))

		elif isinstance(item, (list, tuple)) and len(item) == 2 and all(isinstance(v, int) and not isinstance(v, bool) for v in item):
			cells.append((item[0], item[1]))

		else:
			logger.warning(f"{key}: skipping malformed cell {item!r}")

	return tuple(cells)


# ---------------------------------------------------------------------------
# Cellular generator configuration
# ---------------------------------------------------------------------------

@dataclasses.dataclass(frozen=True)
class CellularConfig:

	"""
	Validated parameters for one cellular-automaton generation.

	Attributes:
		mode: ``Mode.ONE_D`` (elementary automaton) or ``Mode.LIFE_LIKE`` (Conway).
		rule: Wolfram rule number for 1-D mode (0-255).
		width: Cells per row.
		height: Rows in the 2-D grid.
		initial_condition: Seed pattern for generation 0.
		density: Live-cell probability for the random seed (0.0-1.0).
		iterations: Generations to produce (1-D) or evolution steps to run (2-D).
		velocity_map: Velocity strategy used by the note mapper.
		scale: Scale the mapper quantizes columns to.
		note_range: Register supplying the base note.
		rhythmic_filter: Apply pulse gating and accents after mapping.
		emphasize_births: Accent newly born cells and skip dying ones (2-D).
		note_interval: Milliseconds between steps.
		note_duration: Milliseconds each note lasts.
		custom_cells: Live cells for ``InitialCondition.CUSTOM``.
		seed: Seed for every random decision in a run; ``None`` is nondeterministic.
	"""

	mode: Mode = Mode.ONE_D
	rule: int = 30
	width: int = 16
	height: int = 16
	initial_condition: InitialCondition = InitialCondition.CENTER
	density: float = 0.3
	iterations: int = 32
	velocity_map: VelocityMap = VelocityMap.LINEAR
	scale: ScaleName = ScaleName.PENTATONIC
	note_range: NoteRange = NoteRange.MID
	rhythmic_filter: bool = False
	emphasize_births: bool = True
	note_interval: int = automatone.constants.timing.DEFAULT_NOTE_INTERVAL_MS
	note_duration: int = automatone.constants.timing.DEFAULT_NOTE_DURATION_MS
	custom_cells: typing.Tuple[typing.Tuple[int, int], ...] = ()
	seed: typing.Optional[int] = None

	@classmethod
	def from_dict (cls, params: typing.Optional[typing.Mapping[str, typing.Any]] = None) -> "CellularConfig":

		"""Build a config from raw parameters, replacing anything invalid with its default.

		Accepts snake_case or camelCase keys, plus the front end's older names
		(``type`` for ``mode``, ``generations`` for ``iterations``,
		``buchlaMode`` / ``rhythmicFilterEnabled`` for ``rhythmic_filter``).
		"""

		p = normalize_keys(params)
		defaults = cls()

		mode_value = p.get("mode", p.get("type"))
		iterations_key = "iterations" if "iterations" in p else "generations"

		if "rhythmic_filter" in p:
			filter_key = "rhythmic_filter"
		elif "rhythmic_filter_enabled" in p:
			filter_key = "rhythmic_filter_enabled"
		else:
			filter_key = "buchla_mode"

		return cls(
			mode = Mode.resolve(mode_value, defaults.mode, MODE_ALIASES),
			rule = read_int(p, "rule", defaults.rule, 0, 255),
			width = read_int(p, "width", defaults.width, 1, 256),
			height = read_int(p, "height", defaults.height, 1, 256),
			initial_condition = InitialCondition.resolve(p.get("initial_condition"), defaults.initial_condition),
			density = read_float(p, "density", defaults.density, 0.0, 1.0),
			iterations = read_int(p, iterations_key, defaults.iterations, 0, 1024),
			velocity_map = VelocityMap.resolve(p.get("velocity_map"), defaults.velocity_map),
			scale = ScaleName.resolve(p.get("scale"), defaults.scale),
			note_range = NoteRange.resolve(p.get("note_range"), defaults.note_range),
			rhythmic_filter = read_bool(p, filter_key, defaults.rhythmic_filter),
			emphasize_births = read_bool(p, "emphasize_births", defaults.emphasize_births),
			note_interval = read_int(p, "note_interval", defaults.note_interval, 1, 60000),
			note_duration = read_int(p, "note_duration", defaults.note_duration, 1, 60000),
			custom_cells = read_cells(p, "custom_cells"),
			seed = read_seed(p),
		)


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------

def load_config (config_path: str = "config.yaml") -> typing.Dict[str, typing.Any]:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	try:
		with open(config_path, "r") as f:
			data = yaml.safe_load(f)
	except yaml.YAMLError as exc:
		logger.warning(f"Config file {config_path} is not valid YAML ({exc}). Using defaults.")
		return {}

	if data is None:
		return {}

	if not isinstance(data, dict):
		logger.warning(f"Config file {config_path} does not contain a mapping. Using defaults.")
		return {}

	return data
