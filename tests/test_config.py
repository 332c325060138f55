import logging
import pathlib

import pytest

import automatone.config


def test_defaults () -> None:

	config = automatone.config.CellularConfig.from_dict({})

	assert config == automatone.config.CellularConfig()
	assert config.mode == automatone.config.Mode.ONE_D
	assert config.rule == 30
	assert config.emphasize_births is True


def test_camel_case_keys () -> None:

	config = automatone.config.CellularConfig.from_dict({
		"mode": "lifeLike",
		"initialCondition": "glider",
		"velocityMap": "distance",
		"noteRange": "high",
		"noteInterval": 125,
		"emphasizeBirths": False,
	})

	assert config.mode == automatone.config.Mode.LIFE_LIKE
	assert config.initial_condition == automatone.config.InitialCondition.GLIDER
	assert config.velocity_map == automatone.config.VelocityMap.DISTANCE
	assert config.note_range == automatone.config.NoteRange.HIGH
	assert config.note_interval == 125
	assert config.emphasize_births is False


@pytest.mark.parametrize("value, expected", [
	("gameOfLife", automatone.config.Mode.LIFE_LIKE),
	("conway", automatone.config.Mode.LIFE_LIKE),
	("1d", automatone.config.Mode.ONE_D),
	("ONE_D", automatone.config.Mode.ONE_D),
	("life_like", automatone.config.Mode.LIFE_LIKE),
])
def test_mode_aliases (value: str, expected: automatone.config.Mode) -> None:

	assert automatone.config.CellularConfig.from_dict({"mode": value}).mode == expected


def test_legacy_names () -> None:

	"""The front end's older keys still work."""

	config = automatone.config.CellularConfig.from_dict({"type": "gameOfLife", "generations": 12, "buchlaMode": True})

	assert config.mode == automatone.config.Mode.LIFE_LIKE
	assert config.iterations == 12
	assert config.rhythmic_filter is True


@pytest.mark.parametrize("params, field, expected", [
	({"rule": 300}, "rule", 30),
	({"rule": -1}, "rule", 30),
	({"rule": "ninety"}, "rule", 30),
	({"width": 0}, "width", 16),
	({"width": True}, "width", 16),
	({"density": 1.5}, "density", 0.3),
	({"density": float("nan")}, "density", 0.3),
	({"iterations": 5000}, "iterations", 32),
	({"scale": "mixolydian"}, "scale", automatone.config.ScaleName.PENTATONIC),
	({"velocityMap": "loud"}, "velocity_map", automatone.config.VelocityMap.LINEAR),
	({"rhythmicFilter": "maybe"}, "rhythmic_filter", False),
])
def test_invalid_values_fall_back (params: dict, field: str, expected: object, caplog: pytest.LogCaptureFixture) -> None:

	"""Bad values are replaced by their defaults and a warning is logged."""

	with caplog.at_level(logging.WARNING):
		config = automatone.config.CellularConfig.from_dict(params)

	assert getattr(config, field) == expected
	assert caplog.records


def test_numeric_strings_and_float_truncation () -> None:

	config = automatone.config.CellularConfig.from_dict({"rule": "90", "width": 12.7})

	assert config.rule == 90
	assert config.width == 12


def test_custom_cells () -> None:

	config = automatone.config.CellularConfig.from_dict({"customCells": [[1, 2], 5, "x", [1, 2, 3]]})

	assert config.custom_cells == ((1, 2), (5, 0))


def test_non_mapping_params_use_defaults () -> None:

	assert automatone.config.CellularConfig.from_dict(["rule", 90]) == automatone.config.CellularConfig()  # type: ignore[arg-type]


def test_read_bool_spellings () -> None:

	params = {"a": "yes", "b": "off", "c": 1, "d": 0}

	assert automatone.config.read_bool(params, "a", False) is True
	assert automatone.config.read_bool(params, "b", True) is False
	assert automatone.config.read_bool(params, "c", False) is True
	assert automatone.config.read_bool(params, "d", True) is False
	assert automatone.config.read_bool(params, "missing", True) is True


def test_seed () -> None:

	assert automatone.config.CellularConfig.from_dict({"seed": 42}).seed == 42
	assert automatone.config.CellularConfig.from_dict({}).seed is None


def test_config_is_frozen () -> None:

	config = automatone.config.CellularConfig()

	with pytest.raises(Exception):
		config.rule = 90  # type: ignore[misc]


# ---------------------------------------------------------------------------
# load_config
# ---------------------------------------------------------------------------

def test_load_config_missing_file (tmp_path: pathlib.Path, caplog: pytest.LogCaptureFixture) -> None:

	with caplog.at_level(logging.WARNING):
		assert automatone.config.load_config(str(tmp_path / "nope.yaml")) == {}

	assert "not found" in caplog.text


def test_load_config_reads_yaml (tmp_path: pathlib.Path) -> None:

	path = tmp_path / "config.yaml"
	path.write_text("algorithm: cellular\ncellular:\n  rule: 90\n  mode: 1d\n")

	config = automatone.config.load_config(str(path))

	assert config == {"algorithm": "cellular", "cellular": {"rule": 90, "mode": "1d"}}


@pytest.mark.parametrize("text", ["", "- just\n- a list\n", "key: [unclosed\n"])
def test_load_config_unusable_content (tmp_path: pathlib.Path, text: str) -> None:

	path = tmp_path / "config.yaml"
	path.write_text(text)

	assert automatone.config.load_config(str(path)) == {}
