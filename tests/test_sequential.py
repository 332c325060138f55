import random

import pytest

import automatone.events
import automatone.sequential


SequenceType = automatone.sequential.SequenceType


def test_number_sequences () -> None:

	rng = random.Random(0)

	assert automatone.sequential.number_sequence(SequenceType.PI, 5, rng) == [3, 1, 4, 1, 5]
	assert automatone.sequential.number_sequence(SequenceType.FIBONACCI, 6, rng) == [0, 1, 1, 2, 3, 5]
	assert automatone.sequential.number_sequence(SequenceType.PRIME, 4, rng) == [2, 3, 5, 7]


def test_prime_sequence_cycles () -> None:

	primes = automatone.sequential.number_sequence(SequenceType.PRIME, 45, random.Random(0))

	assert len(primes) == 45
	assert primes[40] == 2
	assert max(primes) == 173


def test_pi_sequence_stops_at_available_digits () -> None:

	assert len(automatone.sequential.number_sequence(SequenceType.PI, 150, random.Random(0))) == 100


def test_buchla_sequence_range () -> None:

	values = automatone.sequential.number_sequence(SequenceType.BUCHLA, 64, random.Random(3))

	assert all(0 <= v < 12 for v in values)


@pytest.mark.parametrize("accent, low, high", [(1.0, 100, 126), (0.7, 80, 99), (0.3, 60, 79), (0.0, 30, 59)])
def test_accent_velocity_bands (accent: float, low: int, high: int) -> None:

	rng = random.Random(1)

	for _ in range(50):
		assert low <= automatone.sequential.accent_velocity(accent, rng) <= high


def test_harmony_interval_bands () -> None:

	assert [automatone.sequential.harmony_interval(v) for v in (0.1, 0.3, 0.5, 0.7, 0.9)] == [3, 4, 7, 12, 5]


def test_accent_pattern_names () -> None:

	config = automatone.sequential.SequentialConfig.from_dict({"accentPattern": "7/8"})

	assert config.accent_pattern == automatone.sequential.AccentPattern.SEVEN_EIGHT
	assert automatone.sequential.SequentialConfig.from_dict({"accentPattern": "13/16"}).accent_pattern == automatone.sequential.AccentPattern.FOUR_FOUR


def test_generate_shape () -> None:

	steps = automatone.sequential.SequentialGenerator(rng=random.Random(4)).generate()

	assert len(steps) == 16
	assert [s.time for s in steps[:2]] == [0, 250]


def test_pitches_follow_scale () -> None:

	config = automatone.sequential.SequentialConfig.from_dict({"sequence": "pi", "rhythmDensity": 1.0, "scale": "pentatonic", "baseNote": 48})
	steps = automatone.sequential.SequentialGenerator(config, rng=random.Random(0)).generate()

	assert all(step.notes for step in steps)

	for step in steps:
		assert (step.notes[0].pitch - 48) % 12 in (0, 2, 4, 7, 9)


def test_harmony_notes_are_quieter () -> None:

	config = automatone.sequential.SequentialConfig.from_dict({"rhythmDensity": 1.0, "length": 64, "sequence": "prime"})
	steps = automatone.sequential.SequentialGenerator(config, rng=random.Random(6)).generate()
	harmonized = [step for step in steps if len(step.notes) == 2]

	assert harmonized

	for step in harmonized:
		root, harmony = step.notes
		assert harmony.state == "harmony"
		assert harmony.velocity == max(40, root.velocity - 20)


def test_seed_repeats () -> None:

	config = automatone.sequential.SequentialConfig.from_dict({"sequence": "buchla", "seed": 12})

	first = automatone.sequential.SequentialGenerator(config).generate()
	second = automatone.sequential.SequentialGenerator(config).generate()

	assert automatone.events.sequence_to_dicts(first) == automatone.events.sequence_to_dicts(second)


def test_zero_length () -> None:

	config = automatone.sequential.SequentialConfig.from_dict({"length": 0})

	assert automatone.sequential.SequentialGenerator(config).generate() == []
