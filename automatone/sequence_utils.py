import random
import typing


# First 100 digits of pi, the source material of the 'pi' sequence.
PI_DIGITS: typing.Tuple[int, ...] = (
	3, 1, 4, 1, 5, 9, 2, 6, 5, 3, 5, 8, 9, 7, 9, 3, 2, 3, 8, 4, 6, 2, 6, 4, 3,
	3, 8, 3, 2, 7, 9, 5, 0, 2, 8, 8, 4, 1, 9, 7, 1, 6, 9, 3, 9, 9, 3, 7, 5, 1,
	0, 5, 8, 2, 0, 9, 7, 4, 9, 4, 4, 5, 9, 2, 3, 0, 7, 8, 1, 6, 4, 0, 6, 2, 8,
	6, 2, 0, 8, 9, 9, 8, 6, 2, 8, 0, 3, 4, 8, 2, 5, 3, 4, 2, 1, 1, 7, 0, 6, 7,
)

# Pulse and stage lengths for the layered modulo ('buchla') sequence.
PULSE_LENGTHS: typing.Tuple[int, ...] = (2, 3, 4, 5, 7, 8, 16)
STAGE_LENGTHS: typing.Tuple[int, ...] = (1, 2, 3, 5, 8, 13, 21)


def generate_euclidean_sequence (steps: int, pulses: int) -> typing.List[int]:

	"""
	Generate a Euclidean rhythm using Bjorklund's algorithm.
	"""

	if pulses == 0:
		return [0] * steps

	if pulses > steps:
		raise ValueError(f"Pulses ({pulses}) cannot be greater than steps ({steps})")

	sequence = []
	counts = []
	remainders = []
	divisor = steps - pulses

	remainders.append(pulses)
	level = 0

	while True:
		counts.append(divisor // remainders[level])
		remainders.append(divisor % remainders[level])
		divisor = remainders[level]
		level += 1
		if remainders[level] <= 1:
			break

	counts.append(divisor)

	def build (level: int) -> None:
		if level == -1:
			sequence.append(0)
		elif level == -2:
			sequence.append(1)
		else:
			for i in range(counts[level]):
				build(level - 1)
			if remainders[level] != 0:
				build(level - 2)

	build(level)
	i = sequence.index(1)
	return sequence[i:] + sequence[:i]


def rotate_sequence (sequence: typing.List[int], shift: int) -> typing.List[int]:

	"""Rotate a sequence left by ``shift`` steps (wrapping around)."""

	if not sequence:
		return []

	shift %= len(sequence)

	return sequence[shift:] + sequence[:shift]


def sequence_to_indices (sequence: typing.List[int]) -> typing.List[int]:

	"""Extract step indices where hits occur in a binary sequence."""

	return [i for i, v in enumerate(sequence) if v]


def generate_fibonacci_sequence (n: int) -> typing.List[int]:

	"""
	Return the first ``n`` Fibonacci numbers, starting 0, 1.
	"""

	sequence = [0, 1]

	while len(sequence) < n:
		sequence.append(sequence[-1] + sequence[-2])

	return sequence[:max(0, n)]


def generate_prime_sequence (n: int) -> typing.List[int]:

	"""
	Return the first ``n`` prime numbers.
	"""

	primes: typing.List[int] = []
	candidate = 2

	while len(primes) < n:
		if all(candidate % p for p in primes if p * p <= candidate):
			primes.append(candidate)
		candidate += 1

	return primes


def generate_pulse_sequence (n: int, rng: random.Random) -> typing.List[int]:

	"""Layer three modulo counters into a 12-valued pattern.

	Two pulse lengths and a stage length are drawn at random; step ``i``
	is ``((i % a) * (i % b) + i % stage) % 12``. The result repeats with
	the least common multiple of the three lengths, so short lengths give
	tight loops and longer ones drift.
	"""

	pulse_a = rng.choice(PULSE_LENGTHS)
	pulse_b = rng.choice(PULSE_LENGTHS)
	stage = rng.choice(STAGE_LENGTHS)

	return [((i % pulse_a) * (i % pulse_b) + i % stage) % 12 for i in range(n)]


def normalize_value (value: float, values: typing.Sequence[float]) -> float:

	"""Position of ``value`` within the range of ``values`` (0.0-1.0); 0.5 when the range is flat."""

	if not values:
		return 0.5

	low = min(values)
	high = max(values)

	if high == low:
		return 0.5

	return (value - low) / (high - low)


def probability_gate (probability: float, rng: random.Random) -> bool:

	"""Return True with the given probability (clamped to 0.0-1.0)."""

	return rng.random() < max(0.0, min(1.0, probability))
