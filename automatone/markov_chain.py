"""Weighted Markov chains over note contexts.

A chain maps each state to weighted successor states. For melodic use the
states are contexts: tuples of the last ``order`` notes, learned from a
training phrase with :func:`count_transitions`. Moving from one context to
the next slides the window forward by one note, so the newest note is always
``state[-1]``.

Example:
	```python
	chain = MarkovChain.from_sequence([60, 62, 64, 62, 60], order=1, rng=random.Random(3))
	notes = chain.walk(8)
	```
"""

import itertools
import random
import typing


StateType = typing.TypeVar("StateType", bound=typing.Hashable)


def choose_weighted (options: typing.Sequence[typing.Tuple[StateType, int]], rng: random.Random) -> StateType:

	"""
	Pick one option with probability proportional to its count.
	"""

	if not options:
		raise ValueError("No options to choose from")

	if any(count <= 0 for _, count in options):
		raise ValueError("Counts must be positive")

	running_totals = list(itertools.accumulate(count for _, count in options))
	roll = rng.uniform(0, running_totals[-1])

	for (option, _), total in zip(options, running_totals):
		if roll <= total:
			return option

	return options[-1][0]


def count_transitions (sequence: typing.Sequence[StateType], order: int = 1) -> typing.Dict[typing.Tuple[StateType, ...], typing.List[typing.Tuple[typing.Tuple[StateType, ...], int]]]:

	"""Learn context-to-context transition counts from a training sequence.

	Each state of the resulting chain is a tuple of the last ``order``
	symbols; a transition moves the window one symbol forward.

	Example:
		```python
		count_transitions([60, 62, 60, 64], order=1)
		# {(60,): [((62,), 1), ((64,), 1)], (62,): [((60,), 1)]}
		```
	"""

	if order < 1:
		raise ValueError("Order must be at least 1")

	counts: typing.Dict[typing.Tuple[StateType, ...], typing.Dict[typing.Tuple[StateType, ...], int]] = {}

	for i in range(len(sequence) - order):
		context = tuple(sequence[i:i + order])
		following = tuple(sequence[i + 1:i + order + 1])
		targets = counts.setdefault(context, {})
		targets[following] = targets.get(following, 0) + 1

	return {context: list(targets.items()) for context, targets in counts.items()}


class MarkovChain (typing.Generic[StateType]):

	"""
	A chain over weighted transitions, walked with its own random source.

	The current state may be moved anywhere, including to a state that has
	no outgoing transitions; :meth:`can_step` tells the caller whether the
	learned transitions still apply.
	"""

	def __init__ (
		self,
		transitions: typing.Dict[StateType, typing.List[typing.Tuple[StateType, int]]],
		initial_state: typing.Optional[StateType] = None,
		rng: typing.Optional[random.Random] = None
	) -> None:

		"""
		Parameters:
			transitions: Successors and counts per state; must not be empty.
			initial_state: Starting state (the first learned state when omitted).
			rng: Random source for every step.
		"""

		if not transitions:
			raise ValueError("A chain needs at least one transition")

		if initial_state is None:
			initial_state = next(iter(transitions))
		elif initial_state not in transitions:
			raise ValueError(f"Initial state {initial_state!r} has no transitions")

		self.transitions = transitions
		self.rng = rng or random.Random()
		self._state: StateType = initial_state

	@classmethod
	def from_sequence (cls, sequence: typing.Sequence[typing.Any], order: int = 1, rng: typing.Optional[random.Random] = None) -> "MarkovChain[typing.Any]":

		"""Learn an order-``order`` chain from ``sequence``, starting at its first context."""

		return cls(count_transitions(sequence, order), tuple(sequence[:order]), rng=rng)

	@property
	def state (self) -> StateType:

		return self._state

	@state.setter
	def state (self, value: StateType) -> None:

		self._state = value

	def can_step (self) -> bool:

		"""True when the current state has learned successors."""

		return bool(self.transitions.get(self._state))

	def step (self) -> StateType:

		"""Move to a weighted-random successor and return it. A dead end stays put."""

		options = self.transitions.get(self._state)

		if options:
			self._state = choose_weighted(options, self.rng)

		return self._state

	def advance (self, symbol: typing.Any) -> None:

		"""Slide a tuple context forward by ``symbol``, keeping its length."""

		context = tuple(self._state)  # type: ignore[arg-type]
		self._state = (context + (symbol,))[-len(context):] if context else (symbol,)  # type: ignore[assignment]

	def walk (self, count: int) -> typing.List[typing.Any]:

		"""Step ``count`` times and return the newest symbol of each context."""

		return [self.step()[-1] for _ in range(count)]  # type: ignore[index]
