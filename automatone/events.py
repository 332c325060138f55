"""Note-event types shared by every generator.

A generator returns an ordered list of :class:`Step` objects. Each step has an
index, a timestamp in milliseconds and zero or more :class:`NoteEvent` objects
(an empty list is a rest). ``Step.to_dict()`` produces the plain shape the
front end and renderers consume::

	{"step": 3, "time": 750, "notes": [{"pitch": 60, "velocity": 96, ...}]}

The cellular generator additionally reports :class:`CellChange` records so a
renderer can highlight births and deaths.
"""

import dataclasses
import enum
import typing


class ChangeType (str, enum.Enum):

	"""Direction of a single cell flip."""

	BIRTH = "birth"
	DEATH = "death"


@dataclasses.dataclass(frozen=True)
class CellChange:

	"""
	A cell that flipped state during one evolution step of the 2-D automaton.
	"""

	x: int
	y: int
	type: ChangeType
	generation: int = 0

	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""Return the plain ``{x, y, type, generation}`` shape."""

		return {"x": self.x, "y": self.y, "type": self.type.value, "generation": self.generation}


@dataclasses.dataclass(frozen=True)
class NoteEvent:

	"""
	A single note: MIDI-style pitch and velocity plus optional grid metadata.
	"""

	pitch: int
	velocity: int
	duration: typing.Optional[int] = None		# milliseconds
	column: typing.Optional[int] = None
	row: typing.Optional[int] = None
	state: typing.Optional[str] = None			# 'active', 'birth', 'death', 'harmony'

	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""Return the note as a dict, leaving out unset optional fields."""

		return {
			field.name: getattr(self, field.name)
			for field in dataclasses.fields(self)
			if getattr(self, field.name) is not None
		}


@dataclasses.dataclass
class Step:

	"""
	Represents a collection of notes at a single point in time.
	"""

	step: int
	time: int
	notes: typing.List[NoteEvent] = dataclasses.field(default_factory=list)

	@property
	def is_rest (self) -> bool:

		"""True when the step carries no notes."""

		return not self.notes

	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""Return the ``{step, time, notes}`` shape consumed by renderers."""

		return {
			"step": self.step,
			"time": self.time,
			"notes": [note.to_dict() for note in self.notes],
		}


def sequence_to_dicts (sequence: typing.Iterable[Step]) -> typing.List[typing.Dict[str, typing.Any]]:

	"""Convert a list of steps to plain dicts."""

	return [step.to_dict() for step in sequence]


def count_notes (sequence: typing.Iterable[Step]) -> int:

	"""Return the total number of note events across a sequence."""

	return sum(len(step.notes) for step in sequence)
