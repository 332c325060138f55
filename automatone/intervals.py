import logging
import typing


logger = logging.getLogger(__name__)


SCALE_INTERVALS: typing.Dict[str, typing.Tuple[int, ...]] = {
	"major": (0, 2, 4, 5, 7, 9, 11),
	"minor": (0, 2, 3, 5, 7, 8, 10),
	"pentatonic": (0, 2, 4, 7, 9),
	"blues": (0, 3, 5, 6, 7, 10),
	"chromatic": (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11),
	"wholetone": (0, 2, 4, 6, 8, 10),
	"diminished": (0, 2, 3, 5, 6, 8, 9, 11),
	"harmonicminor": (0, 2, 3, 5, 7, 8, 11),
	"dorian": (0, 2, 3, 5, 7, 9, 10),
}


# Base notes per register: a pentatonic run plus upper harmonics.
# The first entry is the root every mapper builds pitches from.
NOTE_RANGES: typing.Dict[str, typing.Tuple[int, ...]] = {
	"low": (36, 38, 40, 43, 45, 48, 50, 52, 55, 57, 60),    # C2-C4
	"mid": (48, 50, 52, 55, 57, 60, 62, 64, 67, 69, 72),    # C3-C5
	"high": (60, 62, 64, 67, 69, 72, 74, 76, 79, 81, 84),   # C4-C6
}


CHORD_INTERVALS: typing.Dict[str, typing.Tuple[int, ...]] = {
	"maj": (0, 4, 7),
	"min": (0, 3, 7),
	"dim": (0, 3, 6),
	"aug": (0, 4, 8),
	"maj7": (0, 4, 7, 11),
	"min7": (0, 3, 7, 10),
	"dom7": (0, 4, 7, 10),
	"dim7": (0, 3, 6, 9),
	"half-dim7": (0, 3, 6, 10),
	"sus4": (0, 5, 7),
	"sus2": (0, 2, 7),
	"add9": (0, 4, 7, 14),
	"6": (0, 4, 7, 9),
	"m6": (0, 3, 7, 9),
	"9": (0, 4, 7, 10, 14),
}


DEFAULT_SCALE = "pentatonic"
DEFAULT_NOTE_RANGE = "mid"
DEFAULT_CHORD = "maj7"


def get_scale (name: str) -> typing.List[int]:

	"""
	Return the semitone intervals of a named scale, falling back to pentatonic.
	"""

	if name not in SCALE_INTERVALS:
		logger.warning(f"Unknown scale '{name}', using '{DEFAULT_SCALE}'")
		name = DEFAULT_SCALE

	return list(SCALE_INTERVALS[name])


def get_note_range (name: str) -> typing.List[int]:

	"""
	Return the base notes of a named register, falling back to the mid range.
	"""

	if name not in NOTE_RANGES:
		logger.warning(f"Unknown note range '{name}', using '{DEFAULT_NOTE_RANGE}'")
		name = DEFAULT_NOTE_RANGE

	return list(NOTE_RANGES[name])


def get_chord_intervals (name: str) -> typing.List[int]:

	"""
	Return the intervals of a chord quality, falling back to a major seventh.
	"""

	if name not in CHORD_INTERVALS:
		logger.warning(f"Unknown chord quality '{name}', using '{DEFAULT_CHORD}'")
		name = DEFAULT_CHORD

	return list(CHORD_INTERVALS[name])


def scale_degree_pitch (base_note: int, scale: typing.Sequence[int], index: int) -> int:

	"""Return the pitch of the ``index``-th scale step above ``base_note``.

	Indices past the end of the scale climb into higher octaves, so index
	``len(scale)`` is the root an octave up.

	Parameters:
		base_note: MIDI note number of the root.
		scale: Semitone intervals of the scale (e.g. ``(0, 2, 4, 7, 9)``).
		index: Zero-based step count above the root.

	Example:
		```python
		scale_degree_pitch(48, (0, 2, 4, 7, 9), 6)  # → 62 (D one octave up)
		```
	"""

	if not scale:
		return base_note

	octave, degree = divmod(index, len(scale))

	return base_note + scale[degree] + octave * 12
