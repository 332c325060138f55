"""Rule-based chord progressions.

A progression of roman numerals is realized in a key: each numeral's scale
degree gives the chord root, the chord quality is either fixed or chosen per
degree (``auto``), and a voicing rearranges the chord tones. Each chord lasts
four steps: the full chord on the first, root and fifth on the third.
"""

import dataclasses
import logging
import random
import typing

import automatone.config
import automatone.constants.timing
import automatone.events
import automatone.intervals


logger = logging.getLogger(__name__)

BEATS_PER_CHORD = 4
CHORD_VELOCITY = 90
ROOT_VELOCITY = 80
FIFTH_VELOCITY = 70

DEFAULT_KEY = "C"

KEY_ROOTS: typing.Dict[str, int] = {
	"C": 60,
	"C#": 61, "Db": 61,
	"D": 62,
	"D#": 63, "Eb": 63,
	"E": 64,
	"F": 65,
	"F#": 66, "Gb": 66,
	"G": 67,
	"G#": 68, "Ab": 68,
	"A": 69,
	"A#": 70, "Bb": 70,
	"B": 71,
}

ROMAN_DEGREES: typing.Dict[str, int] = {"I": 0, "ii": 1, "iii": 2, "IV": 3, "V": 4, "vi": 5, "vii": 6}

# Seventh-chord quality of each degree
MAJOR_DEGREE_QUALITIES: typing.Tuple[str, ...] = ("maj7", "min7", "min7", "maj7", "dom7", "min7", "half-dim7")
MINOR_DEGREE_QUALITIES: typing.Tuple[str, ...] = ("min7", "half-dim7", "maj7", "min7", "min7", "maj7", "dom7")


class Progression (automatone.config.Choice):

	"""Named chord progressions."""

	II_V_I = "ii-V-I"
	I_IV_V = "I-IV-V"
	I_V_VI_IV = "I-V-vi-IV"
	VI_IV_I_V = "vi-IV-I-V"
	I_VI_IV_V = "I-vi-IV-V"
	CIRCLE = "circle"
	CANON = "canon"


PROGRESSIONS: typing.Dict[Progression, typing.Tuple[str, ...]] = {
	Progression.II_V_I: ("ii", "V", "I"),
	Progression.I_IV_V: ("I", "IV", "V"),
	Progression.I_V_VI_IV: ("I", "V", "vi", "IV"),
	Progression.VI_IV_I_V: ("vi", "IV", "I", "V"),
	Progression.I_VI_IV_V: ("I", "vi", "IV", "V"),
	Progression.CIRCLE: ("I", "IV", "vii", "iii", "vi", "ii", "V", "I"),
	Progression.CANON: ("I", "V", "vi", "iii", "IV", "I", "IV", "V"),
}


class Voicing (automatone.config.Choice):

	"""How chord tones are arranged."""

	CLOSE = "close"
	DROP2 = "drop2"
	DROP3 = "drop3"
	SPREAD = "spread"
	SHELL = "shell"


@dataclasses.dataclass(frozen=True)
class HarmonyConfig:

	"""
	Parameters for the harmony generator.

	Attributes:
		progression: Chord progression to realize.
		key: Key center, e.g. ``C``, ``Eb`` or ``Am`` (a trailing ``m`` means minor).
		chord: Chord quality from ``automatone.intervals.CHORD_INTERVALS``, or ``auto``.
		voicing: Arrangement of the chord tones.
		note_interval: Milliseconds between steps.
	"""

	progression: Progression = Progression.II_V_I
	key: str = DEFAULT_KEY
	chord: str = "maj7"
	voicing: Voicing = Voicing.DROP2
	note_interval: int = automatone.constants.timing.DEFAULT_NOTE_INTERVAL_MS

	@classmethod
	def from_dict (cls, params: typing.Optional[typing.Mapping[str, typing.Any]] = None) -> "HarmonyConfig":

		"""Build a config from raw parameters, replacing anything invalid with its default."""

		p = automatone.config.normalize_keys(params)
		defaults = cls()

		key = p.get("key", p.get("keycenter", defaults.key))
		if not isinstance(key, str) or key_root(key) is None:
			logger.warning(f"Unknown key '{key}', using '{defaults.key}'")
			key = defaults.key

		chord = p.get("chord", defaults.chord)
		if chord != "auto" and chord not in automatone.intervals.CHORD_INTERVALS:
			logger.warning(f"Unknown chord quality '{chord}', using '{defaults.chord}'")
			chord = defaults.chord

		return cls(
			progression = Progression.resolve(p.get("progression"), defaults.progression),
			key = key,
			chord = chord,
			voicing = Voicing.resolve(p.get("voicing"), defaults.voicing),
			note_interval = automatone.config.read_int(p, "note_interval", defaults.note_interval, 1, 60000),
		)

	@property
	def is_minor (self) -> bool:

		return self.key.endswith("m")


def key_root (key: str) -> typing.Optional[int]:

	"""MIDI root of a key name such as ``F#`` or ``Bbm``; ``None`` when unknown."""

	if key.endswith("m"):
		key = key[:-1]

	return KEY_ROOTS.get(key)


def voice_chord (notes: typing.Sequence[int], voicing: Voicing) -> typing.List[int]:

	"""Rearrange close-position chord tones (root first) into ``voicing``.

	Drop voicings and the shell voicing need at least four tones and leave
	triads unchanged.

	Example:
		```python
		voice_chord([60, 64, 67, 71], Voicing.DROP2)   # [55, 60, 64, 71]
		voice_chord([60, 64, 67, 71], Voicing.SHELL)   # [60, 64, 71]
		```
	"""

	voiced = list(notes)

	if voicing in (Voicing.DROP2, Voicing.DROP3) and len(voiced) >= 4:
		dropped = voiced.pop(-2 if voicing == Voicing.DROP2 else -3)
		voiced.insert(0, dropped - 12)

	elif voicing == Voicing.SPREAD and len(voiced) >= 3:
		voiced[1] += 12
		if len(voiced) >= 4:
			voiced[3] += 12

	elif voicing == Voicing.SHELL and len(voiced) >= 4:
		voiced = [voiced[0], voiced[1], voiced[3]]

	return voiced


class HarmonyGenerator:

	"""
	Realizes a chord progression as a step sequence.
	"""

	def __init__ (self, config: typing.Optional[HarmonyConfig] = None, rng: typing.Optional[random.Random] = None) -> None:

		# Progressions are fully determined; rng is accepted for a uniform interface.
		self.config = config or HarmonyConfig()
		self._rng = rng

	def chords (self) -> typing.List[typing.List[int]]:

		"""Return the voiced chord for each numeral of the progression."""

		c = self.config
		scale = automatone.intervals.get_scale("minor" if c.is_minor else "major")
		qualities = MINOR_DEGREE_QUALITIES if c.is_minor else MAJOR_DEGREE_QUALITIES
		tonic = key_root(c.key) or KEY_ROOTS[DEFAULT_KEY]

		voiced: typing.List[typing.List[int]] = []

		for numeral in PROGRESSIONS[c.progression]:

			degree = ROMAN_DEGREES[numeral]
			root = tonic + scale[degree]
			quality = qualities[degree] if c.chord == "auto" else c.chord
			notes = [root + interval for interval in automatone.intervals.get_chord_intervals(quality)]

			voiced.append(voice_chord(notes, c.voicing))

		return voiced

	def generate (self) -> typing.List[automatone.events.Step]:

		"""Return four steps per chord of the progression."""

		sequence: typing.List[automatone.events.Step] = []

		for chord_index, chord in enumerate(self.chords()):

			for beat in range(BEATS_PER_CHORD):

				index = chord_index * BEATS_PER_CHORD + beat
				step = automatone.events.Step(step=index, time=index * self.config.note_interval)

				if beat == 0:
					step.notes.extend(
						automatone.events.NoteEvent(pitch=pitch, velocity=CHORD_VELOCITY, column=index, row=i, state="active")
						for i, pitch in enumerate(chord)
					)

				elif beat == 2:
					step.notes.append(automatone.events.NoteEvent(pitch=chord[0], velocity=ROOT_VELOCITY, column=index, row=0, state="active"))
					if len(chord) > 2:
						step.notes.append(automatone.events.NoteEvent(pitch=chord[2], velocity=FIFTH_VELOCITY, column=index, row=2, state="active"))

				sequence.append(step)

		logger.debug(f"Harmony ({self.config.progression.value} in {self.config.key}): {len(sequence)} steps")

		return sequence
