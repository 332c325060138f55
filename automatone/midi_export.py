"""Render step sequences to standard MIDI files.

Step times and note durations are in milliseconds; they are converted to
ticks at a fixed tempo (480 ticks per beat), so a file plays back exactly as
the sequence was timed. Notes without a duration last
``DEFAULT_NOTE_DURATION_MS``.
"""

import logging
import typing

import mido

import automatone.constants.timing
import automatone.events


logger = logging.getLogger(__name__)


def ms_to_ticks (ms: float, bpm: float, ticks_per_beat: int = automatone.constants.timing.MIDI_TICKS_PER_BEAT) -> int:

	"""Convert milliseconds to MIDI ticks at ``bpm``."""

	return int(round(ms / 60000.0 * bpm * ticks_per_beat))


def steps_to_messages (
	steps: typing.Sequence[automatone.events.Step],
	bpm: float = automatone.constants.timing.DEFAULT_BPM,
	channel: int = 0,
	ticks_per_beat: int = automatone.constants.timing.MIDI_TICKS_PER_BEAT
) -> typing.List[mido.Message]:

	"""Turn a sequence into note on/off messages with delta times in ticks.

	Notes whose pitch is outside 0-127 are skipped. At equal times a note-off
	comes before a note-on, so a repeated pitch retriggers cleanly.
	"""

	# (absolute tick, 0 = off / 1 = on, message)
	timed: typing.List[typing.Tuple[int, int, mido.Message]] = []

	for step in steps:

		start = ms_to_ticks(step.time, bpm, ticks_per_beat)

		for note in step.notes:

			if not 0 <= note.pitch <= 127:
				logger.warning(f"Skipping out-of-range pitch {note.pitch} at step {step.step}")
				continue

			duration = note.duration if note.duration is not None else automatone.constants.timing.DEFAULT_NOTE_DURATION_MS
			end = start + max(1, ms_to_ticks(duration, bpm, ticks_per_beat))

			timed.append((start, 1, mido.Message("note_on", channel=channel, note=note.pitch, velocity=note.velocity)))
			timed.append((end, 0, mido.Message("note_off", channel=channel, note=note.pitch, velocity=0)))

	timed.sort(key=lambda item: (item[0], item[1]))

	messages: typing.List[mido.Message] = []
	last_tick = 0

	for tick, _, message in timed:
		messages.append(message.copy(time=max(0, tick - last_tick)))
		last_tick = tick

	return messages


def build_midi_file (
	steps: typing.Sequence[automatone.events.Step],
	bpm: float = automatone.constants.timing.DEFAULT_BPM,
	channel: int = 0
) -> mido.MidiFile:

	"""Build a type 1 MIDI file with a single track holding tempo and notes."""

	mid = mido.MidiFile(type=1)
	mid.ticks_per_beat = automatone.constants.timing.MIDI_TICKS_PER_BEAT

	track = mido.MidiTrack()
	mid.tracks.append(track)

	track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(bpm), time=0))
	track.extend(steps_to_messages(steps, bpm, channel, mid.ticks_per_beat))
	track.append(mido.MetaMessage("end_of_track", time=0))

	return mid


def write_midi_file (
	steps: typing.Sequence[automatone.events.Step],
	filename: str,
	bpm: float = automatone.constants.timing.DEFAULT_BPM,
	channel: int = 0
) -> bool:

	"""Save a sequence to ``filename``. Returns False (and logs) if the file can't be written."""

	mid = build_midi_file(steps, bpm, channel)

	logger.info(f"Saving MIDI file ({automatone.events.count_notes(steps)} notes) to {filename}...")

	try:
		mid.save(filename)
	except Exception as e:
		logger.error(f"Failed to save MIDI file: {e}")
		return False

	logger.info(f"Saved {filename}")

	return True
