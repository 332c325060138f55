import pathlib

import mido
import pytest

import automatone.events
import automatone.midi_export


def two_steps () -> list:

	return [
		automatone.events.Step(step=0, time=0, notes=[automatone.events.NoteEvent(pitch=60, velocity=100)]),
		automatone.events.Step(step=1, time=250, notes=[automatone.events.NoteEvent(pitch=64, velocity=90)]),
	]


def test_ms_to_ticks () -> None:

	assert automatone.midi_export.ms_to_ticks(500, 120) == 480
	assert automatone.midi_export.ms_to_ticks(250, 120) == 240
	assert automatone.midi_export.ms_to_ticks(100, 120) == 96
	assert automatone.midi_export.ms_to_ticks(1000, 60) == 480


def test_messages_use_delta_times () -> None:

	messages = automatone.midi_export.steps_to_messages(two_steps())

	assert [m.type for m in messages] == ["note_on", "note_off", "note_on", "note_off"]
	assert [m.time for m in messages] == [0, 96, 144, 96]
	assert [m.note for m in messages] == [60, 60, 64, 64]


def test_note_off_precedes_note_on_at_the_same_tick () -> None:

	steps = [
		automatone.events.Step(step=0, time=0, notes=[automatone.events.NoteEvent(pitch=60, velocity=100, duration=250)]),
		automatone.events.Step(step=1, time=250, notes=[automatone.events.NoteEvent(pitch=60, velocity=100, duration=250)]),
	]

	messages = automatone.midi_export.steps_to_messages(steps)

	assert [(m.type, m.time) for m in messages] == [("note_on", 0), ("note_off", 240), ("note_on", 0), ("note_off", 240)]


def test_rests_and_out_of_range_pitches_are_skipped () -> None:

	steps = [
		automatone.events.Step(step=0, time=0, notes=[automatone.events.NoteEvent(pitch=130, velocity=100)]),
		automatone.events.Step(step=1, time=250),
		automatone.events.Step(step=2, time=500, notes=[automatone.events.NoteEvent(pitch=48, velocity=70)]),
	]

	messages = automatone.midi_export.steps_to_messages(steps)

	assert [m.note for m in messages] == [48, 48]
	assert messages[0].time == 480


def test_channel_is_applied () -> None:

	messages = automatone.midi_export.steps_to_messages(two_steps(), channel=9)

	assert {m.channel for m in messages} == {9}


def test_build_midi_file () -> None:

	mid = automatone.midi_export.build_midi_file(two_steps(), bpm=90)

	assert mid.type == 1
	assert mid.ticks_per_beat == 480
	assert len(mid.tracks) == 1

	track = mid.tracks[0]

	assert track[0].type == "set_tempo"
	assert track[0].tempo == mido.bpm2tempo(90)
	assert track[-1].type == "end_of_track"


def test_write_and_read_back (tmp_path: pathlib.Path) -> None:

	filename = str(tmp_path / "sequence.mid")

	assert automatone.midi_export.write_midi_file(two_steps(), filename) is True

	mid = mido.MidiFile(filename)
	note_ons = [m for m in mid.tracks[0] if m.type == "note_on"]

	assert mid.ticks_per_beat == 480
	assert [m.note for m in note_ons] == [60, 64]
	assert [m.velocity for m in note_ons] == [100, 90]


def test_write_failure_returns_false (tmp_path: pathlib.Path) -> None:

	filename = str(tmp_path / "missing" / "sequence.mid")

	assert automatone.midi_export.write_midi_file(two_steps(), filename) is False
