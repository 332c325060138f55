import automatone.events


def test_note_to_dict_omits_unset_fields () -> None:

	note = automatone.events.NoteEvent(pitch=60, velocity=96)

	assert note.to_dict() == {"pitch": 60, "velocity": 96}


def test_note_to_dict_with_metadata () -> None:

	note = automatone.events.NoteEvent(pitch=62, velocity=110, duration=100, column=4, row=2, state="birth")

	assert note.to_dict() == {"pitch": 62, "velocity": 110, "duration": 100, "column": 4, "row": 2, "state": "birth"}


def test_zero_valued_metadata_is_kept () -> None:

	note = automatone.events.NoteEvent(pitch=48, velocity=80, column=0, row=0)

	assert note.to_dict()["column"] == 0
	assert note.to_dict()["row"] == 0


def test_step_shape () -> None:

	rest = automatone.events.Step(step=1, time=250)
	step = automatone.events.Step(step=0, time=0, notes=[automatone.events.NoteEvent(pitch=60, velocity=96)])

	assert rest.is_rest
	assert not step.is_rest
	assert automatone.events.sequence_to_dicts([step, rest]) == [
		{"step": 0, "time": 0, "notes": [{"pitch": 60, "velocity": 96}]},
		{"step": 1, "time": 250, "notes": []},
	]


def test_steps_do_not_share_note_lists () -> None:

	a = automatone.events.Step(step=0, time=0)
	b = automatone.events.Step(step=1, time=250)
	a.notes.append(automatone.events.NoteEvent(pitch=60, velocity=80))

	assert b.is_rest


def test_cell_change_to_dict () -> None:

	change = automatone.events.CellChange(3, 4, automatone.events.ChangeType.DEATH, 2)

	assert change.to_dict() == {"x": 3, "y": 4, "type": "death", "generation": 2}


def test_count_notes () -> None:

	steps = [
		automatone.events.Step(step=0, time=0, notes=[automatone.events.NoteEvent(60, 80), automatone.events.NoteEvent(64, 80)]),
		automatone.events.Step(step=1, time=250),
	]

	assert automatone.events.count_notes(steps) == 2
