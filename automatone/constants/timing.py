"""Step timing constants.

Generators place steps on a fixed grid measured in milliseconds. The front
end plays one step every ``DEFAULT_NOTE_INTERVAL_MS``; each note lasts
``DEFAULT_NOTE_DURATION_MS`` unless a generator says otherwise.
"""

DEFAULT_NOTE_INTERVAL_MS = 250
DEFAULT_NOTE_DURATION_MS = 100

# MIDI file export resolution
MIDI_TICKS_PER_BEAT = 480
DEFAULT_BPM = 120
