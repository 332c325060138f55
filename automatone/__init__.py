"""
Automatone - generative note sequences from cellular automata and friends.

An automaton is seeded, evolved and scored, and its live cells are mapped
to notes: columns become scale degrees, rows or generations become time,
and births and deaths become accents. The same step format is produced by
a family of sibling generators, so any of them can feed the same MIDI
exporter or visual front end:

- **Cellular.** Elementary (Wolfram rules 0-255) and Conway life-like
  automata, with history-based complexity and entropy scores driving an
  optional rhythmic filter.
- **Euclidean.** Four-voice drum patterns from Bjorklund's algorithm.
- **Markov.** Melodies, chord lines and rhythms from a learned chain.
- **Waveshaper.** Folded waveforms sampled into melodic patterns.
- **Sequential.** Fibonacci, pi, prime and layered-modulo sequences.
- **Harmony.** Roman-numeral progressions with jazz voicings.
- **Fractal.** Self-similar melodies by midpoint displacement.

Minimal example:

```python
import automatone

engine = automatone.AlgorithmEngine()
steps = engine.generate("cellular", {"rule": 90, "width": 16, "iterations": 16}, seed=1)
automatone.write_midi_file(steps, "rule90.mid", bpm=120)
```

Every generator is deterministic for a given seed and never raises for bad
parameters: invalid values fall back to their defaults with a logged warning.
"""

import automatone.cellular.generator
import automatone.config
import automatone.engine
import automatone.events
import automatone.midi_export


AlgorithmEngine = automatone.engine.AlgorithmEngine
CellularConfig = automatone.config.CellularConfig
CellularGenerator = automatone.cellular.generator.CellularGenerator
Step = automatone.events.Step
NoteEvent = automatone.events.NoteEvent
write_midi_file = automatone.midi_export.write_midi_file
