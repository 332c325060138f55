"""Cellular-automaton generation engine.

- :mod:`automatone.cellular.grid` - grid state and bounded history
- :mod:`automatone.cellular.rules` - elementary and life-like evolution
- :mod:`automatone.cellular.analysis` - complexity and entropy scores
- :mod:`automatone.cellular.mapper` - cells to note events
- :mod:`automatone.cellular.generator` - the full pipeline and rhythmic filter
"""
