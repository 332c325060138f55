"""Constants for automatone.

This package contains three sets of constants:

- ``automatone.constants.velocity`` - Note velocity bounds and emphasis values
- ``automatone.constants.timing`` - Step spacing and note lengths in milliseconds
- ``automatone.constants.drums`` - General MIDI percussion notes used by the rhythm generators
"""
