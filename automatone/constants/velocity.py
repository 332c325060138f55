"""Note velocity constants.

Velocity is the attack strength of a note event (1-127, MIDI style). Every
generator clamps its output to ``MIN_VELOCITY``..``MAX_VELOCITY``.
"""

# Primary defaults
DEFAULT_VELOCITY = 80           # Cells and notes with no mapping strategy
BIRTH_VELOCITY = 110            # Newly born cells when births are emphasized

# Accent boost applied by the rhythmic filter
ACCENT_MULTIPLIER = 1.3

# Valid range for emitted note events
MIN_VELOCITY = 1
MAX_VELOCITY = 127


def clamp (velocity: float) -> int:

	"""Truncate a velocity to an integer and clamp it into the valid range."""

	return max(MIN_VELOCITY, min(MAX_VELOCITY, int(velocity)))
