"""General MIDI Level 1 drum notes used by the rhythm generators.

Only the handful of voices the Euclidean generator distributes are named
here. ``GM_DRUM_MAP`` maps the human-readable names to note numbers.
"""

import typing


KICK = 36
SIDE_STICK = 37
SNARE = 38
HAND_CLAP = 39
HI_HAT_CLOSED = 42
LOW_TOM = 45
HI_HAT_OPEN = 46
HIGH_TOM = 48
RIDE = 51


GM_DRUM_MAP: typing.Dict[str, int] = {
	"kick": KICK,
	"side_stick": SIDE_STICK,
	"snare": SNARE,
	"clap": HAND_CLAP,
	"hihat": HI_HAT_CLOSED,
	"tom_low": LOW_TOM,
	"open_hat": HI_HAT_OPEN,
	"tom_high": HIGH_TOM,
	"ride": RIDE,
}
