"""Beat-based duration constants and subdivision names.

All values are in **beats**, where 1.0 = one quarter note. Clip durations,
onsets and render windows are all expressed in beats; convert at the edge
with ``cliptune.durations.beats_to_seconds()`` or ``beats_to_ticks()``.

Subdivision names follow the usual ``<n>n`` (note value) and ``<n>m``
(measures of 4/4) convention::

    import cliptune.constants.durations as dur

    dur.SUBDIVISIONS["4n"]     # 1.0 - quarter note
    dur.SUBDIVISIONS["16n"]    # 0.25
    dur.SUBDIVISIONS["2m"]     # 8.0 - two bars
"""

import typing

THIRTYSECOND = 0.125
SIXTEENTH = 0.25
EIGHTH = 0.5
QUARTER = 1.0
HALF = 2.0
WHOLE = 4.0
BAR = 4.0

SUBDIVISIONS: typing.Dict[str, float] = {
	"1m": BAR,
	"2m": 2 * BAR,
	"3m": 3 * BAR,
	"4m": 4 * BAR,
	"8m": 8 * BAR,
	"1n": WHOLE,
	"2n": HALF,
	"4n": QUARTER,
	"8n": EIGHTH,
	"16n": SIXTEENTH,
	"32n": THIRTYSECOND,
	"2t": WHOLE / 3,
	"4t": HALF / 3,
	"8t": QUARTER / 3,
	"16t": EIGHTH / 3,
}

# Default unit for one ungrouped pattern character
DEFAULT_SUBDIVISION = "4n"

# A bar of 4/4 is 512 ticks
TICKS_PER_BEAT = 128

DEFAULT_BPM = 120.0
