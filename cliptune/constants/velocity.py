"""Velocity constants.

Velocity is the MIDI attack strength (0-127). ``DEFAULT_AMP`` is the level of
an unaccented, unshaped step and the upper bound for accents and sizzles;
``DEFAULT_ACCENT_LOW`` is the lower bound.
"""

DEFAULT_AMP = 100
DEFAULT_ACCENT_LOW = 70

# MIDI standard range
MIN_VELOCITY = 0
MAX_VELOCITY = 127
