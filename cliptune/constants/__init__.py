"""Constants for cliptune.

This package contains two sets of constants:

- ``cliptune.constants.durations`` - Subdivision names, beat durations and tick resolution
- ``cliptune.constants.velocity`` - Velocity defaults and MIDI range
"""
