"""Chord name lookup and pitch class tables.

This is the default chord lookup used by the pitch resolver. A chord name is
a root, a quality suffix, and an optional ``-<octave>`` (default 4)::

    lookup_chord("CM")       # ['C4', 'E4', 'G4']
    lookup_chord("Am7-3")    # ['A3', 'C4', 'E4', 'G4']
    lookup_chord("Ebsus4")   # ['Eb4', 'Ab4', 'Bb4']
    lookup_chord("Cwhat")    # None

Module-level constants:
- `NOTE_NAME_TO_PC`: Maps note names (e.g., `"C"`, `"F#"`, `"Bb"`) to pitch classes (0-11)
- `PC_TO_NOTE_NAME` / `PC_TO_FLAT_NOTE_NAME`: Map pitch classes to sharp or flat spellings
- `CHORD_INTERVALS`: Maps chord quality names to interval lists (semitones from root)
- `CHORD_ALIASES`: Maps the suffixes accepted in chord names to chord qualities
"""

import re
import typing


NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"C#": 1,
	"Db": 1,
	"D": 2,
	"D#": 3,
	"Eb": 3,
	"E": 4,
	"F": 5,
	"F#": 6,
	"Gb": 6,
	"G": 7,
	"G#": 8,
	"Ab": 8,
	"A": 9,
	"A#": 10,
	"Bb": 10,
	"B": 11,
}

PC_TO_NOTE_NAME: typing.List[str] = [
	"C",
	"C#",
	"D",
	"D#",
	"E",
	"F",
	"F#",
	"G",
	"G#",
	"A",
	"A#",
	"B",
]

PC_TO_FLAT_NOTE_NAME: typing.List[str] = [
	"C",
	"Db",
	"D",
	"Eb",
	"E",
	"F",
	"Gb",
	"G",
	"Ab",
	"A",
	"Bb",
	"B",
]


CHORD_INTERVALS: typing.Dict[str, typing.List[int]] = {
	"major": [0, 4, 7],
	"minor": [0, 3, 7],
	"diminished": [0, 3, 6],
	"augmented": [0, 4, 8],
	"dominant_7th": [0, 4, 7, 10],
	"major_7th": [0, 4, 7, 11],
	"minor_7th": [0, 3, 7, 10],
	"minor_major_7th": [0, 3, 7, 11],
	"half_diminished_7th": [0, 3, 6, 10],
	"diminished_7th": [0, 3, 6, 9],
	"major_6th": [0, 4, 7, 9],
	"minor_6th": [0, 3, 7, 9],
	"dominant_9th": [0, 4, 7, 10, 14],
	"major_9th": [0, 4, 7, 11, 14],
	"minor_9th": [0, 3, 7, 10, 14],
	"sus2": [0, 2, 7],
	"sus4": [0, 5, 7],
	"power_chord": [0, 7],
}

CHORD_ALIASES: typing.Dict[str, str] = {
	"": "major",
	"M": "major",
	"maj": "major",
	"m": "minor",
	"min": "minor",
	"dim": "diminished",
	"o": "diminished",
	"aug": "augmented",
	"+": "augmented",
	"7": "dominant_7th",
	"dom7": "dominant_7th",
	"M7": "major_7th",
	"maj7": "major_7th",
	"m7": "minor_7th",
	"min7": "minor_7th",
	"mM7": "minor_major_7th",
	"m7b5": "half_diminished_7th",
	"dim7": "diminished_7th",
	"o7": "diminished_7th",
	"6": "major_6th",
	"M6": "major_6th",
	"m6": "minor_6th",
	"9": "dominant_9th",
	"M9": "major_9th",
	"maj9": "major_9th",
	"m9": "minor_9th",
	"sus2": "sus2",
	"sus4": "sus4",
	"5": "power_chord",
}

DEFAULT_OCTAVE = 4

_CHORD_NAME = re.compile(r"^([A-G][#b]?)(.*?)(?:-(\d))?$")


def pc_to_note_name (pc: int, prefer_flats: bool = False) -> str:

	"""Return the name of pitch class *pc* using sharps (or flats)."""

	names = PC_TO_FLAT_NOTE_NAME if prefer_flats else PC_TO_NOTE_NAME

	return names[pc % 12]


def lookup_chord (name: str) -> typing.Optional[typing.List[str]]:

	"""Return the note names of chord *name*, or ``None`` if it is not a chord.

	Parameters:
		name: ``<Root><quality>[-<octave>]``, e.g. ``"CM"``, ``"F#m7-3"``,
			``"Bbmaj7"``. The root is capitalised, the quality is one of
			``CHORD_ALIASES`` and the octave (0-9) defaults to 4.

	Returns:
		Note names in ascending order, spelled with flats when the root is.

	Example:
		```python
		lookup_chord("Dm-5")   # ['D5', 'F5', 'A5']
		```
	"""

	match = _CHORD_NAME.match(name)

	if match is None:
		return None

	root, suffix, octave = match.groups()

	if root not in NOTE_NAME_TO_PC or suffix not in CHORD_ALIASES:
		return None

	intervals = CHORD_INTERVALS[CHORD_ALIASES[suffix]]
	root_midi = (int(octave) if octave is not None else DEFAULT_OCTAVE) * 12 + 12 + NOTE_NAME_TO_PC[root]
	prefer_flats = len(root) == 2 and root.endswith("b")

	notes = []

	for interval in intervals:
		midi = root_midi + interval
		notes.append(f"{pc_to_note_name(midi, prefer_flats)}{midi // 12 - 1}")

	return notes
