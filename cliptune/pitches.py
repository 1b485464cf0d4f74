"""Pitch and chord resolution.

Every entry of a clip's ``notes`` (and ``random_notes``) is resolved once,
at compile time, into an ordered list of note names:

- a note name (``"C4"``, ``"f#3"``, ``"Bb2"``) becomes ``["C4"]``;
- a list of note names is a chord voicing and is checked note by note;
- anything else is a chord name, handed to the chord lookup
  (``cliptune.chords.lookup_chord`` unless another is supplied).

Note names use C4 = 60 (Middle C).
"""

import re
import typing

import cliptune.chords
import cliptune.errors


ChordLookup = typing.Callable[[str], typing.Optional[typing.Sequence[str]]]

PitchToken = typing.Union[str, typing.Sequence[str]]

_NOTE_NAME = re.compile(r"^[a-gA-G](?:#|b)?\d$")

_LETTER_TO_PC: typing.Dict[str, int] = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}


def is_note (value: typing.Any) -> bool:

	"""Return True if *value* is a note name such as ``"C4"`` or ``"Eb3"``."""

	return isinstance(value, str) and _NOTE_NAME.match(value) is not None


def note_to_midi (name: str) -> int:

	"""
	Convert a note name to a MIDI note number (C4 = 60).

	Raises:
		ValueError: if *name* is not a note name.
	"""

	if not is_note(name):
		raise ValueError(f"Not a note name: {name!r}")

	pc = _LETTER_TO_PC[name[0].upper()]

	if name[1] == "#":
		pc += 1
	elif name[1] == "b":
		pc -= 1

	octave = int(name[-1])

	return (octave + 1) * 12 + pc


def midi_to_note (number: int, prefer_flats: bool = False) -> str:

	"""Convert a MIDI note number to a note name, e.g. ``61 -> "C#4"``."""

	return f"{cliptune.chords.pc_to_note_name(number, prefer_flats)}{number // 12 - 1}"


def split_notes (notes: str) -> typing.List[str]:

	"""Split a space separated note string, ignoring repeated whitespace."""

	return notes.split()


def resolve_pitch (token: PitchToken, chord_lookup: typing.Optional[ChordLookup] = None) -> typing.List[str]:

	"""
	Resolve one ``notes`` entry into an ordered list of note names.

	Parameters:
		token: A note name, a list of note names, or a chord name.
		chord_lookup: Callable mapping a chord name to note names (or
			``None`` when unknown). Defaults to ``cliptune.chords.lookup_chord``.

	Returns:
		At least one note name.

	Raises:
		InvalidPitchInArray: when a list contains something other than note names.
		UnknownChord: when the chord lookup finds nothing.

	Example:
		```python
		resolve_pitch("C4")            # ['C4']
		resolve_pitch(["C4", "E4"])    # ['C4', 'E4']
		resolve_pitch("CM")            # ['C4', 'E4', 'G4']
		```
	"""

	if is_note(token):
		return [typing.cast(str, token)]

	if isinstance(token, (list, tuple)):

		for pitch in token:
			if not is_note(pitch):
				raise cliptune.errors.InvalidPitchInArray(pitch, token)

		return list(token)

	if chord_lookup is None:
		chord_lookup = cliptune.chords.lookup_chord

	chord = chord_lookup(token) if isinstance(token, str) else None

	if not chord:
		raise cliptune.errors.UnknownChord(str(token))

	return list(chord)


def resolve_pitch_source (source: typing.Union[str, typing.Sequence[PitchToken], None], chord_lookup: typing.Optional[ChordLookup] = None) -> typing.List[typing.List[str]]:

	"""
	Resolve a whole ``notes`` (or ``random_notes``) value.

	A string is split on whitespace first, so ``"C4 CM-5 E4"`` is three entries.
	``None`` resolves to an empty list.
	"""

	if source is None:
		return []

	if isinstance(source, str):
		source = split_notes(source)

	return [resolve_pitch(token, chord_lookup) for token in source]
