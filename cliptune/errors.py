"""Exceptions raised while compiling clips and arrangements.

Every error raised by the engine derives from ``CliptuneError`` so callers can
catch the whole family at once. The engine only reports the local cause;
batch layers (``Channel``, ``Session``, ``compile_arrangement()``) wrap the
cause in ``ClipCompileError`` or ``ArrangementError`` with positional context.
"""

import typing


class CliptuneError (Exception):

	"""Base class for all cliptune errors."""


class InvalidPatternCharacter (CliptuneError):

	"""
	A pattern contains a character outside its alphabet.
	"""

	def __init__ (self, char: str, index: int, pattern: str, allowed: str = "x-_R[]") -> None:

		self.char = char
		self.index = index
		self.pattern = pattern

		super().__init__(
			f"Pattern can only comprise {' '.join(allowed)}, found {char!r} at index {index} in {pattern!r}"
		)


class UnbalancedGroup (CliptuneError):

	"""
	A pattern has a ``[`` without a matching ``]`` (or the reverse).
	"""

	def __init__ (self, index: int, pattern: str, message: str) -> None:

		self.index = index
		self.pattern = pattern

		super().__init__(f"{message} at index {index} in {pattern!r}")


class InvalidPitchInArray (CliptuneError, TypeError):

	"""A chord given as a list contains something that is not a note name."""

	def __init__ (self, pitch: typing.Any, chord: typing.Sequence[typing.Any]) -> None:

		self.pitch = pitch
		self.chord = list(chord)

		super().__init__(f"Array must comprise valid notes, found {pitch!r} in {self.chord!r}")


class UnknownChord (CliptuneError):

	"""The chord lookup returned nothing for a chord name."""

	def __init__ (self, name: str) -> None:

		self.name = name

		super().__init__(f"Chord {name!r} not found")


class MissingSoundSource (CliptuneError):

	"""A clip was compiled without a backend capability."""


class EmptyPitchSource (CliptuneError):

	"""A clip has sounding steps but no pitches to give them."""


class ClipCompileError (CliptuneError):

	"""
	A clip inside a channel failed to compile.

	The original error is kept as ``cause`` (and chained as ``__cause__``).
	"""

	def __init__ (self, cause: Exception, channel_idx: typing.Any, channel_name: str, clip_number: int) -> None:

		self.cause = cause
		self.channel_idx = channel_idx
		self.channel_name = channel_name
		self.clip_number = clip_number

		super().__init__(f"{cause} in channel {channel_idx} {channel_name!r} clip {clip_number}")


class ArrangementError (CliptuneError):

	"""A channel pattern in an arrangement failed to compile."""

	def __init__ (self, cause: Exception, position: int, channel_idx: typing.Any) -> None:

		self.cause = cause
		self.position = position
		self.channel_idx = channel_idx

		super().__init__(f"{cause} in channel pattern {position} (channel {channel_idx})")
