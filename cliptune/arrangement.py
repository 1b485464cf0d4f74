"""Song-level arrangement of clips per channel.

Each channel gets a string saying which of its clips plays at each step:

- ``0``-``9``: play clip *n* (only a channel's first ten clips are addressable).
- ``-``: silence for one step.
- ``_``: extend whatever came before by one step instead of re-triggering.

Example:
	```python
	compile_channel_pattern("0__1-")
	# [PlayClip(0), EXTEND_PREVIOUS, EXTEND_PREVIOUS, PlayClip(1), SILENCE]

	timeline(compile_channel_pattern("0__1-"), clip_duration=4)
	# [ArrangementSpan(clip_index=0, start=0, length=12),
	#  ArrangementSpan(clip_index=1, start=12, length=4)]
	```

Channels are compiled independently. Channels that share an index are meant
to be triggered together; that is up to whoever plays the arrangement.
"""

import dataclasses
import logging
import typing

import cliptune.errors

logger = logging.getLogger(__name__)

ARRANGEMENT_ALPHABET = "0123456789-_"


@dataclasses.dataclass(frozen=True)
class PlayClip:

	"""Start clip ``index`` of the channel."""

	index: int


@dataclasses.dataclass(frozen=True)
class Silence:

	"""Play nothing for one step."""


@dataclasses.dataclass(frozen=True)
class ExtendPrevious:

	"""Keep the previous slot going for one more step."""


ArrangementSlot = typing.Union[PlayClip, Silence, ExtendPrevious]

SILENCE = Silence()
EXTEND_PREVIOUS = ExtendPrevious()


@dataclasses.dataclass(frozen=True)
class ChannelPattern:

	"""An arrangement string for every channel with index ``channel_idx``."""

	channel_idx: typing.Any
	pattern: str


@dataclasses.dataclass(frozen=True)
class ArrangementSpan:

	"""A clip playing from ``start`` for ``length``, in the timeline's units."""

	clip_index: int
	start: float
	length: float


def compile_channel_pattern (pattern: str) -> typing.List[ArrangementSlot]:

	"""
	Compile one channel's arrangement string into slots.

	A ``_`` with nothing before it is treated as silence.

	Raises:
		InvalidPatternCharacter: for characters other than digits, ``-`` and ``_``.
	"""

	slots: typing.List[ArrangementSlot] = []

	for index, char in enumerate(pattern):

		if char in "0123456789":
			slots.append(PlayClip(int(char)))

		elif char == "-":
			slots.append(SILENCE)

		elif char == "_":
			if slots:
				slots.append(EXTEND_PREVIOUS)
			else:
				logger.debug(f"Arrangement {pattern!r} starts with '_' - treated as silence")
				slots.append(SILENCE)

		else:
			raise cliptune.errors.InvalidPatternCharacter(char, index, pattern, allowed=ARRANGEMENT_ALPHABET)

	return slots


def compile_arrangement (channel_patterns: typing.Sequence[ChannelPattern]) -> typing.List[typing.Tuple[typing.Any, typing.List[ArrangementSlot]]]:

	"""
	Compile every channel pattern, keeping their order.

	Returns:
		``(channel_idx, slots)`` pairs, one per channel pattern.

	Raises:
		ArrangementError: wrapping the first failure with its position and channel index.
	"""

	compiled = []

	for position, channel_pattern in enumerate(channel_patterns):

		try:
			slots = compile_channel_pattern(channel_pattern.pattern)
		except cliptune.errors.CliptuneError as exc:
			raise cliptune.errors.ArrangementError(exc, position, channel_pattern.channel_idx) from exc

		compiled.append((channel_pattern.channel_idx, slots))

	return compiled


def timeline (slots: typing.Sequence[ArrangementSlot], clip_duration: float = 1) -> typing.List[ArrangementSpan]:

	"""
	Merge slots into spans of continuous clip playback.

	A ``PlayClip`` starts a span; each ``ExtendPrevious`` after it adds
	``clip_duration``. An extension after a silence extends the silence.
	"""

	spans: typing.List[ArrangementSpan] = []
	current: typing.Optional[ArrangementSpan] = None

	for i, slot in enumerate(slots):

		start = i * clip_duration

		if isinstance(slot, PlayClip):
			if current is not None:
				spans.append(current)
			current = ArrangementSpan(clip_index=slot.index, start=start, length=clip_duration)

		elif isinstance(slot, ExtendPrevious):
			if current is not None:
				current = dataclasses.replace(current, length=current.length + clip_duration)

		else:
			if current is not None:
				spans.append(current)
			current = None

	if current is not None:
		spans.append(current)

	return spans
