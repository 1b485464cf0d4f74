"""Duration allocation for parsed patterns.

Walks a pattern's token tree and gives every sounding step (``x`` or ``R``)
a length. An ungrouped step is one unit long; a group of *k* members gives
each member ``unit / k``, recursively, so nesting divides the unit
geometrically. A tie adds its own (current) unit to the most recent sounding
step.

Example:
	```python
	allocate_durations(parse("[xx]x"), unit=4)   # [2.0, 2.0, 4]
	allocate_durations(parse("x__"), unit=1)     # [3]
	```
"""

import dataclasses
import logging
import numbers
import typing

import cliptune.constants.durations
import cliptune.pattern_notation

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class SoundingStep:

	"""
	A hit or random hit with its onset and (tie-extended) duration.
	"""

	kind: cliptune.pattern_notation.PatternToken
	onset: float
	duration: float

	@property
	def is_random (self) -> bool:

		"""True for an ``R`` step."""

		return isinstance(self.kind, cliptune.pattern_notation.RandomHit)


def resolve_unit (subdiv: typing.Union[str, float, int, None]) -> float:

	"""
	Turn a subdivision into a length in beats.

	Parameters:
		subdiv: A subdivision name (``"4n"``, ``"16n"``, ``"1m"``...), a
			positive number of beats, or ``None`` for the default quarter note.

	Raises:
		ValueError: for unknown names or non-positive numbers.
	"""

	if subdiv is None:
		subdiv = cliptune.constants.durations.DEFAULT_SUBDIVISION

	if isinstance(subdiv, str):
		if subdiv not in cliptune.constants.durations.SUBDIVISIONS:
			available = ", ".join(cliptune.constants.durations.SUBDIVISIONS)
			raise ValueError(f"Unknown subdivision {subdiv!r}. Available: {available}")
		return cliptune.constants.durations.SUBDIVISIONS[subdiv]

	if isinstance(subdiv, bool) or not isinstance(subdiv, numbers.Real):
		raise ValueError(f"Subdivision must be a name or a number of beats, got {subdiv!r}")

	if subdiv <= 0:
		raise ValueError("Subdivision must be positive")

	return subdiv


def allocate_steps (tokens: typing.Sequence[cliptune.pattern_notation.PatternToken], unit: float) -> typing.List[SoundingStep]:

	"""
	Walk the token tree and return every sounding step with its onset and duration.

	Parameters:
		tokens: Top-level tokens from ``cliptune.pattern_notation.parse()``.
		unit: Length of one top-level step, in beats.

	Returns:
		One ``SoundingStep`` per hit or random hit, depth-first, left to right.
		A tie before any sounding step is dropped.
	"""

	steps: typing.List[SoundingStep] = []

	_walk(tokens, unit, 0.0, steps)

	return steps


def _walk (tokens: typing.Sequence[cliptune.pattern_notation.PatternToken], unit: float, start: float, steps: typing.List[SoundingStep]) -> float:

	"""Allocate *tokens* from *start*, appending to *steps*; return the end time."""

	position = start

	for token in tokens:

		if isinstance(token, cliptune.pattern_notation.Group):
			if token.members:
				_walk(token.members, unit / len(token.members), position, steps)

		elif isinstance(token, (cliptune.pattern_notation.Hit, cliptune.pattern_notation.RandomHit)):
			steps.append(SoundingStep(kind=token, onset=position, duration=unit))

		elif isinstance(token, cliptune.pattern_notation.Tie):
			if steps:
				steps[-1].duration += unit
			else:
				logger.debug(f"Tie at {position} has no preceding step - ignored")

		position += unit

	return position


def allocate_durations (tokens: typing.Sequence[cliptune.pattern_notation.PatternToken], unit: float) -> typing.List[float]:

	"""
	Return one duration per sounding step, honouring groups and ties.

	Rests contribute nothing; a leading tie is a no-op.
	"""

	return [step.duration for step in allocate_steps(tokens, unit)]


def total_pattern_duration (pattern: str, unit: float) -> float:

	"""
	Return the length of one pass of *pattern*: ``unit`` per top-level step.
	"""

	tokens = cliptune.pattern_notation.parse(pattern)

	return unit * cliptune.pattern_notation.count_steps(tokens)


def beats_to_seconds (beats: float, bpm: float = cliptune.constants.durations.DEFAULT_BPM) -> float:

	"""Convert beats to seconds at *bpm*."""

	if bpm <= 0:
		raise ValueError("BPM must be positive")

	return beats * 60.0 / bpm


def beats_to_ticks (beats: float, ticks_per_beat: int = cliptune.constants.durations.TICKS_PER_BEAT) -> int:

	"""Convert beats to whole ticks (rounded to the nearest tick)."""

	return int(round(beats * ticks_per_beat))
