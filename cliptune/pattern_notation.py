"""Rhythm pattern notation.

A pattern is a string of single-character steps:

- ``x``: a hit - plays the next note from the clip's notes.
- ``R``: a random hit - plays a random note (from ``random_notes`` if set).
- ``-``: a rest.
- ``_``: a tie - extends the previous hit instead of starting a new one.
- ``[...]``: a group - its members share the length of one step.

Groups nest, so ``"x[x[xx]]"`` is a quarter, an eighth and two sixteenths
when the unit is a quarter note.

Example:
	```python
	tokens = parse("x_[xx]-")
	# (HIT, TIE, Group((HIT, HIT)), REST)
	```
"""

import dataclasses
import typing

import cliptune.errors


PATTERN_ALPHABET = "x-_R[]"


@dataclasses.dataclass(frozen=True)
class Hit:

	"""A step that plays the next pitch from the clip's notes."""

	symbol: typing.ClassVar[str] = "x"


@dataclasses.dataclass(frozen=True)
class RandomHit:

	"""A step that plays a randomly chosen pitch."""

	symbol: typing.ClassVar[str] = "R"


@dataclasses.dataclass(frozen=True)
class Rest:

	"""A silent step."""

	symbol: typing.ClassVar[str] = "-"


@dataclasses.dataclass(frozen=True)
class Tie:

	"""A step that lengthens the previous sounding step."""

	symbol: typing.ClassVar[str] = "_"


@dataclasses.dataclass(frozen=True)
class Group:

	"""
	A bracketed sub-pattern that shares one step's length between its members.
	"""

	members: typing.Tuple["PatternToken", ...]


PatternToken = typing.Union[Hit, RandomHit, Rest, Tie, Group]

HIT = Hit()
RANDOM_HIT = RandomHit()
REST = Rest()
TIE = Tie()

_SYMBOLS: typing.Dict[str, PatternToken] = {
	"x": HIT,
	"R": RANDOM_HIT,
	"-": REST,
	"_": TIE,
}


def validate (pattern: str) -> None:

	"""
	Check that every character of *pattern* belongs to the pattern alphabet.

	Raises:
		InvalidPatternCharacter: naming the first offending character and its index.
	"""

	for index, char in enumerate(pattern):
		if char not in PATTERN_ALPHABET:
			raise cliptune.errors.InvalidPatternCharacter(char, index, pattern)


def parse (pattern: str) -> typing.Tuple[PatternToken, ...]:

	"""
	Parse a pattern string into a tuple of top-level tokens.

	Parameters:
		pattern: A string over ``x - _ R [ ]``.

	Returns:
		The top-level token sequence. Bracketed sections become ``Group``
		tokens whose members may themselves be groups.

	Raises:
		InvalidPatternCharacter: for characters outside the alphabet.
		UnbalancedGroup: when brackets do not nest or close correctly.

	Example:
		```python
		parse("[xx]x")   # (Group((HIT, HIT)), HIT)
		```
	"""

	validate(pattern)

	tokens, index = _parse_sequence(pattern, 0, depth=0)

	return tokens


def _parse_sequence (pattern: str, index: int, depth: int) -> typing.Tuple[typing.Tuple[PatternToken, ...], int]:

	"""
	Parse tokens from *index* until the end of the string or a closing bracket.

	Returns the parsed tokens and the index just past the sequence (past the
	closing bracket for a nested sequence).
	"""

	tokens: typing.List[PatternToken] = []
	opened_at = index - 1

	while index < len(pattern):

		char = pattern[index]

		if char == "[":
			members, index = _parse_sequence(pattern, index + 1, depth + 1)
			tokens.append(Group(members))
			continue

		if char == "]":
			if depth == 0:
				raise cliptune.errors.UnbalancedGroup(index, pattern, "Unexpected closing bracket")
			return tuple(tokens), index + 1

		tokens.append(_SYMBOLS[char])
		index += 1

	if depth > 0:
		raise cliptune.errors.UnbalancedGroup(opened_at, pattern, "Missing closing bracket")

	return tuple(tokens), index


def count_steps (tokens: typing.Sequence[PatternToken]) -> int:

	"""Return the number of top-level steps (a group counts as one)."""

	return len(tokens)


def sounding_tokens (tokens: typing.Sequence[PatternToken]) -> typing.Iterator[PatternToken]:

	"""Yield every ``Hit`` and ``RandomHit`` depth-first, left to right."""

	for token in tokens:
		if isinstance(token, Group):
			yield from sounding_tokens(token.members)
		elif isinstance(token, (Hit, RandomHit)):
			yield token


def to_string (tokens: typing.Sequence[PatternToken]) -> str:

	"""Render a token tree back into pattern notation."""

	parts = []

	for token in tokens:
		if isinstance(token, Group):
			parts.append("[" + to_string(token.members) + "]")
		else:
			parts.append(token.symbol)

	return "".join(parts)
