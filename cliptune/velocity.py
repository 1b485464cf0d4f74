"""Velocity shaping: accents and sizzle envelopes.

Each sounding step of a clip gets a velocity between ``accent_low`` and
``amp``:

- an **accent** string (``"x--x"``) forces ``amp`` on ``x`` and ``accent_low``
  on ``-``, cycling when shorter than the clip;
- otherwise a **sizzle** envelope repeats ``sizzle_reps`` times across the
  clip's sounding steps;
- otherwise every step plays at ``amp``.

Available sizzle shapes:

    "sine"      Rises from accent_low to amp mid-segment and back (half sine).
    "cosine"    Starts at amp, dips to accent_low mid-segment, rises again.
    "rampUp"    Linear accent_low -> amp across each segment.
    "rampDown"  Linear amp -> accent_low across each segment.
"""

import math
import typing

import cliptune.constants.velocity


SizzleFn = typing.Callable[[float], float]


def _sine (phase: float) -> float:
	return abs(math.sin(math.pi * phase))


def _cosine (phase: float) -> float:
	return abs(math.cos(math.pi * phase))


def _ramp_up (phase: float) -> float:
	return phase


def _ramp_down (phase: float) -> float:
	return 1.0 - phase


SIZZLE_SHAPES: typing.Dict[str, SizzleFn] = {
	"sine":     _sine,
	"cosine":   _cosine,
	"rampUp":   _ramp_up,
	"rampDown": _ramp_down,
}

SIZZLE_ALIASES: typing.Dict[str, str] = {
	"sin": "sine",
	"cos": "cosine",
	"ramp_up": "rampUp",
	"ramp_down": "rampDown",
}


def resolve_sizzle (value: typing.Union[bool, str, None]) -> typing.Optional[str]:

	"""Normalise a sizzle setting to a shape name, or ``None`` for no sizzle.

	``True`` means ``"sine"``. Raises :class:`ValueError` for unknown names.
	"""

	if value is None or value is False or value == "none":
		return None

	if value is True:
		return "sine"

	name = SIZZLE_ALIASES.get(value, value)

	if name not in SIZZLE_SHAPES:
		available = ", ".join(f'"{k}"' for k in SIZZLE_SHAPES)
		raise ValueError(f"Unknown sizzle shape {value!r}. Available shapes: {available}")

	return name


def validate_levels (amp: int, accent_low: int) -> None:

	"""Check that ``0 <= accent_low <= amp <= 127``."""

	if not cliptune.constants.velocity.MIN_VELOCITY <= accent_low <= amp <= cliptune.constants.velocity.MAX_VELOCITY:
		raise ValueError(
			f"Velocities must satisfy {cliptune.constants.velocity.MIN_VELOCITY} <= accent_low <= amp <= "
			f"{cliptune.constants.velocity.MAX_VELOCITY}, got accent_low={accent_low}, amp={amp}"
		)


def shape_velocity (
	step: int,
	total_steps: int,
	amp: int = cliptune.constants.velocity.DEFAULT_AMP,
	accent_low: int = cliptune.constants.velocity.DEFAULT_ACCENT_LOW,
	accent: typing.Optional[str] = None,
	sizzle: typing.Optional[str] = None,
	sizzle_reps: int = 1
) -> int:

	"""
	Return the velocity of sounding step *step* out of *total_steps*.

	Parameters:
		step: Zero-based sounding-step counter. Values past ``total_steps``
			wrap, so repeated passes of a clip share one envelope.
		total_steps: Number of sounding steps in one pass of the clip.
		amp: Upper bound (and the unshaped level).
		accent_low: Lower bound.
		accent: Optional ``x``/``-`` string, cycled by step. Overrides sizzle.
		sizzle: Optional shape name from ``SIZZLE_SHAPES`` (or an alias).
		sizzle_reps: Number of envelope segments across ``total_steps``.

	Returns:
		An integer in ``[accent_low, amp]``. The same arguments always give
		the same result.

	Example:
		```python
		[shape_velocity(i, 4, amp=100, accent_low=60, sizzle="rampUp") for i in range(4)]
		# [60, 70, 80, 90]
		```
	"""

	if accent:
		level = accent_low if accent[step % len(accent)] == "-" else amp
		return int(round(level))

	shape = resolve_sizzle(sizzle)

	if shape is None or total_steps <= 0:
		return int(round(amp))

	segment = total_steps / max(1, sizzle_reps)
	phase = (step % segment) / segment

	factor = min(1.0, max(0.0, SIZZLE_SHAPES[shape](phase)))

	return int(round(accent_low + (amp - accent_low) * factor))
