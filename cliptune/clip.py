"""Clip compilation.

A clip is a declarative description of a phrase - a rhythm pattern, the notes
to cycle through, and velocity/arpeggio shaping. ``compile_clip()`` turns a
``ClipSpec`` into an ordered list of ``NoteEvent`` objects that a playback or
export backend can consume.

Example:
	```python
	spec = ClipSpec(
		pattern = "x-x[xx]",
		notes = "C4 E4 G4",
		capability = BackendCapability.TRIGGERS_PITCHED_NOTE,
	)

	for event in compile_clip(spec):
		print(event.time, event.pitches, event.duration, event.velocity)
	```

All times and durations are in beats (1.0 = quarter note).
"""

import dataclasses
import enum
import logging
import random
import typing

import cliptune.constants.durations
import cliptune.constants.velocity
import cliptune.durations
import cliptune.errors
import cliptune.pattern_notation
import cliptune.pitches
import cliptune.velocity

logger = logging.getLogger(__name__)

# Used only when the caller does not pass an rng.
_default_rng = random.Random()


class BackendCapability (enum.Enum):

	"""
	What the backend receiving a clip's events can do.

	The compiler only needs to know which of these applies, never which
	backend it is.
	"""

	TRIGGERS_PITCHED_NOTE = "pitched"		# polyphonic: every pitch of a chord
	TRIGGERS_SINGLE_PITCH = "single_pitch"	# monophonic: first pitch of a chord
	TRIGGERS_UNPITCHED_NOTE = "unpitched"	# noise/drum voice: duration only
	STARTS_PLAYBACK_ONLY = "playback_only"	# one-shot sample: onset only

	@property
	def is_pitched (self) -> bool:

		"""True when events carry pitches."""

		return self in (BackendCapability.TRIGGERS_PITCHED_NOTE, BackendCapability.TRIGGERS_SINGLE_PITCH)


NotesParam = typing.Union[str, typing.Tuple[typing.Union[str, typing.Tuple[str, ...]], ...], None]


@dataclasses.dataclass(frozen=True)
class ClipSpec:

	"""
	The full declarative input for one clip.

	Attributes:
		pattern: Rhythm in pattern notation (``x - _ R [ ]``).
		notes: Notes, chord voicings or chord names, cycled per sounding step.
			A string is split on whitespace.
		random_notes: Pool for ``R`` steps. When empty, ``R`` steps take the
			next note from ``notes`` like ``x`` does.
		subdiv: Length of one ungrouped step: a subdivision name or beats.
		dur: Fixed duration for every event, ignoring the pattern's timing.
		durations: Explicit durations in beats, cycled per sounding step.
			Takes precedence over ``dur``.
		amp: Maximum (and default) velocity.
		accent_low: Minimum velocity for accents and sizzles.
		accent: ``x``/``-`` accent string, cycled per sounding step.
		sizzle: Velocity envelope shape (``True`` for sine).
		sizzle_reps: Number of envelope repetitions across the clip.
		shuffle: Shuffle ``notes`` once at compile time.
		arpeggiate: Split chords into consecutive single notes.
		capability: What the target backend can play; required.
	"""

	pattern: str = "x"
	notes: NotesParam = ("C4",)
	random_notes: NotesParam = None
	subdiv: typing.Union[str, float] = cliptune.constants.durations.DEFAULT_SUBDIVISION
	dur: typing.Union[str, float, None] = None
	durations: typing.Optional[typing.Tuple[float, ...]] = None
	amp: int = cliptune.constants.velocity.DEFAULT_AMP
	accent_low: int = cliptune.constants.velocity.DEFAULT_ACCENT_LOW
	accent: typing.Optional[str] = None
	sizzle: typing.Union[bool, str, None] = None
	sizzle_reps: int = 1
	shuffle: bool = False
	arpeggiate: bool = False
	capability: typing.Optional[BackendCapability] = None


	@classmethod
	def from_params (cls, **params: typing.Any) -> "ClipSpec":

		"""Build a spec from loose keyword input (e.g. parsed YAML).

		Lists become tuples, capability names become ``BackendCapability``
		members, and unknown keys are dropped with a warning. The input is
		never modified.
		"""

		known = {field.name for field in dataclasses.fields(cls)}
		unknown = sorted(set(params) - known)

		if unknown:
			logger.warning(f"Ignoring unknown clip parameters: {', '.join(unknown)}")

		values = {key: value for key, value in params.items() if key in known}

		for key in ("notes", "random_notes"):
			if isinstance(values.get(key), (list, tuple)):
				values[key] = tuple(tuple(n) if isinstance(n, (list, tuple)) else n for n in values[key])

		if values.get("durations") is not None:
			values["durations"] = tuple(values["durations"])

		if isinstance(values.get("capability"), str):
			values["capability"] = BackendCapability(values["capability"])

		return cls(**values)


@dataclasses.dataclass(frozen=True)
class NoteEvent:

	"""
	One compiled event.

	``position`` is the emission index; ``step`` is the sounding-step counter
	that produced it (arpeggiated sub-events share a step). ``pitches`` is
	empty for unpitched backends.
	"""

	position: int
	step: int
	time: float
	duration: float
	pitches: typing.Tuple[str, ...]
	velocity: int

	@property
	def midi_pitches (self) -> typing.List[int]:

		"""MIDI note numbers of ``pitches``."""

		return [cliptune.pitches.note_to_midi(p) for p in self.pitches]


def compile_clip (
	spec: ClipSpec,
	chord_lookup: typing.Optional[cliptune.pitches.ChordLookup] = None,
	rng: typing.Optional[random.Random] = None,
	repetitions: int = 1
) -> typing.List[NoteEvent]:

	"""
	Compile a clip into its ordered note events.

	Parameters:
		spec: The clip to compile.
		chord_lookup: Chord name resolver, defaults to ``cliptune.chords.lookup_chord``.
		rng: Random source for ``shuffle`` and ``R`` steps. Pass a seeded
			``random.Random`` for repeatable output.
		repetitions: Number of back-to-back passes of the pattern to compile.
			The note counter carries across passes the way a looping
			clip's would.

	Returns:
		Events in time order. Rests and ties never emit.

	Raises:
		InvalidPatternCharacter, UnbalancedGroup: for a malformed pattern.
		MissingSoundSource: when ``spec.capability`` is not set.
		InvalidPitchInArray, UnknownChord: for unresolvable notes.
		EmptyPitchSource: when sounding steps have no notes to play.
		ValueError: for bad subdivisions, levels, sizzle names or repetitions.
	"""

	if not spec.pattern:
		raise cliptune.errors.CliptuneError("No pattern provided")

	tokens = cliptune.pattern_notation.parse(spec.pattern)

	if spec.capability is None:
		raise cliptune.errors.MissingSoundSource("No sound source provided: a backend capability is required")

	if repetitions < 1:
		raise ValueError("repetitions must be at least 1")

	cliptune.velocity.validate_levels(spec.amp, spec.accent_low)
	sizzle = cliptune.velocity.resolve_sizzle(spec.sizzle)

	if spec.durations is not None and len(spec.durations) == 0:
		raise ValueError("durations list cannot be empty")

	unit = cliptune.durations.resolve_unit(spec.subdiv)
	fixed_duration = cliptune.durations.resolve_unit(spec.dur) if spec.dur is not None else None
	steps = cliptune.durations.allocate_steps(tokens, unit)

	notes = cliptune.pitches.resolve_pitch_source(spec.notes, chord_lookup)
	random_notes = cliptune.pitches.resolve_pitch_source(spec.random_notes, chord_lookup)

	if spec.capability.is_pitched and not notes:
		if any(not (step.is_random and random_notes) for step in steps):
			raise cliptune.errors.EmptyPitchSource(f"Pattern {spec.pattern!r} has sounding steps but no notes")

	if rng is None:
		rng = _default_rng

	if spec.shuffle:
		notes = list(notes)
		rng.shuffle(notes)

	pass_length = unit * cliptune.pattern_notation.count_steps(tokens)
	total_steps = len(steps)
	events: typing.List[NoteEvent] = []
	counter = 0

	for repetition in range(repetitions):

		offset = repetition * pass_length

		for step in steps:

			if step.is_random and random_notes:
				pitches = rng.choice(random_notes)
			elif notes:
				pitches = notes[counter % len(notes)]
			else:
				pitches = []

			if spec.durations is not None:
				duration = spec.durations[counter % len(spec.durations)]
			elif fixed_duration is not None:
				duration = fixed_duration
			else:
				duration = step.duration

			velocity = cliptune.velocity.shape_velocity(
				step = counter,
				total_steps = total_steps,
				amp = spec.amp,
				accent_low = spec.accent_low,
				accent = spec.accent,
				sizzle = sizzle,
				sizzle_reps = spec.sizzle_reps
			)

			time = offset + step.onset

			if spec.arpeggiate and spec.capability.is_pitched and len(pitches) > 1:

				ordered = sorted(pitches, key=cliptune.pitches.note_to_midi)
				sub_duration = duration / len(ordered)

				for i, pitch in enumerate(ordered):
					events.append(NoteEvent(
						position = len(events),
						step = counter,
						time = time + i * sub_duration,
						duration = sub_duration,
						pitches = (pitch,),
						velocity = velocity
					))

			else:
				events.append(NoteEvent(
					position = len(events),
					step = counter,
					time = time,
					duration = duration,
					pitches = _pitches_for(spec.capability, pitches),
					velocity = velocity
				))

			counter += 1

	logger.debug(f"Compiled clip {spec.pattern!r}: {total_steps * repetitions} steps, {len(events)} events")

	return events


def _pitches_for (capability: BackendCapability, pitches: typing.Sequence[str]) -> typing.Tuple[str, ...]:

	"""Trim a resolved pitch set to what *capability* can play."""

	if capability is BackendCapability.TRIGGERS_PITCHED_NOTE:
		return tuple(pitches)

	if capability is BackendCapability.TRIGGERS_SINGLE_PITCH:
		return tuple(pitches[:1])

	return ()
