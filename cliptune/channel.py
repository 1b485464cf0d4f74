"""Channels: a set of compiled clips sharing one backend.

A channel is what an arrangement string addresses. It owns an ordered list of
clips (empty slots allowed), the backend capability every clip uses, and any
clip parameters shared by all its clips.

Example:
	```python
	bass = Channel(
		idx = "bass",
		name = "Sub bass",
		capability = BackendCapability.TRIGGERS_SINGLE_PITCH,
		subdiv = "8n",
		clips = [
			{"pattern": "x-x_", "notes": "C2 G1"},
			{"pattern": "x[xx]-x", "notes": "C2 Eb2 G2"},
			None,
		],
	)
	bass.events(1)   # compiled events of the second clip
	```
"""

import dataclasses
import logging
import random
import typing

import cliptune.clip
import cliptune.errors
import cliptune.event_emitter
import cliptune.pitches
import cliptune.render

logger = logging.getLogger(__name__)

ClipParams = typing.Union[typing.Dict[str, typing.Any], cliptune.clip.ClipSpec, None]


class CompiledClip:

	"""A clip spec together with its compiled events."""

	def __init__ (self, spec: cliptune.clip.ClipSpec, events: typing.List[cliptune.clip.NoteEvent]) -> None:

		self.spec = spec
		self.events = events


class Channel:

	"""
	An ordered set of clips played through one backend.

	Listeners registered with ``channel.events_emitter.on("clip_added", fn)``
	receive ``(channel, index)`` after each clip compiles.
	"""

	def __init__ (
		self,
		idx: typing.Any = 0,
		name: typing.Optional[str] = None,
		clips: typing.Optional[typing.Sequence[ClipParams]] = None,
		capability: typing.Union[cliptune.clip.BackendCapability, str, None] = None,
		chord_lookup: typing.Optional[cliptune.pitches.ChordLookup] = None,
		rng: typing.Optional[random.Random] = None,
		**clip_defaults: typing.Any
	) -> None:

		"""Create the channel and compile every clip in *clips*.

		Parameters:
			idx: Channel index used by arrangements; several channels may share one.
			name: Display name (defaults to ``"ch <idx>"``).
			clips: Clip parameter dicts, ``ClipSpec`` objects, or ``None`` for an empty slot.
			capability: Backend capability applied to every clip that does not set its own.
			chord_lookup: Chord resolver passed to the compiler.
			rng: Random source passed to the compiler.
			**clip_defaults: Clip parameters shared by all clips (a clip's own
				values win).

		Raises:
			ClipCompileError: naming the channel and the 1-based clip number.
		"""

		self.idx = idx
		self.name = name if name is not None else f"ch {idx}"
		self.capability = cliptune.clip.BackendCapability(capability) if isinstance(capability, str) else capability
		self.chord_lookup = chord_lookup
		self.rng = rng
		self.clip_defaults = dict(clip_defaults)
		self.events_emitter = cliptune.event_emitter.EventEmitter()

		self._clips: typing.List[typing.Optional[CompiledClip]] = []

		for clip_params in clips or []:
			self.add_clip(clip_params)

	@property
	def clips (self) -> typing.List[typing.Optional[CompiledClip]]:

		"""Compiled clips by index (``None`` for empty slots)."""

		return list(self._clips)

	def _build_spec (self, params: ClipParams) -> typing.Optional[cliptune.clip.ClipSpec]:

		"""Merge channel defaults under *params*; return ``None`` for an empty clip."""

		if params is None:
			return None

		if isinstance(params, cliptune.clip.ClipSpec):
			if params.capability is None and self.capability is not None:
				return dataclasses.replace(params, capability=self.capability)
			return params

		merged = {**self.clip_defaults, **params}

		if not merged.get("pattern"):
			return None

		merged.setdefault("capability", self.capability)

		return cliptune.clip.ClipSpec.from_params(**merged)

	def add_clip (self, params: ClipParams, idx: typing.Optional[int] = None) -> typing.Optional[CompiledClip]:

		"""
		Compile and store a clip at *idx* (appended when omitted).

		A clip without a pattern is stored as an empty slot.

		Raises:
			ClipCompileError: wrapping any compile failure.
		"""

		if idx is None:
			idx = len(self._clips)

		try:
			spec = self._build_spec(params)
			compiled = None

			if spec is not None:
				compiled = CompiledClip(
					spec = spec,
					events = cliptune.clip.compile_clip(spec, chord_lookup=self.chord_lookup, rng=self.rng)
				)

		except (cliptune.errors.CliptuneError, ValueError) as exc:
			raise cliptune.errors.ClipCompileError(exc, self.idx, self.name, idx + 1) from exc

		while len(self._clips) <= idx:
			self._clips.append(None)

		self._clips[idx] = compiled

		logger.debug(f"Channel {self.idx} {self.name!r}: clip {idx} {'compiled' if compiled else 'empty'}")
		self.events_emitter.emit_sync("clip_added", self, idx)

		return compiled

	def clip (self, idx: int) -> typing.Optional[CompiledClip]:

		"""Return the clip at *idx*, or ``None`` when empty or out of range."""

		if 0 <= idx < len(self._clips):
			return self._clips[idx]

		return None

	def events (self, idx: int) -> typing.List[cliptune.clip.NoteEvent]:

		"""Return the compiled events of clip *idx* (empty for an empty slot)."""

		compiled = self.clip(idx)

		return list(compiled.events) if compiled is not None else []

	def render_window (self, idx: int) -> typing.Optional[cliptune.render.RenderWindow]:

		"""Return the bounded-render window of clip *idx*, or ``None`` for an empty slot."""

		compiled = self.clip(idx)

		return cliptune.render.render_window(compiled.spec) if compiled is not None else None
