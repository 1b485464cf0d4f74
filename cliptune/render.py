"""Bounded rendering: window arithmetic and render sessions.

A looping clip whose pattern has *s* sounding steps and whose notes list has
*k* entries only returns to its starting alignment after
``lcm(s, k) / s`` passes. A one-shot render must cover that many passes to
hear every note/step pairing once before the loop would repeat::

    render_repetitions(4, 6)    # 3
    rendering_duration("xxxx", 1.0, ["C4", "D4", "E4", "F4", "G4", "A4"], None)   # 12.0

``RenderSession`` coordinates several bounded renders running at once: it
counts renders in flight and emits ``"complete"`` when the count drains to
zero, which is when a caller should restore whatever shared context the
renders borrowed.
"""

import dataclasses
import logging
import math
import random
import threading
import typing

import cliptune.clip
import cliptune.durations
import cliptune.event_emitter
import cliptune.pitches

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class RenderWindow:

	"""How many pattern passes, and how many beats, a bounded render needs."""

	repetitions: int
	duration: float


def phase_step_count (pattern: str, has_random_source: bool) -> int:

	"""
	Count the steps that advance the note cycle deterministically.

	Every ``x`` counts. ``R`` steps count too unless the clip has its own
	random pool, in which case they never touch the note cycle.
	"""

	hits = pattern.count("x")

	if has_random_source:
		return hits

	return hits + pattern.count("R")


def render_repetitions (phase_steps: int, pitch_count: int) -> int:

	"""Return ``lcm(phase_steps, pitch_count) / phase_steps`` (at least 1)."""

	if phase_steps <= 0:
		return 1

	return math.lcm(phase_steps, max(1, pitch_count)) // phase_steps


def rendering_duration (
	pattern: str,
	unit: typing.Union[str, float],
	notes: typing.Union[str, typing.Sequence[typing.Any], None],
	random_notes: typing.Union[str, typing.Sequence[typing.Any], None]
) -> float:

	"""
	Return the length in beats of a render that covers one full note/step period.

	Parameters:
		pattern: The clip's pattern.
		unit: Subdivision name or beats per top-level step.
		notes: The clip's notes (only the count matters).
		random_notes: The clip's random pool (only whether it is empty matters).

	Returns:
		``(total pattern duration / phase steps) * lcm(note count, phase steps)``,
		or one pass of the pattern when it has no phase steps.
	"""

	if isinstance(notes, str):
		notes = cliptune.pitches.split_notes(notes)

	if isinstance(random_notes, str):
		random_notes = cliptune.pitches.split_notes(random_notes)

	total = cliptune.durations.total_pattern_duration(pattern, cliptune.durations.resolve_unit(unit))
	phase_steps = phase_step_count(pattern, bool(random_notes))

	if phase_steps == 0:
		return total

	pitch_count = len(notes or ()) or 1

	return (total / phase_steps) * math.lcm(pitch_count, phase_steps)


def render_window (spec: cliptune.clip.ClipSpec) -> RenderWindow:

	"""Return the render window for a clip spec."""

	notes = spec.notes
	random_notes = spec.random_notes

	if isinstance(notes, str):
		notes = cliptune.pitches.split_notes(notes)

	if isinstance(random_notes, str):
		random_notes = cliptune.pitches.split_notes(random_notes)

	phase_steps = phase_step_count(spec.pattern, bool(random_notes))

	return RenderWindow(
		repetitions = render_repetitions(phase_steps, len(notes or ()) or 1),
		duration = rendering_duration(spec.pattern, spec.subdiv, notes, random_notes)
	)


Renderer = typing.Callable[[typing.List[cliptune.clip.NoteEvent], float], typing.Any]


class RenderSession:

	"""
	Tracks bounded renders that share one external synthesis context.

	Each render calls ``begin()`` before it starts and ``finish()`` when it
	ends. When the last render in flight finishes, the session emits
	``"complete"``. The count is protected by a lock so renders may run on
	any thread; a ``begin()`` from another thread waits until the
	``"complete"`` listeners have returned.

	Example:
		```python
		session = RenderSession()
		session.on_complete(restore_live_context)

		buffer = session.render(spec, offline_renderer)
		```
	"""

	def __init__ (self) -> None:

		"""Start with no renders in flight."""

		# Reentrant so "complete" listeners may read in_flight or begin a render
		self._lock = threading.RLock()
		self._in_flight = 0
		self.events = cliptune.event_emitter.EventEmitter()

	@property
	def in_flight (self) -> int:

		"""Number of renders currently running."""

		with self._lock:
			return self._in_flight

	def on_complete (self, callback: typing.Callable[[], typing.Any]) -> None:

		"""Register a callback for when the in-flight count returns to zero."""

		self.events.on("complete", callback)

	def begin (self) -> None:

		"""Register a render as started."""

		with self._lock:
			self._in_flight += 1

	def finish (self) -> None:

		"""
		Register a render as finished; emit ``"complete"`` if it was the last.

		Raises:
			RuntimeError: if no render is in flight.
		"""

		# "complete" listeners run under the lock so no begin() lands before they return
		with self._lock:
			if self._in_flight == 0:
				raise RuntimeError("finish() called with no render in flight")
			self._in_flight -= 1

			if self._in_flight == 0:
				logger.debug("All renders finished")
				self.events.emit_sync("complete")

	def render (
		self,
		spec: cliptune.clip.ClipSpec,
		renderer: Renderer,
		chord_lookup: typing.Optional[cliptune.pitches.ChordLookup] = None,
		rng: typing.Optional[random.Random] = None
	) -> typing.Any:

		"""
		Compile *spec* over its render window and hand it to *renderer*.

		The clip is compiled for ``render_window(spec).repetitions`` passes and
		``renderer(events, duration)`` is called with the window's duration in
		beats. Compile errors propagate before the session is touched; the
		session is always released once the renderer returns or raises.

		Returns:
			Whatever *renderer* returns.
		"""

		window = render_window(spec)
		events = cliptune.clip.compile_clip(spec, chord_lookup=chord_lookup, rng=rng, repetitions=window.repetitions)

		self.begin()

		try:
			return renderer(events, window.duration)
		finally:
			self.finish()
