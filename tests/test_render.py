import threading

import pytest

import cliptune.clip
import cliptune.render


PITCHED = cliptune.clip.BackendCapability.TRIGGERS_PITCHED_NOTE


def test_render_repetitions () -> None:

	"""Passes needed for notes and steps to realign."""

	assert cliptune.render.render_repetitions(4, 6) == 3
	assert cliptune.render.render_repetitions(4, 4) == 1
	assert cliptune.render.render_repetitions(3, 1) == 1
	assert cliptune.render.render_repetitions(3, 2) == 2


def test_render_repetitions_without_phase_steps () -> None:

	"""A pattern with nothing that advances the notes renders once."""

	assert cliptune.render.render_repetitions(0, 5) == 1


def test_phase_step_count () -> None:

	"""R counts unless it has its own random pool."""

	assert cliptune.render.phase_step_count("xRx-", has_random_source=False) == 3
	assert cliptune.render.phase_step_count("xRx-", has_random_source=True) == 2
	assert cliptune.render.phase_step_count("[xx]_", has_random_source=False) == 2


def test_rendering_duration () -> None:

	"""Pattern length per phase step times lcm(notes, phase steps)."""

	assert cliptune.render.rendering_duration("xxxx", 1.0, ["C4", "D4", "E4", "F4", "G4", "A4"], None) == 12.0
	assert cliptune.render.rendering_duration("x-x-", "4n", "C4 E4 G4", None) == 12.0
	assert cliptune.render.rendering_duration("xx", "8n", "C4 E4", None) == 1.0


def test_rendering_duration_without_phase_steps () -> None:

	"""All-random or silent patterns render one pass."""

	assert cliptune.render.rendering_duration("RRRR", "4n", "C4 E4 G4", "A4 B4") == 4.0
	assert cliptune.render.rendering_duration("----", "8n", "C4", None) == 2.0


def test_render_window_covers_every_pairing () -> None:

	"""Compiling over the window plays every note on every step once."""

	spec = cliptune.clip.ClipSpec(pattern="xxxx", notes="C4 D4 E4 F4 G4 A4", capability=PITCHED)
	window = cliptune.render.render_window(spec)

	assert window == cliptune.render.RenderWindow(repetitions=3, duration=12.0)

	events = cliptune.clip.compile_clip(spec, repetitions=window.repetitions)

	assert len(events) == 12
	assert events[-1].pitches == ("A4",)
	assert events[-1].time + events[-1].duration == window.duration


def test_session_render_passes_window_to_renderer () -> None:

	"""render() compiles over the window and returns the renderer's result."""

	session = cliptune.render.RenderSession()
	received = []

	def renderer (events, duration):
		received.append((len(events), duration))
		return "buffer"

	spec = cliptune.clip.ClipSpec(pattern="x-x-", notes="C4 E4 G4", capability=PITCHED)

	assert session.render(spec, renderer) == "buffer"
	assert received == [(6, 12.0)]
	assert session.in_flight == 0


def test_session_emits_complete_when_drained () -> None:

	"""complete fires only when the last render finishes."""

	session = cliptune.render.RenderSession()
	completions = []
	session.on_complete(lambda: completions.append(True))

	session.begin()
	session.begin()
	session.finish()

	assert completions == []
	assert session.in_flight == 1

	session.finish()

	assert completions == [True]


def test_session_finishes_when_renderer_raises () -> None:

	"""A failing renderer still releases the session."""

	session = cliptune.render.RenderSession()
	completions = []
	session.on_complete(lambda: completions.append(True))

	def renderer (events, duration):
		raise RuntimeError("synth failed")

	spec = cliptune.clip.ClipSpec(pattern="x", capability=PITCHED)

	with pytest.raises(RuntimeError, match="synth failed"):
		session.render(spec, renderer)

	assert session.in_flight == 0
	assert completions == [True]


def test_session_compile_error_leaves_session_untouched () -> None:

	"""Compile errors propagate before the render is counted."""

	session = cliptune.render.RenderSession()
	completions = []
	session.on_complete(lambda: completions.append(True))

	with pytest.raises(Exception):
		session.render(cliptune.clip.ClipSpec(pattern="x?", capability=PITCHED), lambda events, duration: None)

	assert session.in_flight == 0
	assert completions == []


def test_finish_without_begin_raises () -> None:

	"""finish() with nothing in flight is a programming error."""

	with pytest.raises(RuntimeError):
		cliptune.render.RenderSession().finish()


def test_concurrent_renders_complete_once () -> None:

	"""Overlapping renders on several threads emit complete exactly once."""

	session = cliptune.render.RenderSession()
	barrier = threading.Barrier(4, timeout=5)
	completions = []
	session.on_complete(lambda: completions.append(True))

	spec = cliptune.clip.ClipSpec(pattern="x[xx]", notes="C4 E4", capability=PITCHED)

	def renderer (events, duration):
		# Hold every render in flight until all four have started.
		barrier.wait()
		return duration

	results = []

	def run () -> None:
		results.append(session.render(spec, renderer))

	threads = [threading.Thread(target=run) for _ in range(4)]

	for thread in threads:
		thread.start()

	for thread in threads:
		thread.join(timeout=10)

	assert len(results) == 4
	assert completions == [True]
	assert session.in_flight == 0


def test_begin_waits_for_complete_listeners () -> None:

	"""A begin() racing the drain blocks until complete has been handled."""

	session = cliptune.render.RenderSession()
	seen_in_flight = []
	blocked = []
	emit_sync = session.events.emit_sync

	def racing_emit (event_name, *args, **kwargs):
		racer = threading.Thread(target=session.begin)
		racer.start()
		racer.join(timeout=0.2)
		blocked.append(racer.is_alive())
		emit_sync(event_name, *args, **kwargs)
		return racer

	racers = []
	session.events.emit_sync = lambda event_name, *args, **kwargs: racers.append(racing_emit(event_name, *args, **kwargs))
	session.on_complete(lambda: seen_in_flight.append(session.in_flight))

	session.begin()
	session.finish()

	racers[0].join(timeout=5)

	assert blocked == [True]
	assert seen_in_flight == [0]
	assert session.in_flight == 1


def test_complete_listener_may_begin_a_render () -> None:

	"""Listeners run on the finishing thread and can start another render."""

	session = cliptune.render.RenderSession()
	session.on_complete(session.begin)

	session.begin()
	session.finish()

	assert session.in_flight == 1
