"""Conversion of compiled events to MIDI messages.

The engine's consumers agree on units out of band; for MIDI consumers this
module turns ``NoteEvent`` lists (in beats) into ``mido`` messages with delta
times in ticks. Nothing here opens ports or writes files.

Example:
	```python
	track = events_to_track(compile_clip(spec), channel=1, ticks_per_beat=480)
	midi_file = mido.MidiFile(ticks_per_beat=480)
	midi_file.tracks.append(track)
	```
"""

import typing

import mido

import cliptune.clip
import cliptune.constants.durations
import cliptune.durations

# GM percussion key used when an event has no pitch (acoustic bass drum)
UNPITCHED_NOTE = 36


def events_to_messages (
	events: typing.Sequence[cliptune.clip.NoteEvent],
	channel: int = 0,
	ticks_per_beat: int = cliptune.constants.durations.TICKS_PER_BEAT,
	unpitched_note: int = UNPITCHED_NOTE
) -> typing.List[mido.Message]:

	"""
	Convert events to ``note_on``/``note_off`` messages with delta times.

	Parameters:
		events: Compiled events.
		channel: MIDI channel (0-15).
		ticks_per_beat: Tick resolution of the target.
		unpitched_note: Note number sent for events with no pitches.

	Returns:
		Messages in time order. At the same tick, note-offs come before
		note-ons so repeated notes retrigger cleanly.
	"""

	if not 0 <= channel <= 15:
		raise ValueError(f"MIDI channel must be 0-15, got {channel}")

	timed: typing.List[typing.Tuple[int, int, mido.Message]] = []

	for event in events:

		notes = event.midi_pitches or [unpitched_note]
		on = cliptune.durations.beats_to_ticks(event.time, ticks_per_beat)
		off = max(on + 1, cliptune.durations.beats_to_ticks(event.time + event.duration, ticks_per_beat))

		for note in notes:
			timed.append((on, 1, mido.Message("note_on", channel=channel, note=note, velocity=event.velocity)))
			timed.append((off, 0, mido.Message("note_off", channel=channel, note=note, velocity=0)))

	timed.sort(key=lambda item: (item[0], item[1]))

	messages = []
	last = 0

	for tick, _, message in timed:
		messages.append(message.copy(time=tick - last))
		last = tick

	return messages


def events_to_track (
	events: typing.Sequence[cliptune.clip.NoteEvent],
	channel: int = 0,
	ticks_per_beat: int = cliptune.constants.durations.TICKS_PER_BEAT,
	name: typing.Optional[str] = None
) -> mido.MidiTrack:

	"""Wrap ``events_to_messages()`` in a ``mido.MidiTrack`` ending with ``end_of_track``."""

	track = mido.MidiTrack()

	if name is not None:
		track.append(mido.MetaMessage("track_name", name=name, time=0))

	track.extend(events_to_messages(events, channel=channel, ticks_per_beat=ticks_per_beat))
	track.append(mido.MetaMessage("end_of_track", time=0))

	return track
