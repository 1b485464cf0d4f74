import pytest

import cliptune.channel
import cliptune.clip
import cliptune.errors


def test_channel_compiles_clips () -> None:

	"""Every clip is compiled on creation; None leaves an empty slot."""

	channel = cliptune.channel.Channel(
		idx = "bass",
		capability = "single_pitch",
		clips = [{"pattern": "x-x_", "notes": "C2 G1"}, None, {"pattern": "xx", "notes": "CM"}]
	)

	assert len(channel.clips) == 3
	assert channel.clip(1) is None
	assert [e.pitches for e in channel.events(0)] == [("C2",), ("G1",)]
	assert [e.pitches for e in channel.events(2)] == [("C4",), ("C4",)]
	assert channel.events(1) == []
	assert channel.events(9) == []


def test_default_name () -> None:

	"""Channels without a name are named after their index."""

	assert cliptune.channel.Channel(idx=3).name == "ch 3"
	assert cliptune.channel.Channel(idx=3, name="Lead").name == "Lead"


def test_clip_defaults_apply_under_clip_params () -> None:

	"""Channel-wide parameters fill in what a clip leaves out."""

	channel = cliptune.channel.Channel(
		capability = cliptune.clip.BackendCapability.TRIGGERS_UNPITCHED_NOTE,
		subdiv = "16n",
		clips = [{"pattern": "xx"}, {"pattern": "xx", "subdiv": "8n"}]
	)

	assert [e.time for e in channel.events(0)] == [0.0, 0.25]
	assert [e.time for e in channel.events(1)] == [0.0, 0.5]


def test_clip_without_pattern_is_empty () -> None:

	"""A parameter dict without a pattern is an empty slot."""

	channel = cliptune.channel.Channel(capability="pitched", clips=[{"notes": "C4"}])

	assert channel.clips == [None]


def test_clip_spec_gets_channel_capability () -> None:

	"""A ClipSpec without a capability uses the channel's."""

	channel = cliptune.channel.Channel(capability="unpitched", clips=[cliptune.clip.ClipSpec(pattern="x")])

	assert channel.clip(0).spec.capability is cliptune.clip.BackendCapability.TRIGGERS_UNPITCHED_NOTE
	assert channel.events(0)[0].pitches == ()


def test_compile_error_names_channel_and_clip () -> None:

	"""Failures are wrapped with the channel and 1-based clip number."""

	with pytest.raises(cliptune.errors.ClipCompileError) as info:
		cliptune.channel.Channel(
			idx = 1,
			name = "Keys",
			capability = "pitched",
			clips = [{"pattern": "x"}, {"pattern": "x", "notes": "Cnope"}]
		)

	assert info.value.clip_number == 2
	assert info.value.channel_idx == 1
	assert isinstance(info.value.cause, cliptune.errors.UnknownChord)
	assert str(info.value).endswith("in channel 1 'Keys' clip 2")


def test_add_clip_at_index_pads_slots () -> None:

	"""Adding past the end leaves empty slots in between."""

	channel = cliptune.channel.Channel(capability="pitched")
	channel.add_clip({"pattern": "x"}, idx=2)

	assert channel.clips[0] is None
	assert channel.clips[1] is None
	assert channel.clip(2) is not None


def test_add_clip_notifies_listeners () -> None:

	"""clip_added receives the channel and the slot index."""

	channel = cliptune.channel.Channel(capability="pitched")
	received = []
	channel.events_emitter.on("clip_added", lambda ch, idx: received.append((ch, idx)))

	channel.add_clip({"pattern": "x"})
	channel.add_clip(None)

	assert received == [(channel, 0), (channel, 1)]


def test_render_window () -> None:

	"""The channel reports each clip's render window."""

	channel = cliptune.channel.Channel(capability="pitched", clips=[{"pattern": "xxxx", "notes": "C4 D4 E4 F4 G4 A4"}, None])

	assert channel.render_window(0).repetitions == 3
	assert channel.render_window(1) is None
