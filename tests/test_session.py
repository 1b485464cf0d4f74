import logging

import cliptune.arrangement
import cliptune.session


def _session () -> cliptune.session.Session:

	session = cliptune.session.Session()
	session.create_channel(idx="beat", capability="unpitched", clips=[{"pattern": "x-x-"}, {"pattern": "xxxx"}])
	session.create_channel(idx="bass", capability="single_pitch", clips=[{"pattern": "x_", "notes": "C2"}])

	return session


def test_create_channel_default_index () -> None:

	"""Channels without an index are numbered by position."""

	session = cliptune.session.Session()
	first = session.create_channel(capability="pitched")
	second = session.create_channel(capability="pitched")

	assert (first.idx, second.idx) == (0, 1)
	assert session.channels == [first, second]


def test_arrange_orders_by_start_then_channel () -> None:

	"""Arranged clips are laid out by start time, then channel order."""

	arranged = _session().arrange([
		cliptune.arrangement.ChannelPattern("bass", "-0"),
		cliptune.arrangement.ChannelPattern("beat", "0_1"),
	], clip_duration=4)

	assert [(a.channel.idx, a.clip_index, a.start, a.length) for a in arranged] == [
		("beat", 0, 0, 8),
		("bass", 0, 4, 4),
		("beat", 1, 8, 4),
	]
	assert len(arranged[0].events) == 2


def test_channels_sharing_an_index_follow_one_pattern () -> None:

	"""Every channel with the same index follows its pattern."""

	session = cliptune.session.Session()
	a = session.create_channel(idx="drums", capability="unpitched", clips=[{"pattern": "x"}])
	b = session.create_channel(idx="drums", capability="playback_only", clips=[{"pattern": "x-"}])

	arranged = session.arrange([cliptune.arrangement.ChannelPattern("drums", "0")])

	assert [item.channel for item in arranged] == [a, b]
	assert session.get_channels("drums") == [a, b]


def test_arrange_skips_missing_channels_and_clips (caplog) -> None:

	"""Unknown channels and empty clip slots are skipped with a warning."""

	with caplog.at_level(logging.WARNING, logger="cliptune.session"):
		arranged = _session().arrange([
			cliptune.arrangement.ChannelPattern("lead", "0"),
			cliptune.arrangement.ChannelPattern("bass", "05"),
		], clip_duration=1)

	assert [(a.channel.idx, a.clip_index) for a in arranged] == [("bass", 0)]
	assert "lead" in caplog.text
	assert "no clip 5" in caplog.text
