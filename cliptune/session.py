"""Sessions: channels plus their song-level arrangement.

``Session.arrange()`` turns per-channel arrangement strings into a flat list of
``ArrangedClip`` entries - which clip of which channel plays when, for how
long, and the events it plays. Starting those clips against a clock is left
to the caller.
"""

import dataclasses
import logging
import typing

import cliptune.arrangement
import cliptune.channel
import cliptune.clip

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ArrangedClip:

	"""One span of the arrangement: *channel* plays clip *clip_index*."""

	channel: cliptune.channel.Channel
	clip_index: int
	start: float
	length: float
	events: typing.List[cliptune.clip.NoteEvent]


class Session:

	"""
	An ordered collection of channels.

	Example:
		```python
		session = Session()
		session.create_channel(idx="beat", capability="unpitched", clips=[{"pattern": "x-x-"}])
		session.create_channel(idx="bass", capability="single_pitch", clips=[{"pattern": "x_x-", "notes": "C2"}])

		arranged = session.arrange([
			ChannelPattern("beat", "0___"),
			ChannelPattern("bass", "-0_0"),
		], clip_duration=4)
		```
	"""

	def __init__ (self, channels: typing.Optional[typing.Sequence[cliptune.channel.Channel]] = None) -> None:

		self._channels: typing.List[cliptune.channel.Channel] = list(channels or [])

	@property
	def channels (self) -> typing.List[cliptune.channel.Channel]:

		"""All channels in creation order."""

		return list(self._channels)

	def create_channel (self, **params: typing.Any) -> cliptune.channel.Channel:

		"""
		Create a channel and add it to the session.

		``idx`` defaults to the channel's position in the session. Accepts the
		same keyword arguments as ``Channel``.
		"""

		params.setdefault("idx", len(self._channels))

		channel = cliptune.channel.Channel(**params)
		self._channels.append(channel)

		return channel

	def get_channels (self, idx: typing.Any) -> typing.List[cliptune.channel.Channel]:

		"""Return every channel whose index is *idx*."""

		return [channel for channel in self._channels if channel.idx == idx]

	def arrange (self, channel_patterns: typing.Sequence[cliptune.arrangement.ChannelPattern], clip_duration: float = 16.0) -> typing.List[ArrangedClip]:

		"""
		Lay out clips for every channel pattern.

		Parameters:
			channel_patterns: One arrangement string per channel index. Every
				channel sharing that index follows it.
			clip_duration: Length of one arrangement step, in beats
				(default four bars of 4/4).

		Returns:
			Arranged clips sorted by start time, then by channel order.

		Raises:
			ArrangementError: when a channel pattern is malformed.
		"""

		arranged: typing.List[ArrangedClip] = []

		for channel_idx, slots in cliptune.arrangement.compile_arrangement(channel_patterns):

			channels = self.get_channels(channel_idx)

			if not channels:
				logger.warning(f"Arrangement refers to channel {channel_idx!r}, which does not exist")
				continue

			spans = cliptune.arrangement.timeline(slots, clip_duration=clip_duration)

			for channel in channels:
				for span in spans:

					compiled = channel.clip(span.clip_index)

					if compiled is None:
						logger.warning(f"Channel {channel.idx} {channel.name!r} has no clip {span.clip_index} - skipped")
						continue

					arranged.append(ArrangedClip(
						channel = channel,
						clip_index = span.clip_index,
						start = span.start,
						length = span.length,
						events = list(compiled.events)
					))

		order = {id(channel): i for i, channel in enumerate(self._channels)}
		arranged.sort(key=lambda item: (item.start, order[id(item.channel)]))

		return arranged
