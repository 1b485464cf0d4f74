"""Song files: YAML descriptions of channels, clips and arrangement.

A song file looks like::

    bpm: 128
    clip_duration: 1m            # one arrangement step, a subdivision name or beats

    channels:
      - idx: beat
        name: Kick
        capability: unpitched
        subdiv: 16n              # any clip parameter here is a channel-wide default
        clips:
          - pattern: x---x---x---x---
          - pattern: x---x---x---x-[xx]

      - idx: keys
        capability: pitched
        clips:
          - pattern: x_-x
            notes: CM FM-4 GM
            arpeggiate: true

    arrangement:
      - channel: beat
        pattern: "0001"           # quote arrangement strings
      - channel: keys
        pattern: "-0__"
"""

import dataclasses
import logging
import os
import random
import typing

import yaml

import cliptune.arrangement
import cliptune.constants.durations
import cliptune.durations
import cliptune.session

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class Song:

	"""A session built from a song file, with its arrangement and tempo."""

	session: cliptune.session.Session
	channel_patterns: typing.List[cliptune.arrangement.ChannelPattern]
	clip_duration: float
	bpm: float


def load_config (config_path: str = "song.yaml") -> dict:

	"""
	Load a song file. A missing file gives an empty config.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, "r") as f:
		return yaml.safe_load(f) or {}


def song_from_config (config: typing.Dict[str, typing.Any], rng: typing.Optional[random.Random] = None) -> Song:

	"""
	Build a ``Song`` from a parsed song file.

	Raises:
		ClipCompileError: when a clip fails to compile.
		ValueError: for a malformed file.
	"""

	session = cliptune.session.Session()

	for channel_config in config.get("channels") or []:

		if not isinstance(channel_config, dict):
			raise ValueError(f"Channel entries must be mappings, got {channel_config!r}")

		params = dict(channel_config)
		clips = params.pop("clips", None) or []

		session.create_channel(clips=clips, rng=rng, **params)

	channel_patterns = []

	for entry in config.get("arrangement") or []:

		if not isinstance(entry, dict) or "channel" not in entry or "pattern" not in entry:
			raise ValueError(f"Arrangement entries need 'channel' and 'pattern', got {entry!r}")

		if not isinstance(entry["pattern"], str):
			raise ValueError(f"Arrangement pattern for channel {entry['channel']!r} must be a quoted string, got {entry['pattern']!r}")

		channel_patterns.append(cliptune.arrangement.ChannelPattern(entry["channel"], entry["pattern"]))

	return Song(
		session = session,
		channel_patterns = channel_patterns,
		clip_duration = cliptune.durations.resolve_unit(config.get("clip_duration", "4m")),
		bpm = float(config.get("bpm", cliptune.constants.durations.DEFAULT_BPM))
	)
