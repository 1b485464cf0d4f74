import argparse
import logging
import random
import typing

import cliptune.config
import cliptune.durations
import cliptune.errors


logger = logging.getLogger(__name__)


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Compile a song file and log its clips and arrangement.
	"""

	parser = argparse.ArgumentParser(prog="cliptune", description="Compile a cliptune song file")
	parser.add_argument("song", nargs="?", default="song.yaml", help="Song file (default: song.yaml)")
	parser.add_argument("--seed", type=int, default=None, help="Seed for shuffles and random notes")
	parser.add_argument("-v", "--verbose", action="store_true", help="Log every compiled event")
	args = parser.parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	config = cliptune.config.load_config(args.song)

	rng = None

	if args.seed is not None:
		rng = random.Random(args.seed)

	try:
		song = cliptune.config.song_from_config(config, rng=rng)
		arranged = song.session.arrange(song.channel_patterns, clip_duration=song.clip_duration)
	except (cliptune.errors.CliptuneError, ValueError) as exc:
		logger.error(f"Failed to compile {args.song}: {exc}")
		return 1

	for channel in song.session.channels:
		for i, compiled in enumerate(channel.clips):
			if compiled is None:
				continue
			window = channel.render_window(i)
			logger.info(
				f"Channel {channel.idx} {channel.name!r} clip {i}: {compiled.spec.pattern!r}, "
				f"{len(compiled.events)} events, render window {window.repetitions} passes / {window.duration:g} beats"
			)
			for event in compiled.events:
				logger.debug(f"  {event.time:g} {' '.join(event.pitches) or '-'} dur={event.duration:g} vel={event.velocity}")

	for item in arranged:
		seconds = cliptune.durations.beats_to_seconds(item.start, song.bpm)
		logger.info(f"{seconds:8.2f}s  channel {item.channel.idx} {item.channel.name!r} clip {item.clip_index} for {item.length:g} beats")

	return 0


if __name__ == "__main__":
	raise SystemExit(main())
