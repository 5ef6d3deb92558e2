# autoradio/ui/cli.py
import argparse
import sys

from autoradio.lastfm.client import LastFmClient
from autoradio.logging_utils import configure_logging
from autoradio.player.queue import PlayQueue
from autoradio.radio.engine import AutoradioEngine
from autoradio.radio.models import Found
from autoradio.settings import Settings, parse_craziness


def parse_seed(value: str):
    """'Artist - Track' -> ('Artist', 'Track'). Splits on the first ' - '."""
    artist, sep, track = value.partition(" - ")
    if not sep or not artist.strip() or not track.strip():
        raise argparse.ArgumentTypeError(f"seed must look like 'Artist - Track', got {value!r}")
    return artist.strip(), track.strip()


def craziness_arg(value: str) -> float:
    try:
        return parse_craziness(value, "--craziness")
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser():
    parser = argparse.ArgumentParser(
        description="Autoradio: keep a play queue going with similar tracks from Last.fm"
    )
    parser.add_argument("--seed", "-s", action="append", type=parse_seed, default=[],
                        help="Queue item as 'Artist - Track' (repeatable, last one is playing)")
    parser.add_argument("--craziness", "-c", type=craziness_arg, default=None,
                        help="0-100, how far to stray from the queue (default from AUTORADIO_CRAZINESS or 10)")
    parser.add_argument("--count", "-n", type=int, default=5,
                        help="How many tracks to add (default=5)")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Seconds per Last.fm call (default from AUTORADIO_PROVIDER_TIMEOUT or 15)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR")
    return parser


def main(argv=None, provider=None):
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"Bad configuration: {e}")
        return 1

    if args.craziness is not None:
        settings.autoradio_craziness = args.craziness
    if args.timeout is not None:
        settings.provider_timeout = args.timeout or None
    if args.log_level:
        configure_logging(args.log_level, env_override=False)
    else:
        configure_logging(settings.log_level)

    if not args.seed:
        print("No seeds specified. Use --seed 'Artist - Track'")
        return 1

    if provider is None:
        try:
            provider = LastFmClient(settings.require_api_key(), timeout=settings.provider_timeout)
        except RuntimeError as e:
            print(e)
            return 1

    queue = PlayQueue.from_pairs(args.seed)
    current = queue.current()
    print(f"Now playing: {current.track_name} — {current.artist_name}  (craziness {settings.autoradio_craziness:g})")

    added = 0
    with AutoradioEngine(provider, provider_timeout=settings.provider_timeout,
                         max_workers=settings.max_workers) as engine:
        for _ in range(max(args.count, 0)):
            result = engine.select_and_enqueue(queue, settings, queue)
            if not isinstance(result, Found):
                print(f"Stopping: {result.reason}")
                break
            added += 1
            queue.advance()
            via = "similar tracks" if result.source == "tracks" else "similar artist"
            print(f"  + {result.track.name} — {result.artist_name}  [{via}]")

    print(f"Added {added} track(s). Queue is now {len(queue)} long.")
    return 0 if added else 1


if __name__ == "__main__":
    sys.exit(main())
