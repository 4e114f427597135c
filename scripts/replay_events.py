"""Replay a recorded JSONL event log through the delegation tracker."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Iterable, TextIO

from delegation_tracker.config import TrackerSettings
from delegation_tracker.events import EventDecodeError, TrackerEvent, event_from_dict
from delegation_tracker.tracking import ConsoleSink, DelegationTracker


def load_events(lines: Iterable[str]) -> list[TrackerEvent]:
    """Decode one event per non-blank line, reporting the offending line number."""

    events: list[TrackerEvent] = []
    for number, raw in enumerate(lines, start=1):
        if not raw.strip():
            continue
        try:
            events.append(event_from_dict(json.loads(raw)))
        except json.JSONDecodeError as exc:
            raise EventDecodeError(f"line {number}: invalid JSON ({exc.msg})") from exc
        except EventDecodeError as exc:
            raise EventDecodeError(f"line {number}: {exc}") from exc
    return events


async def replay(
    events: Iterable[TrackerEvent],
    *,
    interval: float,
    pace: float = 0.0,
    stream: TextIO | None = None,
) -> DelegationTracker:
    tracker = DelegationTracker(ConsoleSink(stream), interval=interval)
    with tracker:
        for event in events:
            tracker.handle(event)
            if pace > 0:
                await asyncio.sleep(pace)
    return tracker


def replay_log(args: argparse.Namespace) -> int:
    settings = TrackerSettings()
    interval = args.interval if args.interval is not None else settings.progress_interval
    if interval <= 0:
        print("Interval must be greater than zero", file=sys.stderr)
        return 1

    try:
        if args.input in (None, "-"):
            events = load_events(sys.stdin)
        else:
            with Path(args.input).open(encoding="utf-8") as handle:
                events = load_events(handle)
    except OSError as exc:
        print(f"Unable to read event log: {exc}", file=sys.stderr)
        return 1
    except EventDecodeError as exc:
        print(f"Invalid event log: {exc}", file=sys.stderr)
        return 1

    asyncio.run(replay(events, interval=interval, pace=args.pace))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Feed a JSONL event log through the delegation tracker and print status lines."
    )
    parser.add_argument("input", nargs="?", default=None, help="Event log path ('-' or omitted for stdin)")
    parser.add_argument(
        "--pace",
        type=float,
        default=0.0,
        help="Seconds to wait between events so progress ticks can fire (default: 0)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between progress ticks (default: TRACKER_PROGRESS_INTERVAL)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    exit_code = replay_log(args)
    if exit_code:
        raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
