"""Command line entry point for running tracked orchestrations."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from . import __version__
from .config import TrackerSettings, get_settings
from .orchestrator import DEFAULT_BRIEF, build_orchestrator_prompt, run_orchestration
from .profiles import ProfileLoadError, ProfileLoader, agent_definitions
from .runtime import AgentRuntime, AgentRuntimeError, ensure_credentials
from .tracking import ConsoleSink, DelegationTracker

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging for the tracker CLI."""

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def print_header(title: str) -> None:
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60 + "\n")


def print_section(section: str) -> None:
    print(f"\n--- {section} ---\n")


def _load_settings(args: argparse.Namespace) -> TrackerSettings:
    settings = get_settings()
    updates: dict[str, object] = {}
    if getattr(args, "model", None):
        updates["claude_model"] = args.model
    if getattr(args, "interval", None) is not None:
        if args.interval <= 0:
            raise ValueError("--interval must be greater than zero")
        updates["progress_interval"] = args.interval
    return settings.model_copy(update=updates) if updates else settings


async def _run(settings: TrackerSettings, brief: str) -> int:
    profiles = ProfileLoader(settings.profile_paths, allowed_tools=settings.allowed_tools).load_all()
    if not profiles:
        logger.warning(
            "No subagent profiles found",
            extra={"search_paths": [str(path) for path in settings.profile_paths]},
        )

    runtime = AgentRuntime(settings, agents=agent_definitions(profiles))
    prompt = build_orchestrator_prompt(brief, profiles)
    tracker = DelegationTracker(
        ConsoleSink(),
        interval=settings.progress_interval,
        context_preview_chars=settings.context_preview_chars,
    )
    with tracker:
        await run_orchestration(runtime, tracker, prompt)
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    try:
        settings = _load_settings(args)
    except (ValidationError, ValueError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    configure_logging(settings.log_level)
    print_header("Multi-Agent Orchestration")

    try:
        ensure_credentials(settings)
    except AgentRuntimeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    brief = DEFAULT_BRIEF
    if args.brief:
        try:
            brief = Path(args.brief).read_text(encoding="utf-8")
        except OSError as exc:
            print(f"Unable to read brief: {exc}", file=sys.stderr)
            return 1

    print_section("Coordinated delegation across specialized subagents")
    try:
        exit_code = asyncio.run(_run(settings, brief))
    except ProfileLoadError as exc:
        print(f"Profile error: {exc}", file=sys.stderr)
        return 1
    except AgentRuntimeError as exc:
        print(f"Error during multi-agent orchestration: {exc}", file=sys.stderr)
        return 1

    print("Multi-agent orchestration finished.")
    return exit_code


def cmd_profiles(args: argparse.Namespace) -> int:
    settings = get_settings()
    try:
        profiles = ProfileLoader(settings.profile_paths, allowed_tools=settings.allowed_tools).load_all()
    except ProfileLoadError as exc:
        print(f"Profile error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([profile.model_dump() for profile in profiles.values()], indent=2))
    else:
        for profile in profiles.values():
            model = profile.model or "inherit"
            print(f"{profile.id} [{model}] -> {profile.description}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="delegation-tracker",
        description="Run an orchestrator with parallel subagents and track their progress.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="cmd")

    p_run = sub.add_parser("run", help="Run the orchestrator and stream tracked progress")
    p_run.add_argument("--brief", help="Path to a project brief (defaults to the bundled brief)")
    p_run.add_argument("--model", help="Override CLAUDE_MODEL for the orchestrator")
    p_run.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between 'still working' updates (default: TRACKER_PROGRESS_INTERVAL)",
    )
    p_run.set_defaults(func=cmd_run)

    p_profiles = sub.add_parser("profiles", help="List subagent profiles")
    p_profiles.add_argument("--json", action="store_true", help="Output JSON")
    p_profiles.set_defaults(func=cmd_profiles)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return
    exit_code = args.func(args)
    if exit_code:
        raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
