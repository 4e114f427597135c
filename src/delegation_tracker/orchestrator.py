"""Drive one orchestrated run and feed its events to a tracker."""

from __future__ import annotations

import logging
from typing import Mapping

from .profiles import SubagentProfile
from .runtime import AgentRuntime, translate_message
from .tracking import DelegationTracker, RunStatistics

logger = logging.getLogger(__name__)

DEFAULT_BRIEF = """\
Release Objective: ship a CLI utility that turns raw uptime logs into daily health digests for engineering leadership.

Key inputs the subagents should consider:
- Current telemetry pain points: noisy alerts, slow manual synthesis, lack of success metrics.
- Stakeholders: platform engineering (wants actionable signals), SRE (cares about anomaly detection), leadership (needs crisp rollups).
- Guardrails: must plug into existing log ingestion, emphasize resiliency and observability.

Deliverable expectations for the orchestrator:
- A consolidated package that includes research highlights, an implementation outline, and risk/QA guidance.
- Evidence that parallel delegation saved time compared to serial execution.
- A clear next-step checklist the team can execute immediately.
"""

_EXPECTATIONS = """\
1. Start with a short game plan that explains how the work will be split and why the subagents can operate concurrently.
2. Immediately dispatch one Task call per subagent so their work happens in parallel; give each subagent focused instructions tailored to its strengths.
3. Wait for all subagent results, then synthesize a single integrated deliverable with these sections:
   - Unified Outcome (one narrative blending all contributions).
   - Integrated Deliverables (table mapping each subagent to its key outputs and how they combine).
   - Parallel Impact (quantify or narrate the time saved versus a sequential approach, referencing overlapping work).
   - Next Actions (numbered checklist the primary team should execute next).
4. The final answer must explicitly weave information from every subagent so nothing feels siloed."""


def build_orchestrator_prompt(brief: str, profiles: Mapping[str, SubagentProfile]) -> str:
    roster = "\n".join(
        f"- {profile.id}: {profile.description}" for profile in profiles.values()
    )
    sections = [
        "You are the lead orchestrator for a rapid parallel working session.",
        "Shared project brief:\n" + brief.strip(),
        "Subagents that you can launch via the Task tool (set subagent_type to the agent id):\n"
        + (roster or "- general-purpose: handle any delegated work"),
        "Execution expectations:\n" + _EXPECTATIONS,
    ]
    return "\n\n".join(sections)


async def run_orchestration(
    runtime: AgentRuntime,
    tracker: DelegationTracker,
    prompt: str,
) -> RunStatistics | None:
    """Stream ``prompt`` through ``runtime`` and report progress via ``tracker``.

    The tracker is closed on every exit path so no progress timer outlives the
    run. Runtime failures propagate to the caller.
    """

    message_count = 0
    try:
        async for message in runtime.stream(prompt):
            message_count += 1
            for event in translate_message(message):
                tracker.handle(event)
    finally:
        outstanding = len(tracker)
        tracker.close()
        logger.info(
            "Orchestration stream ended",
            extra={"messages": message_count, "outstanding_tasks": outstanding},
        )
    return tracker.last_statistics


__all__ = ["DEFAULT_BRIEF", "build_orchestrator_prompt", "run_orchestration"]
