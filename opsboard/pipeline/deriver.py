"""Pipeline deriver - extracts a structured pipeline from a chat transcript.

The latest AI message containing a numbered list is treated as the plan.
Each ``"N. Name — LLM"`` line becomes a step; the first step starts running
and the rest are queued.
"""

import re
from collections.abc import Sequence

from loguru import logger

from opsboard.core.models import Message, MessageRole, Step, TaskStatus
from opsboard.pipeline.planner import PLAN_SEPARATOR

DEFAULT_STEP_LLM = "GPT-4"

_PLAN_LINE = re.compile(r"^\d+\.")
_PLAN_LINE_PREFIX = re.compile(r"^\d+\.\s*")
_PLAN_START = re.compile(r"^1\.", re.MULTILINE)


def is_plan_line(line: str) -> bool:
    """Check whether a line is a numbered list item like ``"3. Do thing"``."""
    return bool(_PLAN_LINE.match(line))


def split_plan_line(line: str, default_llm: str = DEFAULT_STEP_LLM) -> tuple[str, str]:
    """
    Split a numbered plan line into step name and worker label.

    Args:
        line: A line for which ``is_plan_line`` holds.
        default_llm: Label used when the separator or label is missing.

    Returns:
        ``(name, llm)`` with surrounding whitespace removed.

    Example:
        >>> split_plan_line("2. Plan & Branch — Claude Sonnet 4.5")
        ('Plan & Branch', 'Claude Sonnet 4.5')
        >>> split_plan_line("1. Collect Data")
        ('Collect Data', 'GPT-4')
    """
    rest = _PLAN_LINE_PREFIX.sub("", line, count=1)
    parts = rest.split(PLAN_SEPARATOR)
    name = parts[0].strip()
    llm = parts[1].strip() if len(parts) > 1 else ""
    return name, llm or default_llm


def find_latest_plan(messages: Sequence[Message]) -> Message | None:
    """Return the newest AI message with a line starting ``"1."``, if any."""
    for message in reversed(messages):
        if message.role == MessageRole.AI and _PLAN_START.search(message.text):
            return message
    return None


def derive_pipeline(
    messages: Sequence[Message],
    default_llm: str = DEFAULT_STEP_LLM,
) -> list[Step] | None:
    """
    Derive pipeline steps from the latest plan in a transcript.

    Args:
        messages: Chat transcript, oldest first.
        default_llm: Label for lines without one.

    Returns:
        ``None`` when no AI message carries a plan. Otherwise the extracted
        steps in order, possibly empty when nothing parsed; callers must treat
        an empty list as "no usable plan".
    """
    plan = find_latest_plan(messages)
    if plan is None:
        logger.debug("No plan found in transcript")
        return None

    steps: list[Step] = []
    for line in plan.text.splitlines():
        if not is_plan_line(line):
            continue
        name, llm = split_plan_line(line, default_llm)
        if not name:
            logger.debug(f"Skipping plan line without a step name: {line!r}")
            continue
        status = TaskStatus.RUNNING if not steps else TaskStatus.QUEUED
        steps.append(Step(name=name, status=status, llm=llm))

    logger.debug(f"Derived {len(steps)} step(s) from plan")
    return steps
