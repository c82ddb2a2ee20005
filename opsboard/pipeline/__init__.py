"""Pipelines - planning replies, chat-to-pipeline derivation and task construction."""

from opsboard.pipeline.deriver import (
    derive_pipeline,
    find_latest_plan,
    is_plan_line,
    split_plan_line,
)
from opsboard.pipeline.factory import DEFAULT_PIPELINE, IdGenerator, TaskFactory, make_task
from opsboard.pipeline.planner import plan_reply

__all__ = [
    "DEFAULT_PIPELINE",
    "IdGenerator",
    "TaskFactory",
    "derive_pipeline",
    "find_latest_plan",
    "is_plan_line",
    "make_task",
    "plan_reply",
    "split_plan_line",
]
