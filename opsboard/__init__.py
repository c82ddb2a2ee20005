"""
OPS Board - multi-LLM ops task dashboard.

Simulates ops tasks running as pipelines of model-attributed stages, and
derives those pipelines from a planning chat.
"""

__version__ = "0.1.0"
__author__ = "OPS Board Team"

from opsboard.core.board import TaskBoard

__all__ = ["TaskBoard", "__version__"]
