"""Reply planner - the canned "AI" side of the planning chat.

This is a static template, not a planning algorithm. Its only job is to
produce a numbered proposal that the pipeline deriver can parse back into
steps.
"""

PLAN_SEPARATOR = " — "

PROPOSED_STAGES: tuple[tuple[str, str], ...] = (
    ("Ingest Inputs", "GPT-4"),
    ("Plan & Branch", "Claude Sonnet 4.5"),
    ("Execute Tools", "Kimi K2"),
    ("Verify & Report", "GPT-4"),
)

GREETING = "Describe your ops task. I will help plan the multi-LLM pipeline before you run it."


def format_plan_lines(stages: tuple[tuple[str, str], ...] = PROPOSED_STAGES) -> str:
    """Render stages as ``"1. Name — LLM"`` lines."""
    return "\n".join(
        f"{index}. {name}{PLAN_SEPARATOR}{llm}" for index, (name, llm) in enumerate(stages, start=1)
    )


def plan_reply(text: str) -> str:
    """
    Propose a four-stage pipeline for a task description.

    Args:
        text: Whatever the user described.

    Returns:
        Reply text with a numbered list of stages and their worker models.

    Example:
        >>> print(plan_reply("Rotate API keys").splitlines()[2])
        1. Ingest Inputs — GPT-4
    """
    return (
        f"Here is a concise pipeline for “{text}”:\n\n"
        f"{format_plan_lines()}\n\n"
        "You can start as-is or ask me to adjust steps/LLMs."
    )
