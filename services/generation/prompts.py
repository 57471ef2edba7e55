"""Prompt text for portrait editing requests."""

DEFAULT_INSTRUCTION = (
    "Using the uploaded image as the sole reference, realistically modify the subject's appearance "
    "to show the results of a successful hair transplant, 1 year post-surgery.\n\n"
    "Add dense, natural-looking hair to the balding areas on the top and crown of the head."
)

FEEDBACK_HEADING = "User feedback:"


def build_feedback_block(feedback: str) -> str:
    """Return the labeled block appended to an instruction on regeneration."""
    return f"\n\n{FEEDBACK_HEADING}\n{feedback}"
