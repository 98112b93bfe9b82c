"""Sliding-window trimming for session histories."""

from typing import TypeVar

T = TypeVar("T")

# Each turn is a user entry plus a model entry
DEFAULT_MAX_TURNS = 40


def trim_history(history: list[T], max_turns: int = DEFAULT_MAX_TURNS) -> list[T]:
    """Bound a history to its most recent ``max_turns`` user/model pairs.

    Older entries are dropped from the front with no summarization.

    Args:
        history: Entries in chronological order.
        max_turns: Number of user/model pairs to keep.

    Returns:
        The last ``max_turns * 2`` entries when the history is longer than
        that, otherwise ``history`` itself.
    """
    limit = max_turns * 2
    if len(history) > limit:
        return history[len(history) - limit :]
    return history
