"""Pick the final output from the messages of all matching rules."""

from __future__ import annotations

import random
from collections.abc import Sequence

from occasion.domain.models import MultipleBehavior, SelectionKind


def select_output(
    behavior: MultipleBehavior,
    messages: Sequence[str],
    rng: random.Random | None = None,
) -> str:
    """Apply *behavior* to *messages* (declaration order).

    Every policy yields ``""`` when nothing matched.
    """
    if behavior.kind is SelectionKind.ALL:
        return behavior.separator.join(messages)
    if not messages:
        return ""
    if behavior.kind is SelectionKind.FIRST:
        return messages[0]
    if behavior.kind is SelectionKind.LAST:
        return messages[-1]
    return (rng or random).choice(messages)
