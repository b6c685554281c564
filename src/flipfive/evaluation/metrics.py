from __future__ import annotations

from typing import NamedTuple, Optional, Sequence


class RunSummary(NamedTuple):
    presses: int
    solved: bool
    excess: Optional[int]


def summarize_run(
    actions: Sequence[int],
    counts: Sequence[int],
    budget_T: int,
    optimal: Optional[int] = None,
) -> RunSummary:
    """Score the `(actions, counts)` of a FlipFiveGame.run.

    `solved` means the board went dark within `budget_T` presses. `excess`
    is the presses spent beyond `optimal`, or None when the board has no
    known optimum.
    """
    presses = len(actions)
    solved = 0 in counts[: budget_T + 1]
    excess = None if optimal is None else presses - optimal
    return RunSummary(presses, solved, excess)
