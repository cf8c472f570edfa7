import time
from typing import Iterator, List, Tuple
from utils import MAX_COMBINATIONS, vlog
from groups import Combination, group_value, validate_digits


# ============== Depth-first walk ==============
def _walk(digits: str, stack: List[Tuple[int, Tuple[int, ...]]]) -> Iterator[Combination]:
    """Drain ``stack`` depth-first, yielding each complete decomposition.

    Entries are ``(index, groups)`` where ``groups`` is the tuple of group
    values covering ``digits[:index]``. Each entry owns its tuple, so sibling
    branches never see each other's groups. The two-digit branch is pushed
    beneath the one-digit branch: everything reachable through the one-digit
    group at ``index`` is yielded before anything through the pair.

    The generator leaves unexplored entries on ``stack`` while suspended,
    which lets the caller tell a finished search from one cut short.
    """
    n = len(digits)
    while stack:
        index, path = stack.pop()
        if index == n:
            yield Combination.from_groups(path)
            continue
        pair = group_value(digits, index, 2)
        if pair is not None:
            stack.append((index + 2, path + (pair,)))
        single = group_value(digits, index, 1)
        if single is not None:
            stack.append((index + 1, path + (single,)))


def iter_combinations(digits: str) -> Iterator[Combination]:
    """Lazily yield every combination of ``digits`` in discovery order (no cap)."""
    digits = validate_digits(digits)
    if not digits:
        return
    yield from _walk(digits, [(0, ())])


def enumerate_combinations(digits: str, cap: int = MAX_COMBINATIONS) -> Tuple[List[Combination], bool]:
    """Return ``(results, truncated)`` for ``digits``.

    Results are in discovery order: at every position the one-digit group is
    tried before the two-digit group. The search stops everywhere as soon as
    ``cap`` combinations have been found; ``truncated`` is True when it
    stopped with branches still unexplored. A search that happens to finish
    with exactly ``cap`` results reports False.

    Raises InvalidInputError for non-digit input before any search is done.
    """
    if isinstance(cap, bool) or not isinstance(cap, int) or cap < 1:
        raise ValueError(f"cap must be a positive integer, got {cap!r}")
    digits = validate_digits(digits)
    t0 = time.time()
    results: List[Combination] = []
    truncated = False
    if digits:
        stack = [(0, ())]
        for combo in _walk(digits, stack):
            results.append(combo)
            if len(results) >= cap:
                truncated = bool(stack)
                break
    vlog(f"Enumerated {len(results)} combination(s) for {len(digits)} digit(s), truncated={truncated}", t0)
    return results, truncated
