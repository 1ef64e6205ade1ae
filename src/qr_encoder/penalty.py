"""Mask penalty rules used to pick the most readable mask pattern.

The total is the sum of four rules evaluated on the finished, masked grid:

* N1: runs of five or more same-colored modules in a row or column.
* N2: 2x2 blocks of a single color.
* N3: 1:1:3:1:1 finder-like patterns with a light margin on one side.
* N4: imbalance between dark and light modules.
"""

from __future__ import annotations

from typing import Iterator, List, Sequence

from .errors import check

PENALTY_N1 = 3
PENALTY_N2 = 3
PENALTY_N3 = 40
PENALTY_N4 = 10

MAX_PENALTY = 2568888

Grid = Sequence[Sequence[bool]]


def penalty_score(modules: Grid) -> int:
    result = (
        penalty_runs(modules)
        + penalty_blocks(modules)
        + penalty_finder_like(modules)
        + penalty_balance(modules)
    )
    check(0 <= result <= MAX_PENALTY, "penalty score out of range")
    return result


def penalty_runs(modules: Grid) -> int:
    return sum(_penalty_consecutive(line) for line in _lines(modules))


def penalty_blocks(modules: Grid) -> int:
    size = len(modules)
    score = 0
    for y in range(size - 1):
        for x in range(size - 1):
            color = modules[y][x]
            if color == modules[y][x + 1] == modules[y + 1][x] == modules[y + 1][x + 1]:
                score += PENALTY_N2
    return score


def penalty_finder_like(modules: Grid) -> int:
    size = len(modules)
    return sum(_count_finder_like(line, size) for line in _lines(modules)) * PENALTY_N3


def penalty_balance(modules: Grid) -> int:
    size = len(modules)
    dark = sum(sum(1 for color in row if color) for row in modules)
    total = size * size
    # Smallest k >= 0 with (45 - 5k)% <= dark share <= (55 + 5k)%
    k = (abs(dark * 20 - total * 10) + total - 1) // total - 1
    check(0 <= k <= 9, "dark module ratio out of range")
    return k * PENALTY_N4


def _lines(modules: Grid) -> Iterator[Sequence[bool]]:
    yield from modules
    for x in range(len(modules)):
        yield [row[x] for row in modules]


def _penalty_consecutive(line: Sequence[bool]) -> int:
    score = 0
    run_color = False
    run_length = 0
    for color in line:
        if color == run_color:
            run_length += 1
            if run_length == 5:
                score += PENALTY_N1
            elif run_length > 5:
                score += 1
        else:
            run_color = color
            run_length = 1
    return score


def _count_finder_like(line: Sequence[bool], size: int) -> int:
    history = [0] * 7
    count = 0
    run_color = False
    run_length = 0
    for color in line:
        if color == run_color:
            run_length += 1
        else:
            _add_history(history, run_length, size)
            if not run_color:
                count += _count_patterns(history, size)
            run_color = color
            run_length = 1
    # Close the line with a light run standing in for the quiet zone.
    if run_color:
        _add_history(history, run_length, size)
        run_length = 0
    _add_history(history, run_length + size, size)
    return count + _count_patterns(history, size)


def _add_history(history: List[int], run_length: int, size: int) -> None:
    if history[0] == 0:
        run_length += size  # light border before the first run
    history.pop()
    history.insert(0, run_length)


def _count_patterns(history: Sequence[int], size: int) -> int:
    n = history[1]
    check(n <= size * 3)
    core = n > 0 and history[2] == n and history[3] == n * 3 and history[4] == n and history[5] == n
    return (
        int(core and history[0] >= n * 4 and history[6] >= n)
        + int(core and history[6] >= n * 4 and history[0] >= n)
    )
