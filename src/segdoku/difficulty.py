"""Difficulty tuning: board size and clue density per difficulty level."""

import math

LOW = 1
HIGH = 9

MIN_BOARD_SIZE = 5
MAX_BOARD_SIZE = 9

# Upper bounds on the share of blank cells at LOW and HIGH difficulty.
MINIMAL_EMPTY = 70
MAXIMAL_EMPTY = 95

LEVELS_PER_DIFFICULTY = 5


def check_difficulty(difficulty: int) -> int:
    if isinstance(difficulty, bool) or not isinstance(difficulty, int):
        raise ValueError(f"Difficulty must be an integer, got {difficulty!r}")
    if not LOW <= difficulty <= HIGH:
        raise ValueError(f"Difficulty {difficulty} outside {LOW}..{HIGH}")
    return difficulty


def percentage_help(difficulty: int) -> float:
    """Minimal percentage of cells that must be shown as clues."""
    check_difficulty(difficulty)
    ratio = (difficulty - LOW) / (HIGH - LOW)
    return 100 - (MINIMAL_EMPTY + ratio * (MAXIMAL_EMPTY - MINIMAL_EMPTY))


def get_size(difficulty: int) -> int:
    check_difficulty(difficulty)
    ratio = (difficulty - LOW) / (HIGH - LOW)
    size = MIN_BOARD_SIZE + math.floor(ratio * (MAX_BOARD_SIZE - MIN_BOARD_SIZE + 1))
    return min(size, MAX_BOARD_SIZE)


def get_difficulty(level: int) -> int:
    """Map an unbounded player level (>= 1) onto LOW..HIGH."""
    if level < 1:
        raise ValueError(f"Level must be at least 1, got {level}")
    return min(LOW + (level - 1) // LEVELS_PER_DIFFICULTY, HIGH)
