from __future__ import annotations

from typing import Sequence

# Best to worst.
GRADE_SCALE = ("A+", "A", "A-", "B+", "B", "B-", "C+", "C", "C-", "D+", "D", "D-", "E", "F", "T", "M")

_RANK = {grade: len(GRADE_SCALE) - index for index, grade in enumerate(GRADE_SCALE)}


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def compare_grades(grade1: str, grade2: str) -> int:
    """Return >0 if ``grade1`` is better than ``grade2``, <0 if worse, 0 if equal.

    Grades outside the known scale fall back to plain string order, so the
    alphabetically smaller grade ranks worse.
    """
    rank1 = _RANK.get(grade1)
    rank2 = _RANK.get(grade2)
    if rank1 is None or rank2 is None:
        return (grade1 > grade2) - (grade1 < grade2)
    return _sign(rank1 - rank2)


def worst_grade(grades: Sequence[str]) -> str:
    if not grades:
        raise ValueError("worst_grade() requires at least one grade")
    worst = grades[0]
    for grade in grades[1:]:
        if compare_grades(grade, worst) < 0:
            worst = grade
    return worst
