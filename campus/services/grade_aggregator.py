# campus/services/grade_aggregator.py
"""Coefficient-weighted averages over a student's grades.

Pure functions over plain values so they can be exercised without a
database. Only validated and published grades count; the current semester
and academic year are passed in by the caller.
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

DEFAULT_COEFFICIENT = 1


@dataclass(frozen=True)
class GradeEntry:
    value: float
    coefficient: Optional[int] = DEFAULT_COEFFICIENT
    semester: int = 1
    academic_year: str = ""
    validated: bool = True
    is_published: bool = True


def format_average(average: float) -> str:
    return f"{average:.2f}"


def compute_average(grades: Iterable[GradeEntry]) -> str:
    """Weighted average of the given grades, "0.00" when there are none."""
    weighted_sum = 0.0
    total_weight = 0
    for grade in grades:
        coefficient = grade.coefficient or DEFAULT_COEFFICIENT
        weighted_sum += grade.value * coefficient
        total_weight += coefficient

    if total_weight == 0:
        return format_average(0)
    return format_average(weighted_sum / total_weight)


def compute_semester_and_yearly_averages(
    grades: Iterable[GradeEntry],
    current_semester: int,
    current_academic_year: str,
) -> Tuple[str, str]:
    """Return (semester_average, yearly_average) for the current period."""
    visible = [g for g in grades if g.validated and g.is_published]

    semester_grades = [
        g for g in visible
        if g.semester == current_semester and g.academic_year == current_academic_year
    ]
    yearly_grades = [g for g in visible if g.academic_year == current_academic_year]

    return compute_average(semester_grades), compute_average(yearly_grades)
