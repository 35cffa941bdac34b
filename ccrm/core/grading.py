"""
Grade scale mapping percentage marks to letter grades and grade points.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .exceptions import ValidationError


@dataclass(frozen=True)
class GradeBand:
    """A single (threshold, letter, points) row of a grade scale.

    The failing band has no threshold: it catches everything below the
    lowest passing band.
    """
    min_percentage: Optional[float]
    letter: str
    points: int

    def __str__(self) -> str:
        return self.letter


class GradeScale:
    """Ordered set of grade bands, highest threshold first."""

    def __init__(self, bands: Iterable[Tuple[float, str, int]], failing: Tuple[str, int] = ("F", 0)):
        rows = [GradeBand(float(minimum), letter, points) for minimum, letter, points in bands]
        if not rows:
            raise ValidationError("A grade scale needs at least one passing band")
        for higher, lower in zip(rows, rows[1:]):
            if lower.min_percentage >= higher.min_percentage:
                raise ValidationError("Grade bands must have strictly descending thresholds")
        self._bands: Tuple[GradeBand, ...] = tuple(rows)
        self._failing = GradeBand(None, failing[0], failing[1])

    @property
    def bands(self) -> Tuple[GradeBand, ...]:
        """Passing bands followed by the failing band."""
        return self._bands + (self._failing,)

    @property
    def failing(self) -> GradeBand:
        return self._failing

    def grade_for(self, percentage: float) -> GradeBand:
        """Return the first band whose minimum the percentage meets."""
        for band in self._bands:
            if percentage >= band.min_percentage:
                return band
        return self._failing

    def band_for_letter(self, letter: str) -> Optional[GradeBand]:
        """Look a band up by its letter."""
        for band in self.bands:
            if band.letter == letter:
                return band
        return None


DEFAULT_GRADE_SCALE = GradeScale([
    (90, "S", 10),
    (80, "A", 9),
    (70, "B", 8),
    (60, "C", 7),
    (50, "D", 6),
    (40, "E", 5),
])


def grade_for(percentage: float) -> GradeBand:
    """Map a percentage to its band on the default scale."""
    return DEFAULT_GRADE_SCALE.grade_for(percentage)
