"""
Rating Summary Value Object
Aggregated company rating derived from reviews
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

MIN_RATING = 1
MAX_RATING = 5


def round_rating(value: float) -> float:
    """Round a mean rating to one decimal, half away from zero"""
    return int(value * 10 + 0.5) / 10


@dataclass(frozen=True)
class RatingSummary:
    """Average, count and per-star distribution of a company's reviews"""

    average_rating: float = 0.0
    review_count: int = 0
    distribution: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def from_aggregate(
        cls,
        average: Optional[float],
        count: int,
        distribution: Optional[Dict[int, int]] = None,
    ) -> "RatingSummary":
        """Build from database aggregates (AVG may come back as Decimal or None)"""
        if not count or average is None:
            return cls()
        buckets = {star: 0 for star in range(MIN_RATING, MAX_RATING + 1)}
        buckets.update(distribution or {})
        return cls(
            average_rating=round_rating(float(average)),
            review_count=count,
            distribution=buckets,
        )

    def percentages(self) -> List[dict]:
        """Distribution as a list of {rating, count, percentage}"""
        return [
            {
                "rating": star,
                "count": self.distribution.get(star, 0),
                "percentage": (
                    self.distribution.get(star, 0) / self.review_count * 100
                    if self.review_count else 0
                ),
            }
            for star in range(MIN_RATING, MAX_RATING + 1)
        ]
