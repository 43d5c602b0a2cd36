"""
Salary Value Object
Immutable salary sub-record of a job posting
"""
from dataclasses import dataclass
from typing import Optional

from ..enums import Currency, SalaryType


@dataclass(frozen=True)
class Salary:
    """Salary offered for a job"""

    min_salary: Optional[int] = None
    max_salary: Optional[int] = None
    currency: Currency = Currency.USD
    is_visible: bool = True
    salary_type: SalaryType = SalaryType.ANNUAL

    def __post_init__(self):
        """Validate salary range"""
        if self.min_salary is not None and self.min_salary < 0:
            raise ValueError("Minimum salary cannot be negative")

        if self.max_salary is not None:
            if self.max_salary < 0:
                raise ValueError("Maximum salary cannot be negative")
            if self.min_salary is not None and self.max_salary < self.min_salary:
                raise ValueError("Maximum salary cannot be less than minimum salary")

    def formatted(self) -> Optional[str]:
        """Human-readable range, e.g. 'USD 50,000 - 70,000'"""
        currency = self.currency.value
        if self.min_salary and self.max_salary:
            return f"{currency} {self.min_salary:,} - {self.max_salary:,}"
        if self.min_salary:
            return f"{currency} {self.min_salary:,}+"
        if self.max_salary:
            return f"Up to {currency} {self.max_salary:,}"
        return None

    def __str__(self) -> str:
        return self.formatted() or "Not specified"
