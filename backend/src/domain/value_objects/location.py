"""
Job Location Value Object
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class JobLocation:
    """Where a job is performed"""

    city: Optional[str] = None
    state: Optional[str] = None
    is_remote: bool = False

    def __str__(self) -> str:
        parts = [p for p in (self.city, self.state) if p]
        label = ", ".join(parts) if parts else "Unspecified"
        return f"{label} (Remote)" if self.is_remote else label
