"""
Earned value figures, computed on demand from a Tasks store.

Ratios whose denominator is zero are reported as 0 instead of failing or
producing NaN/inf.
"""
from pydantic import BaseModel, Field

from .store import Tasks

def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator

def planned_value(tasks: Tasks) -> float:
    return tasks.root.planned_value

def actual_cost(tasks: Tasks) -> float:
    return tasks.root.actual_cost

def completion_percentage(tasks: Tasks) -> float:
    """Share of leaf tasks that are done, between 0 and 1 (0 for an empty tree)."""
    return _ratio(len(tasks.done_tasks()), len(tasks.leaf_tasks()))

def earned_value(tasks: Tasks) -> float:
    return planned_value(tasks) * completion_percentage(tasks)

def spi(tasks: Tasks) -> float:
    """Schedule performance index, EV / PV."""
    return _ratio(earned_value(tasks), planned_value(tasks))

def sv(tasks: Tasks) -> float:
    """Schedule variance, EV - PV."""
    return earned_value(tasks) - planned_value(tasks)

def cpi(tasks: Tasks) -> float:
    """Cost performance index, EV / AC."""
    return _ratio(earned_value(tasks), actual_cost(tasks))

def cv(tasks: Tasks) -> float:
    """Cost variance, EV - AC."""
    return earned_value(tasks) - actual_cost(tasks)

class EarnedValueReport(BaseModel):
    """All earned value figures of a project at one point in time."""

    planned_value: float = Field(description="Budgeted cost of all scheduled work")
    actual_cost: float = Field(description="Cost incurred so far")
    completion_percentage: float = Field(description="Done leaves over all leaves, 0..1")
    earned_value: float = Field(description="Planned value scaled by completion")
    spi: float = Field(description="Schedule performance index")
    sv: float = Field(description="Schedule variance")
    cpi: float = Field(description="Cost performance index")
    cv: float = Field(description="Cost variance")

    @classmethod
    def from_tasks(cls, tasks: Tasks) -> 'EarnedValueReport':
        return cls(
            planned_value=planned_value(tasks),
            actual_cost=actual_cost(tasks),
            completion_percentage=completion_percentage(tasks),
            earned_value=earned_value(tasks),
            spi=spi(tasks),
            sv=sv(tasks),
            cpi=cpi(tasks),
            cv=cv(tasks),
        )

    def summary(self) -> str:
        return (f"earned value: {self.earned_value}, spi: {self.spi}, sv: {self.sv}, "
                f"cpi: {self.cpi}, cv: {self.cv}")
