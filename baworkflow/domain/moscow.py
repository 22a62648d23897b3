"""
MoSCoW prioritisation helpers: breakdown, capacity planning, dependency checks.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .exceptions import InvalidArgumentError


class Priority(Enum):
    """MoSCoW priority, ordered from most to least important."""
    MUST = "Must"
    SHOULD = "Should"
    COULD = "Could"
    WONT = "Won't"

    @classmethod
    def from_label(cls, label: Optional[str]) -> Optional["Priority"]:
        for priority in cls:
            if priority.value == label:
                return priority
        return None

    @property
    def rank(self) -> int:
        """Lower rank is planned first."""
        return list(Priority).index(self) + 1

    @property
    def weight(self) -> int:
        """Higher weight is more important."""
        return len(Priority) + 1 - self.rank

    @property
    def key(self) -> str:
        return "Wont" if self is Priority.WONT else self.value


@dataclass
class Requirement:
    id: str
    priority: str
    points: float = 0
    depends_on: List[str] = field(default_factory=list)

    @property
    def moscow(self) -> Optional[Priority]:
        return Priority.from_label(self.priority)

    def to_dict(self) -> dict:
        data = {"id": self.id, "priority": self.priority, "points": self.points}
        if self.depends_on:
            data["dependsOn"] = self.depends_on
        return data


@dataclass
class PriorityBucket:
    count: int = 0
    points: float = 0
    items: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"count": self.count, "points": self.points, "items": self.items}


@dataclass
class MoscowSummary:
    buckets: Dict[Priority, PriorityBucket]
    total_requirements: int

    @property
    def total_points(self) -> float:
        return sum(bucket.points for bucket in self.buckets.values())

    def percentage(self, priority: Priority) -> int:
        if not self.total_points:
            return 0
        return round(self.buckets[priority].points / self.total_points * 100)

    def to_dict(self) -> dict:
        return {
            "summary": {p.key: bucket.to_dict() for p, bucket in self.buckets.items()},
            "totalRequirements": self.total_requirements,
            "totalPoints": self.total_points,
            "percentages": {p.key: self.percentage(p) for p in self.buckets},
        }


@dataclass
class CapacityPlan:
    available_capacity: float
    committed: List[Requirement]
    deferred: List[Requirement]
    remaining_capacity: float

    def to_dict(self) -> dict:
        return {
            "availableCapacity": self.available_capacity,
            "committed": _requirement_group(self.committed),
            "deferred": _requirement_group(self.deferred),
            "remainingCapacity": self.remaining_capacity,
        }


@dataclass
class DependencyIssue:
    requirement: str
    issue: str
    severity: str  # "critical", "high"
    priority: Optional[str] = None
    depends_on: Optional[str] = None
    dependency_priority: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"requirement": self.requirement}
        if self.priority is not None:
            data["priority"] = self.priority
        if self.depends_on is not None:
            data["dependsOn"] = self.depends_on
        if self.dependency_priority is not None:
            data["dependencyPriority"] = self.dependency_priority
        data["issue"] = self.issue
        data["severity"] = self.severity
        return data


@dataclass
class DependencyReport:
    issues: List[DependencyIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.issues

    @property
    def summary(self) -> str:
        if self.valid:
            return "All dependencies are valid"
        return f"Found {len(self.issues)} dependency issue(s)"

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "issuesFound": len(self.issues),
            "issues": [issue.to_dict() for issue in self.issues],
            "summary": self.summary,
        }


def summarize_priorities(requirements: Sequence[Requirement]) -> MoscowSummary:
    """
    Break requirements down by MoSCoW priority.

    Requirements with an unrecognised priority count towards the total but
    land in no bucket.
    """
    buckets = {priority: PriorityBucket() for priority in Priority}

    for requirement in requirements:
        priority = requirement.moscow
        if priority is None:
            continue
        bucket = buckets[priority]
        bucket.count += 1
        bucket.points += requirement.points or 0
        bucket.items.append(requirement.id)

    return MoscowSummary(buckets=buckets, total_requirements=len(requirements))


def plan_capacity(requirements: Sequence[Requirement], available_capacity: float) -> CapacityPlan:
    """
    Commit requirements in priority order while they fit in the capacity.

    Lower-priority items may still be committed after a larger
    higher-priority item was deferred, as long as they fit.
    """
    if available_capacity < 0:
        raise InvalidArgumentError(
            f"Available capacity must not be negative, got {available_capacity}"
        )

    ordered = sorted(requirements, key=_planning_rank)

    remaining = available_capacity
    committed: List[Requirement] = []
    deferred: List[Requirement] = []

    for requirement in ordered:
        points = requirement.points or 0
        if remaining >= points:
            committed.append(requirement)
            remaining -= points
        else:
            deferred.append(requirement)

    return CapacityPlan(
        available_capacity=available_capacity,
        committed=committed,
        deferred=deferred,
        remaining_capacity=remaining,
    )


def validate_dependencies(requirements: Sequence[Requirement]) -> DependencyReport:
    """
    Find dependencies that contradict the MoSCoW ordering.

    - a dependency on a requirement that does not exist (critical)
    - a requirement depending on a lower-priority one (high)
    - an active requirement depending on a Won't item (critical)
    """
    by_id = {requirement.id: requirement for requirement in requirements}
    report = DependencyReport()

    for requirement in requirements:
        for dependency_id in requirement.depends_on:
            dependency = by_id.get(dependency_id)
            if dependency is None:
                report.issues.append(
                    DependencyIssue(
                        requirement=requirement.id,
                        issue=f"Depends on {dependency_id} which doesn't exist",
                        severity="critical",
                    )
                )
                continue

            if _weight(requirement) > _weight(dependency):
                report.issues.append(
                    DependencyIssue(
                        requirement=requirement.id,
                        priority=requirement.priority,
                        depends_on=dependency_id,
                        dependency_priority=dependency.priority,
                        issue=(
                            f"{requirement.priority} priority depends on lower "
                            f"priority {dependency.priority}"
                        ),
                        severity="high",
                    )
                )

            if dependency.moscow is Priority.WONT and requirement.moscow is not Priority.WONT:
                report.issues.append(
                    DependencyIssue(
                        requirement=requirement.id,
                        priority=requirement.priority,
                        depends_on=dependency_id,
                        issue="Active requirement depends on Won't priority item",
                        severity="critical",
                    )
                )

    return report


def _planning_rank(requirement: Requirement) -> int:
    priority = requirement.moscow
    return priority.rank if priority else len(Priority) + 1


def _weight(requirement: Requirement) -> int:
    priority = requirement.moscow
    return priority.weight if priority else 0


def _requirement_group(requirements: List[Requirement]) -> dict:
    return {
        "items": [requirement.to_dict() for requirement in requirements],
        "count": len(requirements),
        "totalPoints": sum(requirement.points or 0 for requirement in requirements),
    }
