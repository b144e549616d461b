"""
FilterEngine - which nodes match a compound filter.

Predicates AND together; unset predicates do not constrain. Inverted
ranges (min > max) match nothing rather than raising.
"""

from datetime import datetime, timezone
from typing import Optional, Set

from ..domain.enums import PerformanceBucket, PeriodPreset
from ..domain.models import FilterCriteria, Graph, Node


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class FilterEngine:
    """Evaluates FilterCriteria against a graph."""

    def matches(self, graph: Graph, criteria: FilterCriteria) -> Set[str]:
        """Ids of every node satisfying all set predicates."""
        return {node.id for node in graph if self._match(graph, node, criteria)}

    def highlights(self, graph: Graph, criteria: FilterCriteria) -> Set[str]:
        """Ids to highlight: the matches, or nothing when no predicate is set."""
        if not criteria.is_active():
            return set()
        return self.matches(graph, criteria)

    def _match(self, graph: Graph, node: Node, criteria: FilterCriteria) -> bool:
        if criteria.name_substring:
            if criteria.name_substring.lower() not in node.name.lower():
                return False

        if criteria.date_window is not None:
            start, end = (_aware(t) for t in criteria.date_window)
            created = _aware(graph.records[node.id].created_at)
            if not start <= created <= end:
                return False

        if criteria.ltv_range is not None:
            low, high = criteria.ltv_range
            if not low <= node.ltv <= high:
                return False

        if criteria.performance_bucket is not None:
            if node.bucket is not PerformanceBucket(criteria.performance_bucket):
                return False

        return True


def criteria_with_period(
    criteria: FilterCriteria, preset: PeriodPreset, now: Optional[datetime] = None
) -> FilterCriteria:
    """Copy of criteria with its date window replaced by a period preset."""
    if now is None:
        now = datetime.now(timezone.utc)
    return FilterCriteria(
        name_substring=criteria.name_substring,
        date_window=PeriodPreset(preset).window(_aware(now)),
        ltv_range=criteria.ltv_range,
        performance_bucket=criteria.performance_bucket,
    )


def summary_text(shown: int, total: int) -> str:
    """'Showing N of M clients' line for the filter panel."""
    return f"Showing {shown} of {total} clients"
