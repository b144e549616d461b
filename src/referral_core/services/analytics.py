"""
AnalyticsEngine - aggregate metrics over a referral graph.

Pure: the same graph and `now` always give the same snapshot. An empty
graph gives a zeroed snapshot.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from ..domain.models import AnalyticsSnapshot, Graph, Node, TopPerformer

TOP_PERFORMER_COUNT = 3
HEATMAP_MAX = 100.0


def heatmap_score(node: Node) -> float:
    """0-100 performance score combining LTV and indications."""
    return min(HEATMAP_MAX, node.ltv / 1000.0 + node.indication_count * 10.0)


def growth_rate(current: int, previous: int) -> float:
    """Percent change between two window counts; 100/0 when previous is empty."""
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100.0, 2)


class AnalyticsEngine:
    """Computes an AnalyticsSnapshot for a graph."""

    def __init__(self, window_days: int = 30):
        self.window_days = window_days

    def compute(self, graph: Graph, now: Optional[datetime] = None) -> AnalyticsSnapshot:
        if graph.is_empty:
            return AnalyticsSnapshot()
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        nodes = list(graph)
        total_indications = sum(node.indication_count for node in nodes)
        current, previous = self._window_counts(graph, now)

        return AnalyticsSnapshot(
            total_ltv=sum(node.ltv for node in nodes),
            avg_indications_per_node=round(total_indications / len(nodes), 2),
            growth_rate=growth_rate(current, previous),
            top_performers=self.top_performers(nodes),
            total_clients=len(nodes),
            root_count=sum(1 for node in nodes if node.is_root),
            total_indications=total_indications,
            max_generations=graph.max_level + 1,
            heatmap={node.id: heatmap_score(node) for node in nodes},
        )

    def top_performers(self, nodes: List[Node]) -> List[TopPerformer]:
        """Most indications first; equal counts ordered by id."""
        ranked = sorted(nodes, key=lambda n: (-n.indication_count, n.id))
        return [
            TopPerformer(id=n.id, name=n.name, indication_count=n.indication_count)
            for n in ranked[:TOP_PERFORMER_COUNT]
        ]

    def _window_counts(self, graph: Graph, now: datetime) -> tuple:
        """Records created in [now-w, now] and in [now-2w, now-w)."""
        window = timedelta(days=self.window_days)
        current_start = now - window
        previous_start = now - 2 * window
        current = previous = 0
        for record in graph.records.values():
            created = record.created_at
            if created.tzinfo is None:
                created = created.replace(tzinfo=timezone.utc)
            if current_start <= created <= now:
                current += 1
            elif previous_start <= created < current_start:
                previous += 1
        return current, previous

