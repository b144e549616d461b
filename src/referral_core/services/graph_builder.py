"""
GraphBuilder - turn a flat client list into a leveled referral graph.

Each record becomes one node. A record whose referrer is missing, unknown
or itself is a root. Levels are assigned by an iterative depth-first walk
from every root; components that no root reaches (referral cycles) are
walked from a member of the cycle at level 0, so every node ends up with a
level and nothing is rejected.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ..domain.models import ClientRecord, Graph, Node

logger = logging.getLogger(__name__)


class GraphBuilder:
    """Builds a Graph from ClientRecords. Never raises on bad topology."""

    def build(self, records: Iterable[ClientRecord]) -> Graph:
        graph = Graph()
        by_id = self._dedupe(records)
        if not by_id:
            return graph

        # Indication count = number of clients naming this one as referrer
        counts: Dict[str, int] = {}
        for record in by_id.values():
            ref = record.referred_by
            if ref is not None and ref != record.id and ref in by_id:
                counts[ref] = counts.get(ref, 0) + 1

        dangling = 0
        for record in by_id.values():
            ref = record.referred_by
            resolvable = ref is not None and ref != record.id and ref in by_id
            if ref is not None and not resolvable:
                dangling += 1
                logger.debug(f"Client {record.id}: referrer {ref!r} unresolved, treated as root")
            node = Node(
                id=record.id,
                name=record.name,
                ltv=record.ltv,
                is_root=not resolvable,
                indication_count=counts.get(record.id, 0),
            )
            graph.add_node(node, record)

        for node in graph:
            if not node.is_root:
                graph.link(by_id[node.id].referred_by, node.id)

        visited: set = set()
        for node in list(graph):
            if node.is_root:
                self._assign_levels(graph, node.id, visited)

        cyclic = 0
        for node in list(graph):
            if node.id not in visited:
                anchor = self._cycle_anchor(graph, node.id)
                cyclic += 1
                logger.info(f"Referral cycle through client {anchor}; anchored at level 0")
                self._assign_levels(graph, anchor, visited)

        for node in graph:
            node.neighbors = list(graph.adjacency[node.id])

        logger.debug(
            f"Built graph: {len(graph)} nodes, {len(graph.directed_edges())} edges, "
            f"{dangling} unresolved referrers, {cyclic} cycles"
        )
        return graph

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _dedupe(self, records: Iterable[ClientRecord]) -> Dict[str, ClientRecord]:
        """Last record wins for a repeated id; first occurrence keeps its position."""
        by_id: Dict[str, ClientRecord] = {}
        for record in records:
            if record.id in by_id:
                logger.info(f"Duplicate client id {record.id}; keeping the later record")
            by_id[record.id] = record
        return by_id

    def _assign_levels(self, graph: Graph, start_id: str, visited: set) -> None:
        """
        Depth-first walk from start_id with an explicit stack.

        A node reached a second time is skipped, so its level stays frozen.
        Roots are never entered from a neighbor.
        """
        stack: List[tuple] = [(start_id, 0)]
        while stack:
            node_id, level = stack.pop()
            if node_id in visited:
                continue
            visited.add(node_id)
            node = graph.nodes[node_id]
            node.level = max(node.level, level)

            # Reversed so the first neighbor is walked first
            for neighbor_id in reversed(graph.adjacency[node_id]):
                if neighbor_id not in visited and not graph.nodes[neighbor_id].is_root:
                    stack.append((neighbor_id, level + 1))

    def _cycle_anchor(self, graph: Graph, node_id: str) -> str:
        """First repeated node on the referrer chain starting at node_id."""
        seen = set()
        current: Optional[str] = node_id
        while current is not None and current not in seen:
            seen.add(current)
            current = graph.nodes[current].parent_id
        return current if current is not None else node_id


def build_graph(records: Iterable[ClientRecord]) -> Graph:
    """Convenience wrapper around GraphBuilder().build()."""
    return GraphBuilder().build(records)
