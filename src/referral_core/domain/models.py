"""
Domain models (DTOs) for the referral network engine.

These are pure data classes with no GUI or storage dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Tuple, Iterator

from .enums import PerformanceBucket

Point = Tuple[float, float]

# Bound on referrer hops when walking towards a root (cyclic data must terminate)
MAX_PATH_HOPS = 50


class ClientDataError(ValueError):
    """A client record could not be understood."""


@dataclass(frozen=True)
class ClientRecord:
    """A client as supplied by the host application."""
    id: str
    name: str
    referred_by: Optional[str] = None
    ltv: float = 0.0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    city: Optional[str] = None
    handle: Optional[str] = None
    email: Optional[str] = None


@dataclass
class Node:
    """A client placed in the referral graph."""
    id: str
    name: str
    level: int = 0
    ltv: float = 0.0
    is_root: bool = True
    indication_count: int = 0
    parent_id: Optional[str] = None
    neighbors: List[str] = field(default_factory=list)  # parent + children

    # Position (set by layout / transition)
    x: float = 0.0
    y: float = 0.0

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    @position.setter
    def position(self, value: Point):
        self.x, self.y = value

    @property
    def bucket(self) -> PerformanceBucket:
        return PerformanceBucket.for_count(self.indication_count)


class Graph:
    """
    Referral graph: node map + adjacency.

    Rebuilt wholesale from the client list; never mutated incrementally
    apart from node positions.
    """

    def __init__(self):
        self.nodes: Dict[str, Node] = {}
        self.adjacency: Dict[str, List[str]] = {}
        self.records: Dict[str, ClientRecord] = {}
        self._children: Dict[str, List[str]] = {}

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes.values())

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    # -------------------------------------------------------------------------
    # Construction helpers (used by GraphBuilder)
    # -------------------------------------------------------------------------

    def add_node(self, node: Node, record: ClientRecord) -> None:
        self.nodes[node.id] = node
        self.records[node.id] = record
        self.adjacency.setdefault(node.id, [])
        self._children.setdefault(node.id, [])

    def link(self, parent_id: str, child_id: str) -> None:
        """Add a bidirectional referral link."""
        if child_id not in self.adjacency[parent_id]:
            self.adjacency[parent_id].append(child_id)
        if parent_id not in self.adjacency[child_id]:
            self.adjacency[child_id].append(parent_id)
        self._children[parent_id].append(child_id)
        self.nodes[child_id].parent_id = parent_id

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, node_id: Optional[str]) -> Optional[Node]:
        if node_id is None:
            return None
        return self.nodes.get(node_id)

    def parent_of(self, node_id: str) -> Optional[Node]:
        """Resolvable referrer of a node."""
        node = self.nodes.get(node_id)
        if node is None or node.parent_id is None:
            return None
        return self.nodes.get(node.parent_id)

    def children_of(self, node_id: str) -> List[Node]:
        """Direct referrals made by a node, in input order."""
        return [self.nodes[cid] for cid in self._children.get(node_id, [])]

    def path_to_root(self, node_id: str) -> List[Node]:
        """Node followed by its referrer chain, bounded so cycles terminate."""
        path: List[Node] = []
        current = self.nodes.get(node_id)
        hops = 0
        while current is not None and hops <= MAX_PATH_HOPS:
            path.append(current)
            if current.parent_id is None:
                break
            current = self.nodes.get(current.parent_id)
            hops += 1
        return path

    def directed_edges(self) -> List[Tuple[str, str]]:
        """Parent -> child pairs (lower level to higher level) for drawing."""
        edges = []
        for node_id, neighbor_ids in self.adjacency.items():
            level = self.nodes[node_id].level
            for other_id in neighbor_ids:
                if level < self.nodes[other_id].level:
                    edges.append((node_id, other_id))
        return edges

    @property
    def max_level(self) -> int:
        if not self.nodes:
            return 0
        return max(node.level for node in self.nodes.values())

    def levels(self) -> Dict[int, List[Node]]:
        """Nodes grouped by level, each group in graph order."""
        by_level: Dict[int, List[Node]] = {}
        for node in self.nodes.values():
            by_level.setdefault(node.level, []).append(node)
        return dict(sorted(by_level.items()))

    def positions(self) -> Dict[str, Point]:
        return {node_id: (node.x, node.y) for node_id, node in self.nodes.items()}

    def set_positions(self, positions: Dict[str, Point]) -> None:
        for node_id, (x, y) in positions.items():
            node = self.nodes.get(node_id)
            if node is not None:
                node.x, node.y = x, y


@dataclass
class ViewportState:
    """Zoom and pan owned by the InteractionController."""
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0

    def graph_to_screen(self, x: float, y: float) -> Point:
        return (x * self.zoom + self.pan_x, y * self.zoom + self.pan_y)

    def screen_to_graph(self, sx: float, sy: float) -> Point:
        return ((sx - self.pan_x) / self.zoom, (sy - self.pan_y) / self.zoom)


@dataclass
class InteractionState:
    """Pointer-driven selection state consumed by the renderer."""
    selected_id: Optional[str] = None
    hovered_id: Optional[str] = None
    dragging: bool = False


@dataclass
class AnimationState:
    """Transient state of an in-flight layout transition."""
    previous: Dict[str, Point]
    target: Dict[str, Point]
    started_at: float
    duration_s: float
    progress: float = 0.0


@dataclass(frozen=True)
class TopPerformer:
    id: str
    name: str
    indication_count: int


@dataclass
class AnalyticsSnapshot:
    """Aggregate network metrics recomputed on every graph rebuild."""
    total_ltv: float = 0.0
    avg_indications_per_node: float = 0.0
    growth_rate: float = 0.0
    top_performers: List[TopPerformer] = field(default_factory=list)
    total_clients: int = 0
    root_count: int = 0
    total_indications: int = 0
    max_generations: int = 0
    heatmap: Dict[str, float] = field(default_factory=dict)


@dataclass
class FilterCriteria:
    """Compound filter; unset fields do not constrain the match."""
    name_substring: Optional[str] = None
    date_window: Optional[Tuple[datetime, datetime]] = None
    ltv_range: Optional[Tuple[float, float]] = None
    performance_bucket: Optional[PerformanceBucket] = None

    def is_active(self) -> bool:
        """Check if any predicate is set."""
        return bool(self.name_substring) or any(
            value is not None
            for value in (self.date_window, self.ltv_range, self.performance_bucket)
        )
