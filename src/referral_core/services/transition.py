"""
TransitionAnimator - eased interpolation between two layouts.

The animator holds no timer of its own. The host calls tick() from its
draw loop (a QTimer in the desktop app); tick() reports whether another
frame is needed, and the animation ends by committing the target
positions once progress reaches 1.
"""

import logging
import time
from typing import Callable, Dict, Optional

from ..domain.models import AnimationState, Point

logger = logging.getLogger(__name__)


def ease_out_cubic(progress: float) -> float:
    """1 - (1 - p)^3 with p clamped to [0, 1]."""
    p = min(max(progress, 0.0), 1.0)
    return 1.0 - (1.0 - p) ** 3


def interpolate(
    previous: Dict[str, Point], target: Dict[str, Point], eased: float
) -> Dict[str, Point]:
    """
    Blend previous towards target for every id in target.

    Ids without a previous position appear at their target.
    """
    if eased >= 1.0:
        return dict(target)

    frame: Dict[str, Point] = {}
    for node_id, (tx, ty) in target.items():
        prev = previous.get(node_id)
        if prev is None:
            frame[node_id] = (tx, ty)
            continue
        px, py = prev
        frame[node_id] = (px + (tx - px) * eased, py + (ty - py) * eased)
    return frame


class TransitionAnimator:
    """
    Animates node positions from one layout to the next.

    Only one transition is in flight; start() while running restarts from
    the current interpolated positions.
    """

    def __init__(self, duration_ms: int = 300, clock: Callable[[], float] = time.monotonic):
        self.duration_ms = duration_ms
        self._clock = clock
        self._state: Optional[AnimationState] = None
        self._committed: Dict[str, Point] = {}

    @property
    def is_running(self) -> bool:
        return self._state is not None

    @property
    def committed(self) -> Dict[str, Point]:
        """Authoritative positions once the last transition finished."""
        return dict(self._committed)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def start(self, target: Dict[str, Point], previous: Optional[Dict[str, Point]] = None) -> Dict[str, Point]:
        """
        Begin a transition towards target.

        Args:
            target: final position per node id
            previous: starting positions; defaults to where nodes are now
                (mid-flight positions if a transition is running)

        Returns:
            Positions to draw immediately
        """
        now = self._clock()
        if previous is None:
            previous = self.positions_at(now)
        if self._state is not None:
            logger.debug("Layout changed mid-transition; restarting from current positions")
            self._state = None

        if self.duration_ms <= 0 or not previous:
            # Nothing to animate from
            self._committed = dict(target)
            return dict(target)

        self._state = AnimationState(
            previous=dict(previous),
            target=dict(target),
            started_at=now,
            duration_s=self.duration_ms / 1000.0,
        )
        return interpolate(self._state.previous, self._state.target, 0.0)

    def cancel(self) -> None:
        """Stop without committing; positions freeze at the last committed layout."""
        self._state = None

    def finish(self) -> None:
        """Commit the target of a running transition immediately."""
        if self._state is not None:
            self._committed = dict(self._state.target)
            self._state = None

    def snap(self, positions: Dict[str, Point]) -> None:
        """Set positions with no transition."""
        self._state = None
        self._committed = dict(positions)

    # -------------------------------------------------------------------------
    # Frame queries
    # -------------------------------------------------------------------------

    def progress_at(self, now: float) -> float:
        if self._state is None:
            return 1.0
        elapsed = now - self._state.started_at
        return min(max(elapsed / self._state.duration_s, 0.0), 1.0)

    def positions_at(self, now: Optional[float] = None) -> Dict[str, Point]:
        """Positions for the given time without advancing the animation."""
        if self._state is None:
            return dict(self._committed)
        if now is None:
            now = self._clock()
        eased = ease_out_cubic(self.progress_at(now))
        return interpolate(self._state.previous, self._state.target, eased)

    def tick(self) -> bool:
        """
        Advance to the current time.

        Returns:
            True while more frames are needed; False once the target is committed
        """
        if self._state is None:
            return False
        progress = self.progress_at(self._clock())
        self._state.progress = progress
        if progress >= 1.0:
            self._committed = dict(self._state.target)
            self._state = None
            return False
        return True
