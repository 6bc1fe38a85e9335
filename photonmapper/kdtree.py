"""A 3D k-d tree with nearest-neighbour search for photon gathering."""

from __future__ import annotations

import heapq
import itertools
import math
from dataclasses import dataclass
from typing import Generic, Iterable, Protocol, TypeVar

from .vector import Vec, dot


class _Positioned(Protocol):
    pos: Vec


P = TypeVar("P", bound=_Positioned)


@dataclass
class Query:
    """Search conditions: centre, surface normal, squared radius and count limit."""

    search_position: Vec
    normal: Vec
    max_distance2: float
    max_search_num: int


@dataclass(frozen=True)
class Neighbor(Generic[P]):
    point: P
    distance2: float

    def __lt__(self, other: Neighbor) -> bool:
        return self.distance2 < other.distance2


@dataclass
class _Node(Generic[P]):
    point: P
    axis: int
    left: _Node[P] | None
    right: _Node[P] | None


def _coord(v: Vec, axis: int) -> float:
    return (v.x, v.y, v.z)[axis]


class KDTree(Generic[P]):
    """Points are collected with ``add_point`` and indexed by ``build``."""

    def __init__(self, points: Iterable[P] = ()) -> None:
        self._points: list[P] = list(points)
        self._root: _Node[P] | None = None

    def __len__(self) -> int:
        return len(self._points)

    def add_point(self, point: P) -> None:
        self._points.append(point)

    def build(self) -> None:
        self._root = self._build(self._points, 0)

    @classmethod
    def _build(cls, points: list[P], depth: int) -> _Node[P] | None:
        if not points:
            return None
        axis = depth % 3
        ordered = sorted(points, key=lambda p: _coord(p.pos, axis))
        median = len(ordered) // 2
        return _Node(
            point=ordered[median],
            axis=axis,
            left=cls._build(ordered[:median], depth + 1),
            right=cls._build(ordered[median + 1 :], depth + 1),
        )

    def search_knn(self, query: Query) -> list[Neighbor[P]]:
        """Return up to ``max_search_num`` nearest points, nearest first.

        A point is accepted only if it lies inside the current search radius
        and close to the tangent plane given by the query normal.
        """
        heap: list[tuple[float, int, Neighbor[P]]] = []
        counter = itertools.count()
        limit = query.max_distance2
        centre = query.search_position

        def locate(node: _Node[P] | None) -> None:
            nonlocal limit
            if node is None:
                return
            delta = _coord(centre, node.axis) - _coord(node.point.pos, node.axis)
            offset = node.point.pos - centre
            distance2 = offset.length_squared()
            if distance2 > 0.0 and distance2 < limit:
                dt = dot(query.normal, offset / math.sqrt(distance2))
                if abs(dt) <= limit * 0.01:
                    heapq.heappush(heap, (-distance2, next(counter), Neighbor(node.point, distance2)))
                    if len(heap) > query.max_search_num:
                        heapq.heappop(heap)
                        limit = -heap[0][0] if heap else 0.0
            near, far = (node.right, node.left) if delta > 0.0 else (node.left, node.right)
            locate(near)
            if delta * delta < limit:
                locate(far)

        locate(self._root)
        return sorted(entry[2] for entry in heap)