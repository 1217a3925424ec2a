"""Point quadtree for neighbour queries during the simulation.

The tree is rebuilt from scratch every tick over the current node centres,
so it only needs bulk construction and rectangle queries.
"""

from __future__ import annotations

__all__ = ["QuadTree"]

from typing import Callable, Generic, Iterable, TypeVar

from lifemap_graph.layout.constants import QUADTREE_CAPACITY, QUADTREE_MAX_DEPTH

T = TypeVar("T")


class _Quad(Generic[T]):
    __slots__ = ("x1", "y1", "x2", "y2", "depth", "points", "children")

    def __init__(self, x1: float, y1: float, x2: float, y2: float, depth: int) -> None:
        self.x1, self.y1, self.x2, self.y2 = x1, y1, x2, y2
        self.depth = depth
        self.points: list[tuple[float, float, T]] = []
        # Empty until the cell splits
        self.children: list[_Quad[T]] = []

    def contains(self, x: float, y: float) -> bool:
        return self.x1 <= x <= self.x2 and self.y1 <= y <= self.y2

    def intersects(self, x1: float, y1: float, x2: float, y2: float) -> bool:
        return not (x1 > self.x2 or x2 < self.x1 or y1 > self.y2 or y2 < self.y1)

    def split(self) -> None:
        mx = (self.x1 + self.x2) / 2
        my = (self.y1 + self.y2) / 2
        d = self.depth + 1
        self.children = [
            _Quad(self.x1, self.y1, mx, my, d),
            _Quad(mx, self.y1, self.x2, my, d),
            _Quad(self.x1, my, mx, self.y2, d),
            _Quad(mx, my, self.x2, self.y2, d),
        ]
        points, self.points = self.points, []
        for x, y, item in points:
            self._child_for(x, y).insert(x, y, item)

    def _child_for(self, x: float, y: float) -> _Quad[T]:
        mx = (self.x1 + self.x2) / 2
        my = (self.y1 + self.y2) / 2
        return self.children[(1 if x >= mx else 0) + (2 if y >= my else 0)]

    def insert(self, x: float, y: float, item: T) -> None:
        if self.children:
            self._child_for(x, y).insert(x, y, item)
            return
        self.points.append((x, y, item))
        if len(self.points) > QUADTREE_CAPACITY and self.depth < QUADTREE_MAX_DEPTH:
            self.split()


class QuadTree(Generic[T]):
    """Region quadtree over points, each carrying an item.

    Points must lie inside the bounds given at construction; ``build``
    computes bounds from the data.
    """

    def __init__(self, x1: float, y1: float, x2: float, y2: float) -> None:
        # Square bounds keep the cells square
        side = max(x2 - x1, y2 - y1, 1.0)
        self._root: _Quad[T] = _Quad(x1, y1, x1 + side, y1 + side, 0)
        self._size = 0

    @classmethod
    def build(
        cls,
        items: Iterable[T],
        key: Callable[[T], tuple[float, float]],
    ) -> QuadTree[T]:
        """Build a tree over ``items`` located by ``key``."""
        located = [(key(item), item) for item in items]
        if not located:
            return cls(0.0, 0.0, 1.0, 1.0)
        xs = [p[0] for p, _ in located]
        ys = [p[1] for p, _ in located]
        tree: QuadTree[T] = cls(min(xs) - 1.0, min(ys) - 1.0, max(xs) + 1.0, max(ys) + 1.0)
        for (x, y), item in located:
            tree.insert(item, x, y)
        return tree

    def __len__(self) -> int:
        return self._size

    def insert(self, item: T, x: float, y: float) -> None:
        if not self._root.contains(x, y):
            raise ValueError(f"Point ({x}, {y}) outside quadtree bounds")
        self._root.insert(x, y, item)
        self._size += 1

    def query(self, x1: float, y1: float, x2: float, y2: float) -> list[T]:
        """Return items whose point lies in the rectangle (inclusive)."""
        found: list[T] = []
        stack = [self._root]
        while stack:
            quad = stack.pop()
            if not quad.intersects(x1, y1, x2, y2):
                continue
            if quad.children:
                stack.extend(quad.children)
                continue
            for x, y, item in quad.points:
                if x1 <= x <= x2 and y1 <= y <= y2:
                    found.append(item)
        return found
