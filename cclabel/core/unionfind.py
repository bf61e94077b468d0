# cclabel/core/unionfind.py
# Call-scoped union-find over provisional labels, used by the two-pass labeler

from __future__ import annotations

from typing import List


class UnionFind:
    """
    Disjoint sets over provisional labels 1..N.

    Parents live in a plain list indexed by label. Index 0 is a background
    sentinel that is always its own root, so a flattened parent list can be
    used directly as a relabel lookup table. Unions are smaller-root-wins,
    hence parent[x] <= x holds for every x at all times.
    """

    def __init__(self) -> None:
        self._parent: List[int] = [0]

    def __len__(self) -> int:
        """Number of registered labels (background sentinel excluded)."""
        return len(self._parent) - 1

    def makeSet(self) -> int:
        """Register a brand-new label as its own root and return it."""
        lbl = len(self._parent)
        self._parent.append(lbl)
        return lbl

    def find(self, x: int) -> int:
        """Root of x, with path halving. find(root) == root."""
        parent = self._parent
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    def union(self, a: int, b: int) -> int:
        """Merge the sets of a and b; the larger root goes under the smaller. Returns the root."""
        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return ra
        if ra < rb:
            self._parent[rb] = ra
            return ra
        self._parent[ra] = rb
        return rb

    def flatten(self) -> List[int]:
        """
        Point every registered label straight at its root and return the parent list.

        Ascending order matters: parent[x] <= x, so by the time x is visited its
        parent has already been resolved and one hop reaches the root.
        """
        parent = self._parent
        for x in range(1, len(parent)):
            parent[x] = parent[parent[x]]
        return list(parent)

    def rootCount(self) -> int:
        """Number of distinct sets among registered labels."""
        return sum(1 for x in range(1, len(self._parent)) if self.find(x) == x)
