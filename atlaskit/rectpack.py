"""Skyline rectangle packing for texture atlases.

Rectangles are placed bottom-left (or best-fit) on a skyline that records
the lowest free height for each horizontal span of the target area.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable

__all__ = ["MAX_VALUE", "Heuristic", "Rect", "Packer"]

MAX_VALUE = 0x7FFFFFFF
"""Largest supported coordinate; also marks a rectangle that did not fit."""

_SENTINEL_Y = 1 << 30


class Heuristic(IntEnum):
    """Placement strategy used by :class:`Packer`."""

    SKYLINE_BL_SORT_HEIGHT = 0
    SKYLINE_BF_SORT_HEIGHT = 1
    SKYLINE_DEFAULT = 0


@dataclass
class Rect:
    """A rectangle to pack; ``x``, ``y`` and ``was_packed`` are filled in by packing."""

    w: int
    h: int
    id: int = 0
    x: int = 0
    y: int = 0
    was_packed: bool = False


@dataclass
class _Node:
    x: int
    y: int


@dataclass
class _Placement:
    index: int
    x: int
    y: int


class Packer:
    """Packs rectangles into a ``width`` by ``height`` target.

    ``num_nodes`` bounds the number of skyline segments that may exist at once.
    Unless :meth:`allow_out_of_mem` is enabled, widths are rounded up so that
    this bound is never exceeded.
    """

    def __init__(self, width: int, height: int, num_nodes: int) -> None:
        if num_nodes < 1:
            raise ValueError("num_nodes must be at least 1")
        self.width = width
        self.height = height
        self.num_nodes = num_nodes
        self.heuristic = Heuristic.SKYLINE_DEFAULT
        self.align = 1
        self.allow_out_of_mem(False)
        # The first node spans the full width; the last is a sentinel at x == width.
        self._skyline: list[_Node] = [_Node(0, 0), _Node(width, _SENTINEL_Y)]

    @property
    def _free_nodes(self) -> int:
        return self.num_nodes + 2 - len(self._skyline)

    def allow_out_of_mem(self, allow: bool) -> None:
        """Choose whether widths are left unquantized at the risk of running out of nodes."""
        if allow:
            self.align = 1
        else:
            self.align = (self.width + self.num_nodes - 1) // self.num_nodes

    def set_heuristic(self, heuristic: int) -> None:
        """Select the placement heuristic; raises ValueError for an unknown one."""
        self.heuristic = Heuristic(heuristic)

    def _find_min_y(self, index: int, x0: int, width: int) -> tuple[int, int]:
        """Return the lowest y a span starting at ``x0`` can rest on, and the area wasted below it."""
        skyline = self._skyline
        x1 = x0 + width
        min_y = 0
        waste_area = 0
        visited_width = 0
        while skyline[index].x < x1:
            node = skyline[index]
            next_x = skyline[index + 1].x
            if node.y > min_y:
                waste_area += visited_width * (node.y - min_y)
                min_y = node.y
                if node.x < x0:
                    visited_width += next_x - x0
                else:
                    visited_width += next_x - node.x
            else:
                under_width = next_x - node.x
                if under_width + visited_width > width:
                    under_width = width - visited_width
                waste_area += under_width * (min_y - node.y)
                visited_width += under_width
            index += 1
        return min_y, waste_area

    def _find_best_pos(self, width: int, height: int) -> _Placement | None:
        width += self.align - 1
        width -= width % self.align

        if width > self.width or height > self.height:
            return None

        skyline = self._skyline
        best: int | None = None
        best_y = _SENTINEL_Y
        best_waste = _SENTINEL_Y
        best_fit = self.heuristic == Heuristic.SKYLINE_BF_SORT_HEIGHT

        index = 0
        while skyline[index].x + width <= self.width:
            y, waste = self._find_min_y(index, skyline[index].x, width)
            if not best_fit:
                if y < best_y:
                    best_y = y
                    best = index
            elif y + height <= self.height:
                if y < best_y or (y == best_y and waste < best_waste):
                    best_y = y
                    best_waste = waste
                    best = index
            index += 1

        best_x = 0 if best is None else skyline[best].x

        if best_fit:
            # Also try aligning the right edge with each skyline segment.
            tail = 0
            while skyline[tail].x < width:
                tail += 1
            node = 0
            for tail_node in skyline[tail:]:
                xpos = tail_node.x - width
                while skyline[node + 1].x <= xpos:
                    node += 1
                y, waste = self._find_min_y(node, xpos, width)
                if y + height <= self.height and y <= best_y:
                    if (
                        y < best_y
                        or waste < best_waste
                        or (waste == best_waste and xpos < best_x)
                    ):
                        best_x = xpos
                        best_y = y
                        best_waste = waste
                        best = node

        if best is None:
            return None
        return _Placement(best, best_x, best_y)

    def _pack_rectangle(self, width: int, height: int) -> _Placement | None:
        res = self._find_best_pos(width, height)
        if res is None or res.y + height > self.height or self._free_nodes == 0:
            return None

        skyline = self._skyline
        new_node = _Node(res.x, res.y + height)
        right = res.x + width

        start = res.index + 1 if skyline[res.index].x < res.x else res.index
        removed = 0
        while (
            start + removed + 1 < len(skyline)
            and skyline[start + removed + 1].x <= right
        ):
            removed += 1

        remaining = skyline[start + removed]
        if remaining.x < right:
            remaining.x = right

        skyline[start:start + removed] = [new_node]
        return res

    def pack(self, rects: Iterable[Rect]) -> bool:
        """Place ``rects`` in the target, updating each in place.

        Returns True when every rectangle was packed. Rectangles that do not fit
        get ``x == y == MAX_VALUE`` and ``was_packed`` False; empty rectangles
        are placed at the origin and count as packed.
        """
        rects = list(rects)
        ordered = sorted(rects, key=lambda r: (-r.h, -r.w))

        for rect in ordered:
            if rect.w == 0 or rect.h == 0:
                rect.x = rect.y = 0
                continue
            placement = self._pack_rectangle(rect.w, rect.h)
            if placement is None:
                rect.x = rect.y = MAX_VALUE
            else:
                rect.x = placement.x
                rect.y = placement.y

        all_packed = True
        for rect in rects:
            rect.was_packed = not (rect.x == MAX_VALUE and rect.y == MAX_VALUE)
            if not rect.was_packed:
                all_packed = False
        return all_packed