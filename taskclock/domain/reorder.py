from __future__ import annotations

from collections.abc import MutableSequence, Sequence
from dataclasses import dataclass
from typing import TypeVar

from .errors import InvalidOperation

T = TypeVar("T")


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Region:
    left: float
    top: float
    width: float
    height: float

    def contains(self, point: Point) -> bool:
        return (
            self.left <= point.x < self.left + self.width
            and self.top <= point.y < self.top + self.height
        )


class ReorderEngine:
    """Live drag-to-reorder state machine.

    The only state kept between frames is the position of the dragged item.
    Hover targets are recomputed every frame from the regions laid out in that
    frame, and every hover over another item moves the dragged item there
    immediately. The engine never owns the sequence it reorders; callers pass it
    in on each call.
    """

    def __init__(self) -> None:
        self.drag_index: int | None = None

    @property
    def active(self) -> bool:
        return self.drag_index is not None

    def begin(self, index: int, length: int) -> bool:
        if self.drag_index is not None:
            return False
        if not 0 <= index < length:
            raise InvalidOperation(f"cannot drag position {index} of {length}")
        self.drag_index = index
        return True

    @staticmethod
    def hover_target(regions: Sequence[Region], pointer: Point | None) -> int | None:
        if pointer is None:
            return None
        for index, region in enumerate(regions):
            if region.contains(pointer):
                return index
        return None

    def move_to(self, items: MutableSequence[T], target: int) -> bool:
        if self.drag_index is None:
            raise InvalidOperation("no drag in progress")
        if not 0 <= target < len(items):
            raise InvalidOperation(f"cannot move to position {target} of {len(items)}")
        if target == self.drag_index:
            return False
        item = items.pop(self.drag_index)
        items.insert(target, item)
        self.drag_index = target
        return True

    def track(
        self,
        items: MutableSequence[T],
        regions: Sequence[Region],
        pointer: Point | None,
    ) -> bool:
        if self.drag_index is None:
            raise InvalidOperation("no drag in progress")
        target = self.hover_target(regions, pointer)
        if target is None or target >= len(items):
            return False
        return self.move_to(items, target)

    def release(self) -> None:
        self.drag_index = None
