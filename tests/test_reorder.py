from __future__ import annotations

import pytest

from taskclock.domain.errors import InvalidOperation
from taskclock.domain.reorder import Point, Region, ReorderEngine

ROW_HEIGHT = 10


def _regions(count: int) -> list[Region]:
    return [Region(0, index * ROW_HEIGHT, 100, ROW_HEIGHT) for index in range(count)]


def _over(index: int) -> Point:
    return Point(50, index * ROW_HEIGHT + ROW_HEIGHT / 2)


def test_dragging_first_item_over_third() -> None:
    items = ["A", "B", "C", "D"]
    engine = ReorderEngine()

    engine.begin(0, len(items))
    moved = engine.track(items, _regions(4), _over(2))

    assert moved
    assert items == ["B", "C", "A", "D"]
    assert engine.drag_index == 2


def test_dragging_last_item_to_the_top() -> None:
    items = ["A", "B", "C", "D"]
    engine = ReorderEngine()

    engine.begin(3, len(items))
    engine.track(items, _regions(4), _over(0))

    assert items == ["D", "A", "B", "C"]
    assert engine.drag_index == 0


def test_live_moves_follow_the_pointer_across_frames() -> None:
    items = ["A", "B", "C", "D"]
    engine = ReorderEngine()
    engine.begin(0, len(items))

    engine.track(items, _regions(4), _over(1))
    assert items == ["B", "A", "C", "D"]

    engine.track(items, _regions(4), _over(3))
    assert items == ["B", "C", "D", "A"]
    assert engine.drag_index == 3


def test_hovering_the_dragged_item_or_nothing_does_not_move() -> None:
    items = ["A", "B", "C"]
    engine = ReorderEngine()
    engine.begin(1, len(items))

    assert not engine.track(items, _regions(3), _over(1))
    assert not engine.track(items, _regions(3), Point(500, 500))
    assert not engine.track(items, _regions(3), None)
    assert items == ["A", "B", "C"]
    assert engine.drag_index == 1


def test_second_drag_start_is_ignored() -> None:
    engine = ReorderEngine()

    assert engine.begin(1, 4)
    assert not engine.begin(3, 4)
    assert engine.drag_index == 1


def test_release_ends_the_gesture() -> None:
    items = ["A", "B"]
    engine = ReorderEngine()
    engine.begin(0, len(items))

    engine.release()
    engine.release()

    assert engine.drag_index is None
    assert not engine.active
    with pytest.raises(InvalidOperation):
        engine.track(items, _regions(2), _over(1))


def test_begin_rejects_positions_outside_the_list() -> None:
    engine = ReorderEngine()

    with pytest.raises(InvalidOperation):
        engine.begin(4, 4)
    with pytest.raises(InvalidOperation):
        engine.begin(-1, 4)
    assert engine.drag_index is None


def test_move_to_without_drag_is_rejected() -> None:
    with pytest.raises(InvalidOperation):
        ReorderEngine().move_to(["A", "B"], 1)


def test_hover_target_takes_first_matching_region() -> None:
    regions = [Region(0, 0, 100, 20), Region(0, 10, 100, 20)]

    assert ReorderEngine.hover_target(regions, Point(10, 15)) == 0
    assert ReorderEngine.hover_target(regions, Point(10, 25)) == 1


def test_region_edges() -> None:
    region = Region(10, 10, 20, 20)

    assert region.contains(Point(10, 10))
    assert region.contains(Point(29.9, 29.9))
    assert not region.contains(Point(30, 15))
    assert not region.contains(Point(15, 9.9))
