"""Tests for selection, double click and drag."""

from citybudget.core.contracts import Zone
from citybudget.scene import InteractionState, SelectionController


def _zone(name="Central Park", x=50, y=50):
    return Zone(name=name, position=(x, y), type="Park", cost=50)


class TestDoubleClick:
    """Test double-click detection."""

    def test_within_window(self):
        controller = SelectionController(double_click_window=0.3)
        zone = _zone()

        assert not controller.pointer_down(zone, (50, 50), now=1.0).double_click
        assert controller.pointer_down(zone, (50, 50), now=1.2).double_click

    def test_outside_window(self):
        controller = SelectionController(double_click_window=0.3)
        zone = _zone()
        controller.pointer_down(zone, (50, 50), now=1.0)

        assert not controller.pointer_down(zone, (50, 50), now=1.5).double_click

    def test_different_zones(self):
        controller = SelectionController()
        controller.pointer_down(_zone("a"), (0, 0), now=1.0)

        result = controller.pointer_down(_zone("b"), (0, 0), now=1.1)

        assert not result.double_click
        assert controller.selected == "b"


class TestDrag:
    """Test drag-offset capture and movement."""

    def test_zone_keeps_grab_point(self):
        controller = SelectionController()
        zone = _zone(x=50, y=50)
        controller.pointer_down(zone, (45, 40), now=0.0)

        assert controller.drag_offset == (5.0, 10.0)
        assert controller.drag(zone, (100, 100))
        assert zone.position == (105.0, 110.0)
        assert controller.state is InteractionState.DRAGGING

    def test_drag_other_zone_ignored(self):
        controller = SelectionController()
        controller.pointer_down(_zone("a"), (0, 0), now=0.0)
        other = _zone("b", 1, 1)

        assert not controller.drag(other, (10, 10))
        assert other.position == (1.0, 1.0)

    def test_non_finite_pointer_ignored(self):
        controller = SelectionController()
        zone = _zone(x=50, y=50)
        controller.pointer_down(zone, (50, 50), now=0.0)

        assert not controller.drag(zone, (float("nan"), 60))
        assert zone.position == (50.0, 50.0)
        assert controller.state is InteractionState.SELECTED

    def test_end_drag(self):
        controller = SelectionController()
        zone = _zone()
        controller.pointer_down(zone, (50, 50), now=0.0)
        controller.drag(zone, (60, 60))

        assert controller.end_drag(zone)
        assert controller.state is InteractionState.SELECTED
        assert controller.drag_offset is None
        assert not controller.drag(zone, (70, 70))

    def test_clear(self):
        controller = SelectionController()
        controller.pointer_down(_zone(), (0, 0), now=0.0)

        controller.clear()

        assert controller.selected is None
        assert controller.state is InteractionState.IDLE
