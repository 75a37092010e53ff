import pytest

from easel.core.document import SceneDocument
from easel.core.drawing_context import DrawingContext
from easel.core.history import HistoryManager
from easel.core.interaction import (
    KEY_BACKSPACE,
    KEY_DELETE,
    InteractionState,
    InteractionStateMachine,
)
from easel.core.geometry import Handle, normalize
from easel.core.scene_object import ObjectKind, ShapeObject, TextObject

from helpers import make_shape, png_data_uri


@pytest.fixture
def machine(storage):
    return InteractionStateMachine(SceneDocument(storage), HistoryManager(), DrawingContext())


def drag(machine, start, end, additive=False):
    machine.pointer_down(*start, additive=additive)
    machine.pointer_move(*end)
    machine.pointer_up(*end)


def test_draw_rectangle(machine):
    drag(machine, (10, 10), (110, 60))
    (rect,) = machine.scene.objects
    assert rect.kind is ObjectKind.RECTANGLE
    assert (rect.x, rect.y, rect.w, rect.h) == (10, 10, 100, 50)
    assert machine.scene.selection == [rect]
    assert machine.state is InteractionState.IDLE


def test_draw_inverted_gives_negative_extent(machine):
    drag(machine, (110, 60), (10, 10))
    (rect,) = machine.scene.objects
    assert (rect.w, rect.h) == (-100, -50)
    assert normalize(rect) == (10, 10, 100, 50)


def test_click_without_move_leaves_one_by_one_object(machine):
    machine.pointer_down(40, 40)
    machine.pointer_up(40, 40)
    (rect,) = machine.scene.objects
    assert (rect.w, rect.h) == (1, 1)


def test_drawing_uses_current_stroke_color(machine):
    machine.drawing_context.set_stroke_color("#ff0000")
    machine.set_tool("Triangle")
    drag(machine, (0, 0), (30, 30))
    (triangle,) = machine.scene.objects
    assert triangle.kind is ObjectKind.TRIANGLE
    assert triangle.stroke_color == "#ff0000"


def test_state_transitions(machine, qtbot):
    with qtbot.waitSignal(machine.state_changed) as blocker:
        machine.pointer_down(0, 0)
    assert blocker.args == [InteractionState.DRAWING]
    machine.pointer_up()
    assert machine.state is InteractionState.IDLE


def test_typing_edits_label(machine):
    drag(machine, (0, 0), (100, 100))
    assert machine.key_press("H")
    assert machine.key_press("i")
    (rect,) = machine.scene.objects
    assert rect.label == "Hi"
    assert machine.key_press(KEY_BACKSPACE)
    assert rect.label == "H"
    assert machine.scene.objects == [rect]


def test_label_edits_are_not_undoable(machine):
    drag(machine, (0, 0), (100, 100))
    machine.key_press("A")
    machine.undo()
    assert machine.scene.objects == []


def test_backspace_on_empty_label_deletes(machine):
    drag(machine, (0, 0), (100, 100))
    assert machine.key_press(KEY_BACKSPACE)
    assert machine.scene.objects == []


def test_typing_without_single_shape_selection_is_ignored(machine):
    assert machine.key_press("x") is False
    machine.text_entry_active = True
    drag(machine, (0, 0), (100, 100))
    assert machine.key_press("x") is False
    assert machine.scene.objects[0].label == ""


def test_resize_top_left_handle(machine):
    rect = machine.scene.add_object(make_shape(x=0, y=0, w=100, h=100))
    machine.scene.select_objects([rect])
    machine.pointer_down(0, 0)
    assert machine.state is InteractionState.RESIZING
    assert machine.active_handle is Handle.TOP_LEFT
    machine.pointer_move(20, 30)
    machine.pointer_up(20, 30)
    assert (rect.x, rect.y, rect.w, rect.h) == (20, 30, 80, 70)


@pytest.mark.parametrize(
    "start,end,expected",
    [
        ((100, 0), (120, 10), (0, 10, 120, 90)),
        ((0, 100), (10, 120), (10, 0, 90, 120)),
        ((100, 100), (150, 50), (0, 0, 150, 50)),
    ],
)
def test_resize_other_corners(machine, start, end, expected):
    rect = machine.scene.add_object(make_shape(x=0, y=0, w=100, h=100))
    machine.scene.select_objects([rect])
    drag(machine, start, end)
    assert (rect.x, rect.y, rect.w, rect.h) == expected


def test_resize_triangle_apex(machine):
    triangle = machine.scene.add_object(
        make_shape(kind=ObjectKind.TRIANGLE, x=0, y=0, w=100, h=100)
    )
    machine.scene.select_objects([triangle])
    drag(machine, (50, 0), (70, 20))
    assert (triangle.x, triangle.y, triangle.w, triangle.h) == (0, 20, 100, 80)


def test_drag_moves_selection_with_one_snapshot(machine):
    rect = machine.scene.add_object(make_shape(x=0, y=0, w=100, h=100))
    machine.pointer_down(50, 50)
    assert machine.state is InteractionState.DRAGGING
    for step in range(1, 6):
        machine.pointer_move(50 + step * 10, 50)
    machine.pointer_up()
    assert (rect.x, rect.y) == (50, 0)
    assert len(machine.history) == 1

    machine.undo()
    (restored,) = machine.scene.objects
    assert (restored.x, restored.y) == (0, 0)


def test_additive_drag_moves_every_selected_object(machine):
    a = machine.scene.add_object(make_shape(x=0, y=0, w=10, h=10))
    b = machine.scene.add_object(make_shape(x=100, y=100, w=10, h=10))
    machine.pointer_down(5, 5)
    machine.pointer_up()
    drag(machine, (105, 105), (115, 125), additive=True)
    assert machine.scene.selection == [a, b]
    assert (a.x, a.y) == (10, 20)
    assert (b.x, b.y) == (110, 120)


def test_delete_removes_all_selected(machine):
    a = machine.scene.add_object(make_shape(x=0, y=0, w=10, h=10))
    b = machine.scene.add_object(make_shape(x=100, y=100, w=10, h=10))
    c = machine.scene.add_object(make_shape(x=200, y=200, w=10, h=10))
    machine.scene.select_objects([a, c])
    assert machine.key_press(KEY_DELETE)
    assert machine.scene.objects == [b]
    assert machine.scene.selection == []


def test_delete_with_empty_selection_is_noop(machine):
    machine.scene.add_object(make_shape())
    assert machine.delete_selection() is False
    assert len(machine.history) == 0


def test_ctrl_z_undoes_last_change(machine):
    drag(machine, (0, 0), (50, 50))
    drag(machine, (100, 100), (150, 150))
    assert machine.key_press("z", ctrl=True)
    assert len(machine.scene.objects) == 1
    assert machine.key_press("Z", ctrl=True)
    assert machine.scene.objects == []
    assert machine.key_press("z", ctrl=True)
    assert machine.key_press("c", ctrl=True) is False


def test_undo_restores_pre_mutation_state(machine):
    rect = machine.scene.add_object(make_shape(x=0, y=0, w=100, h=100))
    before = [(obj.id, obj.x, obj.y, obj.w, obj.h) for obj in machine.scene.objects]
    drag(machine, (50, 50), (80, 90))
    assert (rect.x, rect.y) == (30, 40)
    assert machine.undo()
    after = [(obj.id, obj.x, obj.y, obj.w, obj.h) for obj in machine.scene.objects]
    assert after == before


def test_changes_are_persisted(machine, storage):
    drag(machine, (10, 10), (110, 60))
    reloaded = SceneDocument(storage)
    (rect,) = reloaded.load()
    assert (rect.x, rect.y, rect.w, rect.h) == (10, 10, 100, 50)


def test_sketch_collects_points_and_ignores_existing_objects(machine):
    machine.scene.add_object(make_shape(x=0, y=0, w=100, h=100))
    machine.set_tool("Sketch")
    machine.pointer_down(10, 10)
    assert machine.state is InteractionState.DRAWING
    machine.pointer_move(20, 20)
    machine.pointer_move(30, 25)
    machine.pointer_up()
    sketch = machine.scene.objects[-1]
    assert sketch.kind is ObjectKind.SKETCH
    assert sketch.points == [(10, 10), (20, 20), (30, 25)]
    assert len(machine.scene) == 2


def test_unknown_tool(machine):
    with pytest.raises(KeyError):
        machine.set_tool("Lasso")


def test_text_tool_requests_placement(machine, qtbot):
    machine.set_tool("Text")
    with qtbot.waitSignal(machine.placement_requested) as blocker:
        machine.pointer_down(40, 60)
    assert blocker.args == [ObjectKind.TEXT, 40, 60]
    machine.pointer_up()
    assert machine.scene.objects == []

    text = machine.place_text(40, 60, "Hello")
    assert isinstance(text, TextObject)
    assert (text.w, text.h) == (54, -18)
    assert machine.scene.selection == [text]
    assert machine.place_text(0, 0, "") is None

    machine.undo()
    assert machine.scene.objects == []


def test_text_tool_selects_existing_objects(machine):
    rect = machine.scene.add_object(make_shape(x=0, y=0, w=100, h=100))
    machine.set_tool("Text")
    machine.pointer_down(50, 50)
    assert machine.state is InteractionState.DRAGGING
    assert machine.scene.selection == [rect]


def test_insert_image_is_undoable_and_unselected(machine, qtbot):
    image = machine.insert_image(png_data_uri())
    assert machine.scene.objects == [image]
    assert machine.scene.selection == []
    assert (image.x, image.y, image.w, image.h) == (100, 100, 300, 300)
    qtbot.waitUntil(lambda: image.image.is_ready)
    machine.undo()
    assert machine.scene.objects == []


def test_update_property_applies_to_selection(machine):
    a = machine.scene.add_object(make_shape())
    b = machine.scene.add_object(make_shape())
    machine.scene.select_objects([a])
    machine.update_property("fill_color", "#ff0000")
    assert a.fill_color == "#ff0000"
    assert b.fill_color == "transparent"


def test_hover_reports_handles(machine, qtbot):
    rect = machine.scene.add_object(make_shape(x=0, y=0, w=100, h=100))
    machine.scene.select_objects([rect])
    with qtbot.waitSignal(machine.handle_hovered) as blocker:
        machine.pointer_move(100, 100)
    assert blocker.args == [Handle.BOTTOM_RIGHT]
    with qtbot.waitSignal(machine.handle_hovered) as blocker:
        machine.pointer_move(50, 50)
    assert blocker.args == [None]


def test_select_layer(machine):
    bottom = machine.scene.add_object(make_shape())
    machine.scene.add_object(make_shape())
    assert machine.select_layer(1) is bottom
    assert machine.scene.selection == [bottom]
    assert machine.select_layer(5) is None


def test_shape_object_fields_after_draw(machine):
    machine.set_tool("Ellipse")
    drag(machine, (0, 0), (40, 20))
    (ellipse,) = machine.scene.objects
    assert isinstance(ellipse, ShapeObject)
    assert ellipse.fill_color == "transparent"
    assert ellipse.label == ""
