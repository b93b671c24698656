"""
Tests for change sets, scratch buffers and the undo/redo canvas history.

Tests cover:
- Change layer and change set construction
- Commit, undo and redo
- Redo invalidation
- History depth and eviction into the permanent image
- Rendering and resizing
- Scratch commits
- Commit observers
"""

import unittest

from PIL import Image

from RP_Libs.CanvasLib.change_set import ChangeLayer, ChangeSet
from RP_Libs.CanvasLib.scratch import Scratch
from RP_Libs.CanvasLib.canvas_history import CanvasHistory
from RP_Libs.RasterLib.raster_models import CompositeOp

TRANSPARENT = (0, 0, 0, 0)


def _dot(x, y, color, size=(8, 8)):
    """Change set painting a single pixel."""
    image = Image.new("RGBA", size)
    image.putpixel((x, y), color)
    change_set = ChangeSet()
    change_set.add_layer(image)
    return change_set


def _color(index):
    return (index * 20 % 256, 255 - index * 15 % 256, index * 7 % 256, 255)


class TestChangeSet(unittest.TestCase):
    """Test ChangeLayer and ChangeSet."""

    def test_layer_copies_and_converts_image(self):
        source = Image.new("RGB", (2, 2), (1, 2, 3))
        layer = ChangeLayer(source)
        self.assertEqual(layer.image.mode, "RGBA")
        self.assertIsNot(layer.image, source)

    def test_layer_accepts_operation_names(self):
        layer = ChangeLayer(Image.new("RGBA", (1, 1)), "dst_out", (2, 3))
        self.assertIs(layer.operation, CompositeOp.DST_OUT)
        self.assertEqual(layer.extent, (3, 4))

    def test_size_covers_all_layers(self):
        change_set = ChangeSet()
        change_set.add_layer(Image.new("RGBA", (4, 2)))
        change_set.add_layer(Image.new("RGBA", (2, 2)), location=(5, 6))
        self.assertEqual(change_set.size, (7, 8))
        self.assertEqual(len(change_set), 2)

    def test_later_layers_draw_on_top(self):
        change_set = ChangeSet()
        change_set.add_layer(Image.new("RGBA", (1, 1), (255, 0, 0, 255)))
        change_set.add_layer(Image.new("RGBA", (1, 1), (0, 0, 255, 255)))

        result = change_set.apply(Image.new("RGBA", (1, 1)))

        self.assertEqual(result.getpixel((0, 0)), (0, 0, 255, 255))

    def test_erase_then_redraw(self):
        base = Image.new("RGBA", (2, 1), (255, 0, 0, 255))
        erase = Image.new("RGBA", (1, 1), (0, 0, 0, 255))
        change_set = ChangeSet()
        change_set.add_layer(erase, CompositeOp.DST_OUT)
        change_set.add_layer(Image.new("RGBA", (1, 1), (0, 255, 0, 255)), location=(1, 0))

        result = change_set.apply(base)

        self.assertEqual(result.getpixel((0, 0)), TRANSPARENT)
        self.assertEqual(result.getpixel((1, 0)), (0, 255, 0, 255))

    def test_frozen_change_set_rejects_layers(self):
        change_set = _dot(0, 0, _color(1))
        change_set.freeze()
        self.assertTrue(change_set.is_frozen)
        with self.assertRaises(RuntimeError):
            change_set.add_layer(Image.new("RGBA", (1, 1)))

    def test_empty_change_set_cannot_freeze(self):
        with self.assertRaises(ValueError):
            ChangeSet().freeze()

    def test_add_requires_change_layer(self):
        with self.assertRaises(TypeError):
            ChangeSet().add(Image.new("RGBA", (1, 1)))


class TestCanvasHistoryBasics(unittest.TestCase):
    """Test commit, undo and redo."""

    def setUp(self):
        self.history = CanvasHistory(8, 8)

    def test_new_history_is_empty(self):
        self.assertEqual(self.history.size, (8, 8))
        self.assertEqual(self.history.max_depth, 12)
        self.assertFalse(self.history.has_undoable_changes())
        self.assertFalse(self.history.has_redoable_changes())
        self.assertEqual(set(self.history.render().getdata()), {TRANSPARENT})

    def test_undo_and_redo_without_history_return_false(self):
        self.assertFalse(self.history.undo())
        self.assertFalse(self.history.redo())

    def test_commit_renders_change(self):
        self.history.commit(_dot(2, 3, _color(1)))
        self.assertEqual(self.history.render().getpixel((2, 3)), _color(1))
        self.assertEqual(self.history.undo_depth, 1)

    def test_undo_hides_and_redo_restores(self):
        self.history.commit(_dot(2, 3, _color(1)))

        self.assertTrue(self.history.undo())
        self.assertEqual(self.history.render().getpixel((2, 3)), TRANSPARENT)
        self.assertEqual(self.history.redo_depth, 1)

        self.assertTrue(self.history.redo())
        self.assertEqual(self.history.render().getpixel((2, 3)), _color(1))
        self.assertFalse(self.history.redo())

    def test_undo_redo_round_trip(self):
        count = 5
        for index in range(count):
            self.history.commit(_dot(index, index, _color(index)))
        expected = self.history.render().tobytes()

        for k in range(count + 1):
            for _ in range(k):
                self.assertTrue(self.history.undo())
            for _ in range(k):
                self.assertTrue(self.history.redo())
            self.assertEqual(self.history.render().tobytes(), expected, msg=f"k={k}")

    def test_commit_after_undo_discards_redo(self):
        self.history.commit(_dot(0, 0, _color(1)))
        self.history.commit(_dot(1, 1, _color(2)))
        self.history.undo()

        self.history.commit(_dot(2, 2, _color(3)))

        self.assertFalse(self.history.redo())
        self.assertEqual(len(self.history), 2)
        self.assertEqual(self.history.render().getpixel((1, 1)), TRANSPARENT)

    def test_commit_freezes_change_set(self):
        change_set = _dot(0, 0, _color(1))
        self.history.commit(change_set)
        self.assertTrue(change_set.is_frozen)

    def test_commit_rejects_empty_and_non_change_sets(self):
        with self.assertRaises(ValueError):
            self.history.commit(ChangeSet())
        with self.assertRaises(TypeError):
            self.history.commit(Image.new("RGBA", (1, 1)))

    def test_peek(self):
        first = _dot(0, 0, _color(1))
        second = _dot(1, 1, _color(2))
        self.history.commit(first)
        self.history.commit(second)

        self.assertIs(self.history.peek(), second)
        self.assertIs(self.history.peek(1), first)
        with self.assertRaises(IndexError):
            self.history.peek(2)

        self.history.undo()
        self.assertIs(self.history.peek(), first)


class TestCanvasHistoryDepth(unittest.TestCase):
    """Test history bound and eviction into the permanent image."""

    def test_history_never_exceeds_depth(self):
        history = CanvasHistory(8, 8, max_depth=3)
        for index in range(6):
            history.commit(_dot(index, 0, _color(index)))
            self.assertLessEqual(len(history), 3)
        self.assertEqual(history.undo_depth, 3)

    def test_eviction_does_not_change_render(self):
        history = CanvasHistory(8, 8, max_depth=3)
        for index in range(3):
            history.commit(_dot(index, 0, _color(index)))
        before = history.render().tobytes()

        history.commit(_dot(7, 7, (0, 0, 0, 0)))

        self.assertEqual(history.render().tobytes(), before)
        self.assertIsNotNone(history.permanent_image)
        self.assertEqual(history.permanent_image.getpixel((0, 0)), _color(0))

    def test_evicted_change_cannot_be_undone(self):
        history = CanvasHistory(8, 8, max_depth=2)
        for index in range(3):
            history.commit(_dot(index, 0, _color(index)))

        while history.undo():
            pass

        rendered = history.render()
        self.assertEqual(rendered.getpixel((0, 0)), _color(0))
        self.assertEqual(rendered.getpixel((1, 0)), TRANSPARENT)

    def test_eviction_preserves_translucent_and_erased_pixels(self):
        history = CanvasHistory(4, 4, max_depth=1)
        history.commit(_dot(1, 1, (10, 20, 30, 128), size=(4, 4)))
        erase = ChangeSet()
        erase.add_layer(Image.new("RGBA", (1, 1), (0, 0, 0, 255)), CompositeOp.DST_OUT, (1, 1))
        history.commit(erase)
        before = history.render().tobytes()

        history.commit(_dot(3, 3, (1, 1, 1, 255), size=(4, 4)))
        history.undo()

        self.assertEqual(history.render().tobytes(), before)

    def test_depth_clamps_to_one(self):
        history = CanvasHistory(4, 4, max_depth=0)
        self.assertEqual(history.max_depth, 1)

    def test_permanent_grows_to_fit_large_change(self):
        history = CanvasHistory(4, 4, max_depth=1)
        history.commit(_dot(9, 9, _color(2), size=(10, 10)))
        history.commit(_dot(0, 0, _color(3), size=(4, 4)))

        self.assertEqual(history.permanent_image.size, (10, 10))
        history.resize(10, 10)
        self.assertEqual(history.render().getpixel((9, 9)), _color(2))


class TestCanvasHistoryImages(unittest.TestCase):
    """Test construction from images, rendering and resizing."""

    def test_initial_image_becomes_permanent_base(self):
        base = Image.new("RGBA", (5, 4), (9, 9, 9, 255))
        history = CanvasHistory(initial_image=base)

        self.assertEqual(history.size, (5, 4))
        self.assertEqual(history.render().tobytes(), base.tobytes())
        self.assertFalse(history.undo())

    def test_requires_size(self):
        with self.assertRaises(ValueError):
            CanvasHistory()
        with self.assertRaises(ValueError):
            CanvasHistory(0, 5)

    def test_resize_keeps_content_at_top_left(self):
        history = CanvasHistory(initial_image=Image.new("RGBA", (4, 4), (9, 9, 9, 255)))

        history.resize(6, 2)
        rendered = history.render()

        self.assertEqual(rendered.size, (6, 2))
        self.assertEqual(rendered.getpixel((3, 1)), (9, 9, 9, 255))
        self.assertEqual(rendered.getpixel((5, 1)), TRANSPARENT)
        self.assertEqual(history.scratch.size, (6, 2))

    def test_render_does_not_alias_permanent(self):
        history = CanvasHistory(initial_image=Image.new("RGBA", (2, 2), (9, 9, 9, 255)))
        history.render().putpixel((0, 0), (1, 1, 1, 1))
        self.assertEqual(history.render().getpixel((0, 0)), (9, 9, 9, 255))


class TestScratch(unittest.TestCase):
    """Test scratch buffers and scratch commits."""

    def test_empty_scratch_has_no_change_set(self):
        scratch = Scratch(4, 4)
        self.assertFalse(scratch.has_changes())
        self.assertIsNone(scratch.get_change_set())

    def test_change_set_orders_remove_before_add_and_crops(self):
        scratch = Scratch(6, 6)
        scratch.add_scratch.putpixel((4, 5), (1, 2, 3, 255))
        scratch.remove_scratch.putpixel((1, 2), (0, 0, 0, 255))

        change_set = scratch.get_change_set()

        remove_layer, add_layer = change_set.layers
        self.assertIs(remove_layer.operation, CompositeOp.DST_OUT)
        self.assertEqual(remove_layer.location, (1, 2))
        self.assertEqual(remove_layer.image.size, (1, 1))
        self.assertIs(add_layer.operation, CompositeOp.SRC_OVER)
        self.assertEqual(add_layer.location, (4, 5))

    def test_only_add_layer_when_nothing_erased(self):
        scratch = Scratch(3, 3)
        scratch.add_scratch.putpixel((0, 0), (1, 2, 3, 255))
        self.assertEqual(len(scratch.get_change_set()), 1)

    def test_set_size_preserves_content(self):
        scratch = Scratch(3, 3)
        scratch.add_scratch.putpixel((1, 1), (1, 2, 3, 255))
        scratch.set_size(5, 5)
        self.assertEqual(scratch.add_scratch.size, (5, 5))
        self.assertEqual(scratch.add_scratch.getpixel((1, 1)), (1, 2, 3, 255))

    def test_commit_scratch(self):
        history = CanvasHistory(initial_image=Image.new("RGBA", (4, 4), (9, 9, 9, 255)))
        history.scratch.remove_scratch.putpixel((0, 0), (0, 0, 0, 255))
        history.scratch.add_scratch.putpixel((3, 3), (1, 2, 3, 255))

        preview = history.render(include_scratch=True)
        committed = history.commit_scratch()

        self.assertIsNotNone(committed)
        self.assertFalse(history.scratch.has_changes())
        rendered = history.render()
        self.assertEqual(rendered.tobytes(), preview.tobytes())
        self.assertEqual(rendered.getpixel((0, 0)), TRANSPARENT)
        self.assertEqual(rendered.getpixel((3, 3)), (1, 2, 3, 255))

        history.undo()
        self.assertEqual(history.render().getpixel((0, 0)), (9, 9, 9, 255))

    def test_commit_empty_scratch_is_noop(self):
        history = CanvasHistory(4, 4)
        self.assertIsNone(history.commit_scratch())
        self.assertEqual(len(history), 0)


class TestCommitObservers(unittest.TestCase):
    """Test commit observer notifications."""

    def setUp(self):
        self.history = CanvasHistory(4, 4)
        self.events = []
        self.observer = lambda history, change_set, image: self.events.append((history, change_set, image))
        self.history.add_commit_observer(self.observer)

    def test_commit_notifies_with_change_set_and_image(self):
        change_set = _dot(1, 1, _color(1), size=(4, 4))
        self.history.commit(change_set)

        history, notified_set, image = self.events[-1]
        self.assertIs(history, self.history)
        self.assertIs(notified_set, change_set)
        self.assertEqual(image.getpixel((1, 1)), _color(1))

    def test_undo_and_redo_notify_without_change_set(self):
        self.history.commit(_dot(1, 1, _color(1), size=(4, 4)))
        self.history.undo()
        self.history.redo()

        self.assertEqual(len(self.events), 3)
        self.assertIsNone(self.events[1][1])
        self.assertEqual(self.events[1][2].getpixel((1, 1)), TRANSPARENT)
        self.assertIsNone(self.events[2][1])

    def test_failed_undo_does_not_notify(self):
        self.history.undo()
        self.assertEqual(self.events, [])

    def test_remove_observer(self):
        self.assertTrue(self.history.remove_commit_observer(self.observer))
        self.history.commit(_dot(0, 0, _color(1), size=(4, 4)))
        self.assertEqual(self.events, [])
        self.assertFalse(self.history.remove_commit_observer(self.observer))

    def test_observer_must_be_callable(self):
        with self.assertRaises(TypeError):
            self.history.add_commit_observer("not callable")


if __name__ == "__main__":
    unittest.main()
