"""
Layered undo/redo canvas history.

The history keeps a permanent base image plus a bounded list of committed
change sets and a cursor into that list. Change sets at or before the
cursor are applied; those after it are the redo tail. Rendering is a full
re-composite from the permanent base on every call.

When a commit pushes the list past its maximum depth, the oldest change set
is folded into the permanent base, which is grown as needed. Eviction never
changes what render() returns.

Classes:
    CanvasHistory: Bounded linear undo/redo history with commit observers

Example:
    >>> history = CanvasHistory(width=64, height=64)
    >>> change_set = ChangeSet()
    >>> change_set.add_layer(stroke_image)
    >>> history.commit(change_set)
    >>> history.undo()
    True
    >>> history.redo()
    True
"""

import logging
from typing import Any, Callable, List, Optional, Tuple

from RP_Libs.constants import DEFAULT_UNDO_DEPTH, MIN_UNDO_DEPTH
from RP_Libs.pillow_compat import as_rgba, new_rgba, require_image
from RP_Libs.RasterLib.compositing import paste_top_left
from RP_Libs.CanvasLib.change_set import ChangeSet
from RP_Libs.CanvasLib.scratch import Scratch

logger = logging.getLogger(__name__)

# observer(history, change_set or None for undo/redo, rendered image)
CommitObserver = Callable[["CanvasHistory", Optional[ChangeSet], Any], None]


class CanvasHistory:
    """
    Canvas with a permanent base, a bounded undo history and a scratch.

    Args:
        width: Canvas width; defaults to the initial image's width
        height: Canvas height; defaults to the initial image's height
        initial_image: Optional PIL Image that becomes the permanent base
        max_depth: Maximum number of undoable change sets (at least 1)

    Raises:
        ValueError: If the canvas size cannot be determined or is not positive
    """

    def __init__(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        initial_image: Optional[Any] = None,
        max_depth: int = DEFAULT_UNDO_DEPTH,
    ):
        self._permanent: Optional[Any] = None
        if initial_image is not None:
            self._permanent = as_rgba(initial_image)
            width = self._permanent.width if width is None else width
            height = self._permanent.height if height is None else height

        if width is None or height is None:
            raise ValueError("Canvas size requires width and height or an initial image")

        self._width, self._height = self._validate_size(width, height)
        self._max_depth = max(MIN_UNDO_DEPTH, int(max_depth))
        self._changes: List[ChangeSet] = []
        self._cursor = -1
        self._observers: List[CommitObserver] = []
        self._scratch = Scratch(self._width, self._height)

    @staticmethod
    def _validate_size(width: int, height: int) -> Tuple[int, int]:
        width, height = int(width), int(height)
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got ({width}, {height})")
        return width, height

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def size(self) -> Tuple[int, int]:
        return self._width, self._height

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def scratch(self) -> Scratch:
        return self._scratch

    @property
    def permanent_image(self) -> Optional[Any]:
        """Copy of the permanent base, or None if nothing has been folded into it."""
        return None if self._permanent is None else self._permanent.copy()

    @property
    def undo_depth(self) -> int:
        """Number of change sets that can be undone."""
        return self._cursor + 1

    @property
    def redo_depth(self) -> int:
        """Number of change sets that can be redone."""
        return len(self._changes) - self._cursor - 1

    def has_undoable_changes(self) -> bool:
        return self.undo_depth > 0

    def has_redoable_changes(self) -> bool:
        return self.redo_depth > 0

    def __len__(self) -> int:
        return len(self._changes)

    def peek(self, index: int = 0) -> ChangeSet:
        """
        Look at an applied change set without changing the history.

        Args:
            index: 0 for the most recently applied change set, 1 for the one
                   before it, and so on

        Raises:
            IndexError: If index is negative or not less than undo_depth
        """
        index = int(index)
        if index < 0 or index >= self.undo_depth:
            raise IndexError(f"Cannot peek at change {index}; undo depth is {self.undo_depth}")
        return self._changes[self._cursor - index]

    # ------------------------------------------------------------------
    # History operations
    # ------------------------------------------------------------------

    def commit(self, change_set: ChangeSet) -> None:
        """
        Commit a change set as the newest undoable step.

        Any redo tail is discarded. If the history then exceeds max_depth the
        oldest change set is folded into the permanent base.

        Raises:
            TypeError: If change_set is not a ChangeSet
            ValueError: If change_set is empty
        """
        if not isinstance(change_set, ChangeSet):
            raise TypeError(f"Expected ChangeSet, got {type(change_set)}")

        change_set.freeze()

        discarded = self.redo_depth
        del self._changes[self._cursor + 1:]
        self._changes.append(change_set)
        self._cursor = len(self._changes) - 1

        logger.debug(
            f"Committed change set with {len(change_set)} layer(s); "
            f"discarded {discarded} redoable change set(s)"
        )

        while len(self._changes) > self._max_depth:
            self._evict_oldest()

        self._notify(change_set)

    def commit_scratch(self) -> Optional[ChangeSet]:
        """
        Commit whatever has been drawn into the scratch, then clear it.

        Returns:
            The committed ChangeSet, or None if the scratch was empty
        """
        change_set = self._scratch.get_change_set()
        self._scratch.clear()

        if change_set is None:
            logger.debug("Scratch is empty, nothing to commit")
            return None

        self.commit(change_set)
        return change_set

    def undo(self) -> bool:
        """Move the cursor back one change set. Returns False if there is nothing to undo."""
        if self._cursor < 0:
            return False

        self._cursor -= 1
        logger.debug(f"Undo; undo depth now {self.undo_depth}")
        self._notify(None)
        return True

    def redo(self) -> bool:
        """Move the cursor forward one change set. Returns False if there is nothing to redo."""
        if self._cursor >= len(self._changes) - 1:
            return False

        self._cursor += 1
        logger.debug(f"Redo; undo depth now {self.undo_depth}")
        self._notify(None)
        return True

    def _evict_oldest(self) -> None:
        oldest = self._changes.pop(0)
        self._cursor -= 1

        current_width, current_height = self._permanent.size if self._permanent is not None else (0, 0)
        needed_width, needed_height = oldest.size
        size = (max(current_width, needed_width, 1), max(current_height, needed_height, 1))

        if self._permanent is None:
            base = new_rgba(size)
        elif self._permanent.size != size:
            base = paste_top_left(self._permanent, size)
        else:
            base = self._permanent

        self._permanent = oldest.apply(base)
        logger.debug(f"Folded oldest change set into permanent image of size {size}")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, include_scratch: bool = False) -> Any:
        """
        Render the visible canvas image.

        Args:
            include_scratch: Also apply the uncommitted scratch on top

        Returns:
            New RGBA PIL Image of the canvas size
        """
        if self._permanent is None:
            image = new_rgba(self.size)
        else:
            image = paste_top_left(self._permanent, self.size)

        for change_set in self._changes[:self._cursor + 1]:
            image = change_set.apply(image)

        if include_scratch:
            image = self._scratch.apply(image)

        return image

    def resize(self, width: int, height: int) -> None:
        """
        Change the canvas size. Content stays anchored at the top-left; history
        and the permanent base are kept whole, so growing the canvas again
        reveals content that a smaller size had cropped.
        """
        self._width, self._height = self._validate_size(width, height)
        self._scratch.set_size(self._width, self._height)
        logger.debug(f"Canvas resized to {self.size}")

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def add_commit_observer(self, observer: CommitObserver) -> None:
        if not callable(observer):
            raise TypeError(f"observer must be callable, got {type(observer)}")
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_commit_observer(self, observer: CommitObserver) -> bool:
        if observer in self._observers:
            self._observers.remove(observer)
            return True

        logger.warning(f"Commit observer {observer!r} was not registered")
        return False

    def _notify(self, change_set: Optional[ChangeSet]) -> None:
        if not self._observers:
            return

        image = self.render()
        for observer in list(self._observers):
            observer(self, change_set, image)

    def __repr__(self) -> str:
        return (
            f"CanvasHistory(size={self.size}, max_depth={self._max_depth}, "
            f"changes={len(self._changes)}, cursor={self._cursor})"
        )
