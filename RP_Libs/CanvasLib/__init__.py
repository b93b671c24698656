"""
CanvasLib - Layered undo/redo canvas

This module provides change layers and change sets, the scratch buffers
tools draw into, and the bounded canvas history that renders them.
"""

from RP_Libs.CanvasLib.change_set import ChangeLayer, ChangeSet
from RP_Libs.CanvasLib.scratch import Scratch
from RP_Libs.CanvasLib.canvas_history import CanvasHistory

__all__ = [
    "ChangeLayer",
    "ChangeSet",
    "Scratch",
    "CanvasHistory",
]
