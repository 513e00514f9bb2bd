"""Keep a cursor in place while a markdown document switches representation."""

from cursorsync.config import SyncConfig
from cursorsync.models import CodeAnchor, CursorInfo, NodeType, TableAnchor
from cursorsync.sync import (
    CursorSynchronizer,
    extract_from_flat_surface,
    extract_from_structured_surface,
    restore_to_flat_surface,
    restore_to_structured_surface,
)

__version__ = "0.1.0"

__all__ = [
    "CodeAnchor",
    "CursorInfo",
    "CursorSynchronizer",
    "NodeType",
    "SyncConfig",
    "TableAnchor",
    "extract_from_flat_surface",
    "extract_from_structured_surface",
    "restore_to_flat_surface",
    "restore_to_structured_surface",
]
