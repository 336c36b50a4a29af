"""Format Bridge Web - HTTP API and workbench session for the converter."""

from .session import Workbench, WorkbenchPanel, apply_share_query, flip, generate_share_query, refresh

__all__ = [
    "Workbench",
    "WorkbenchPanel",
    "apply_share_query",
    "flip",
    "generate_share_query",
    "refresh",
]
