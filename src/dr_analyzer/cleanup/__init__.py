"""Deletion of results from disk and from the result store."""

from dr_analyzer.cleanup.deletion import (
    DeletionReport,
    confirmation_message,
    delete_results,
    remove_empty_parent,
)

__all__ = ["DeletionReport", "confirmation_message", "delete_results", "remove_empty_parent"]
