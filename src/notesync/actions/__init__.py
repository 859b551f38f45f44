"""Mutation actions package."""

from notesync.actions.results import ActionResult, Failure, Success

__all__ = ["ActionResult", "Failure", "Success"]
