"""notesync - notes with tags, validated mutations and a debounced autosave session."""

__version__ = "0.1.0"
