#!/usr/bin/env python3
"""
Seed Demo Notes

Creates a handful of tags and tagged notes through the mutation actions,
so every write goes through validation exactly as the client's would.

Usage:
    python scripts/seed_notes.py
    python scripts/seed_notes.py --clean  # Delete all notes and tags first
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from notesync.actions import notes as note_actions
from notesync.actions import tags as tag_actions
from notesync.core.database import dispose_engine, get_session_factory, init_models
from notesync.repositories.gateway import SqlGateway

DEMO_TAGS = [
    ("work", "#3B82F6"),
    ("personal", "#10B981"),
    ("ideas", "#F59E0B"),
    ("reading-list", "#8B5CF6"),
]

DEMO_NOTES = [
    ("Sprint planning", "<p>Review backlog, estimate the sync stories.</p>", ["work"]),
    ("Groceries", "<ul><li>milk</li><li>coffee</li></ul>", ["personal"]),
    ("Side project", "<p>Calendar view that filters notes by day.</p>", ["ideas", "work"]),
    (None, "<p>Designing Data-Intensive Applications</p>", ["reading-list"]),
]


def log_info(msg: str) -> None:
    print(f"ℹ {msg}")


def log_success(msg: str) -> None:
    print(f"✓ {msg}")


def log_error(msg: str) -> None:
    print(f"✗ {msg}")


async def clean(gateway: SqlGateway) -> None:
    """Delete every note and tag."""
    for note in await gateway.list_notes():
        await note_actions.delete_note(gateway, note.id)
    for tag in await gateway.list_tags():
        await tag_actions.delete_tag(gateway, tag.id)
    log_success("Deleted existing notes and tags")


async def seed(gateway: SqlGateway) -> int:
    """Create demo data. Returns the number of failures."""
    failures = 0
    tag_ids: dict[str, str] = {t.name: t.id for t in await gateway.list_tags()}

    for name, color in DEMO_TAGS:
        if name in tag_ids:
            log_info(f"Tag '{name}' already exists (skipping)")
            continue
        result = await tag_actions.create_tag(gateway, {"name": name, "color": color})
        if result.ok:
            tag_ids[name] = result.data.id
            log_success(f"Tag '{name}'")
        else:
            log_error(f"Tag '{name}': {result.error}")
            failures += 1

    for title, content, tags in DEMO_NOTES:
        result = await note_actions.create_note(
            gateway,
            {
                "title": title,
                "content": content,
                "tag_ids": [tag_ids[t] for t in tags if t in tag_ids],
            },
        )
        if result.ok:
            log_success(f"Note '{result.data.display_title}'")
        else:
            log_error(f"Note '{title}': {result.error}")
            failures += 1

    return failures


async def main() -> int:
    parser = argparse.ArgumentParser(description="Seed demo notes and tags")
    parser.add_argument("--clean", action="store_true", help="Delete all data first")
    args = parser.parse_args()

    await init_models()
    gateway = SqlGateway(get_session_factory())
    try:
        if args.clean:
            await clean(gateway)
        failures = await seed(gateway)
    finally:
        await dispose_engine()

    if failures:
        log_error(f"{failures} item(s) failed")
        return 1
    log_success("Seeding complete")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
