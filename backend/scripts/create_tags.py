#!/usr/bin/env python3
"""Create a batch of NFC tags ready to be written onto physical tags.

Usage:
    python scripts/create_tags.py [count]
    python scripts/create_tags.py --pending

Prints the URL of every created tag. ``--pending`` lists tags that have not been
marked as injected yet.
"""
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tagclaim.config import get_settings
from tagclaim.database import get_engine, get_session_local
from tagclaim.models.base import Base
from tagclaim.services.tag_registry import TagRegistry


def create_tags(count: int = 1):
    """Create ``count`` AVAILABLE tags with generated IDs."""
    # Ensure tables exist
    engine = get_engine()
    Base.metadata.create_all(bind=engine)

    SessionLocal = get_session_local()
    db = SessionLocal()

    try:
        registry = TagRegistry(db, get_settings().tag_base_url)
        tags = [registry.create() for _ in range(count)]
        print(f"Created {len(tags)} NFC tag(s):")
        for tag in tags:
            print(f"  {tag.tag_id}  {tag.tag_url}")
        return tags

    finally:
        db.close()


def list_pending():
    """List tags not yet written to hardware."""
    SessionLocal = get_session_local()
    db = SessionLocal()

    try:
        registry = TagRegistry(db, get_settings().tag_base_url)
        tags, total = registry.list(is_injected=False)
        if not total:
            print("No pending tags")
            return

        print(f"\n{total} tag(s) waiting to be injected:")
        print("-" * 60)
        for tag in tags:
            print(f"  {tag.tag_url} [{tag.status.value}]")
        print("-" * 60)

    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "--pending":
        list_pending()
    else:
        count = int(sys.argv[1]) if len(sys.argv) > 1 else 1
        create_tags(count)
