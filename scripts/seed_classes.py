"""Seed the monitored queue with classes from a JSON document.

Usage:
    python scripts/seed_classes.py classes.json --endpoint localhost:6379 --db 0

The document looks like::

    {"classes": [{"class_id": "A", "class_type": "feed", "score": 10, "url": "..."}]}
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from workledger.core.config import AppSettings
from workledger.core.exceptions import InvalidArgumentError
from workledger.core.log import configure_logging
from workledger.models.records import ClassRecord, ClassStatus
from workledger.persistence.connection import connect, connect_secure
from workledger.tracking import ClassRegistry

logger = logging.getLogger("workledger.scripts.seed_classes")


def seed_classes(registry: ClassRegistry, data: dict[str, Any]) -> int:
    """Write each class hash and its monitored score. Returns the count seeded."""
    entries = data.get("classes")
    if not isinstance(entries, list):
        raise InvalidArgumentError("seed document needs a 'classes' list")

    for entry in entries:
        fields = dict(entry)
        score = fields.pop("score", 0)
        fields.setdefault("status", ClassStatus.IDLE)
        record = ClassRecord.model_validate(fields)
        if not record.class_type:
            raise InvalidArgumentError(f"class {record.class_id!r} has no class_type")
        registry.update_class(record)
        registry.update_class_score(record.class_id, score, record.class_type)
        logger.info("Seeded class %s (%s) with score %s", record.class_id, record.class_type, score)

    return len(entries)


def main(argv: list[str] | None = None) -> int:
    settings = AppSettings()
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("file", type=Path, help="JSON document with a 'classes' list")
    parser.add_argument("--endpoint", default=settings.store.endpoint)
    parser.add_argument("--db", type=int, default=settings.store.db)
    parser.add_argument("--credential", default=settings.store.credential)
    args = parser.parse_args(argv)

    configure_logging(settings.log_level)
    if args.credential:
        session = connect_secure(args.endpoint, args.db, args.credential)
    else:
        session = connect(args.endpoint, args.db)

    data = json.loads(args.file.read_text())
    count = seed_classes(ClassRegistry(session), data)
    print(f"  Seeded {count} classes into db {args.db}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
