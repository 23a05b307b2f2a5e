"""Legacy plan migration — normalize a directory of plan documents.

Usage:
    python -m migrator.migrate --source plans/legacy --output plans/canonical
    python -m migrator.migrate --source plans/legacy --dry-run
    python -m migrator.migrate --source plans/legacy --push-garmin --schedule-from 2026-11-02

Every ``*.json`` file is normalized independently. Valid plans are written
in canonical wire form; failures are listed as ``file:path: kind: reason``
rows. Exit status is 1 when any document failed.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from activity_plan.errors import MalformedLegacyNode, MalformedLegacyPlan, MalformedNode
from activity_plan.models.plan import PlanStructure
from activity_plan.normalization import normalize_plan
from activity_plan.serialization.wire import to_wire_json

from migrator import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MigrationFailure:
    """All problems found in one source document."""

    source: str
    issues: tuple[MalformedLegacyNode, ...]

    def rows(self) -> list[str]:
        return [f"{self.source}:{issue}" for issue in self.issues]


@dataclass
class MigrationReport:
    """Outcome of migrating a batch of documents."""

    plans: dict[str, PlanStructure] = field(default_factory=dict)
    failures: list[MigrationFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def rows(self) -> list[str]:
        return [row for failure in self.failures for row in failure.rows()]


def migrate_documents(documents: Mapping[str, Any]) -> MigrationReport:
    """Normalize every document; collect successes and batch failures by name."""
    report = MigrationReport()
    for source, document in documents.items():
        try:
            report.plans[source] = normalize_plan(document)
        except MalformedLegacyPlan as exc:
            report.failures.append(MigrationFailure(source, exc.issues))
    logger.info(
        "Migrated %d document(s), %d failed",
        len(report.plans), len(report.failures),
    )
    return report


def load_documents(source_dir: Path) -> tuple[dict[str, Any], list[MigrationFailure]]:
    """Read every ``*.json`` under *source_dir*. Unparseable files become failures."""
    documents: dict[str, Any] = {}
    failures: list[MigrationFailure] = []
    for path in sorted(source_dir.glob("*.json")):
        try:
            with open(path, encoding="utf-8") as f:
                documents[path.name] = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            failures.append(_unreadable(path.name, f"Invalid JSON: {exc}"))
        except OSError as exc:
            logger.warning("Could not read %s: %s", path, exc)
            failures.append(_unreadable(path.name, f"Unreadable file: {exc}"))
    return documents, failures


def _unreadable(source: str, reason: str) -> MigrationFailure:
    return MigrationFailure(source, (MalformedLegacyNode("", MalformedNode.kind, reason),))


def write_plans(plans: Mapping[str, PlanStructure], output_dir: Path) -> list[Path]:
    """Write each plan as canonical JSON under *output_dir*, keeping file names."""
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for source, plan in plans.items():
        target = output_dir / source
        target.write_text(to_wire_json(plan) + "\n", encoding="utf-8")
        written.append(target)
    return written


def push_to_garmin(plans: list[PlanStructure], schedule_from: date | None) -> bool:
    """Upload migrated plans to Garmin Connect. Returns False on failure."""
    from garmin_client import GarminClient

    try:
        client = GarminClient(
            email=config.GARMIN_EMAIL,
            password=config.GARMIN_PASSWORD,
            token_dir=config.TOKEN_DIR,
        )
    except Exception as exc:
        logger.error("Failed to connect to Garmin: %s", exc)
        return False

    try:
        ids = client.upload_plans(plans, start_date=schedule_from)
    except Exception as exc:
        logger.error("Failed to upload plans: %s", exc)
        return False
    logger.info("Uploaded %d plan(s) to Garmin Connect, IDs: %s", len(ids), ids)
    return True


def run(
    source_dir: Path,
    output_dir: Path | None,
    push_garmin: bool = False,
    schedule_from: date | None = None,
) -> int:
    """Execute one migration. Returns the process exit status."""
    if not source_dir.is_dir():
        logger.error("Source directory not found: %s", source_dir)
        return 2

    documents, failures = load_documents(source_dir)
    report = migrate_documents(documents)
    report.failures[:0] = failures

    for row in report.rows():
        print(row)

    if output_dir is not None and report.plans:
        written = write_plans(report.plans, output_dir)
        logger.info("Wrote %d canonical plan(s) to %s", len(written), output_dir)

    if push_garmin and report.plans:
        if not push_to_garmin(list(report.plans.values()), schedule_from):
            return 1

    return 0 if report.ok else 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Migrate legacy activity plan documents")
    parser.add_argument("--source", type=Path, default=config.SOURCE_DIR,
                        help="Directory of legacy *.json plan documents")
    output = parser.add_mutually_exclusive_group()
    output.add_argument("--output", type=Path, default=config.OUTPUT_DIR,
                        help="Directory for canonical plan documents")
    output.add_argument("--dry-run", action="store_true",
                        help="Validate only, write nothing")
    parser.add_argument("--push-garmin", action="store_true",
                        help="Upload migrated plans to Garmin Connect")
    parser.add_argument("--schedule-from", type=date.fromisoformat, default=None,
                        help="Schedule uploaded plans one per day from this date (YYYY-MM-DD)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    output_dir = None if args.dry_run else args.output
    return run(args.source, output_dir, args.push_garmin, args.schedule_from)


if __name__ == "__main__":
    sys.exit(main())
