"""Run the retention purge from the command line.

Purges every org, or a single org with ``--org-id``. Prints the results as JSON.

Usage:
    python -m hive.cli.run_retention [--org-id ORG_ID] [--dry-run]
"""

import argparse
import asyncio
import json
from typing import Optional, Sequence
from uuid import UUID

from dependency_injector import providers

from hive.database.database import DatabaseSessionManager
from hive.main.config import get_settings
from hive.main.container.container import Container
from hive.main.logging import get_logger
from hive.main.request_context import bound_context
from hive.retention.retention_fleet import RetentionFleetRunner

logger = get_logger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Purge data past its retention window")
    parser.add_argument("--org-id", type=UUID, help="Only purge this org")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Count what would be deleted without deleting anything",
    )
    return parser.parse_args(argv)


async def run_retention(
    sessionmanager: DatabaseSessionManager, org_id: Optional[UUID], dry_run: bool
) -> dict:
    if org_id is None:
        response = await RetentionFleetRunner(sessionmanager).run_all(dry_run=dry_run)
        return response.model_dump(by_alias=True, mode="json")

    with bound_context(org_id=str(org_id)):
        async with sessionmanager.session() as session:
            container = Container(session=providers.Object(session))
            summary = await container.retention_purge_service().purge_org_once(
                org_id, None, dry_run=dry_run
            )
    return summary.to_meta()


async def _main(args: argparse.Namespace) -> dict:
    sessionmanager = DatabaseSessionManager()
    sessionmanager.init(get_settings().database_url)

    try:
        return await run_retention(sessionmanager, args.org_id, args.dry_run)
    finally:
        await sessionmanager.close()


def main(argv: Optional[Sequence[str]] = None):
    """Entry point for CLI script."""
    args = parse_args(argv)
    try:
        result = asyncio.run(_main(args))
    except KeyboardInterrupt:
        logger.info("Retention run interrupted by user")
        return
    except Exception as e:
        logger.error(f"Retention run failed: {e}", exc_info=True)
        exit(1)

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
