#!/usr/bin/env python3
"""Create the session table (with TTL on `expires`) if it does not exist.

Meant for local DynamoDB and throwaway test accounts. Production tables
should be provisioned by infrastructure code.

Usage:
    # Use config/{DYNAMO_SESSIONS_ENV}.toml settings
    uv run python scripts/bootstrap_session_table.py

    # Against DynamoDB Local with a custom table name
    uv run python scripts/bootstrap_session_table.py \
        --endpoint-url http://localhost:8000 --table sessions-dev
"""

import argparse
import asyncio
import sys

from dynamo_sessions.config import get_settings
from dynamo_sessions.config.models.storage import TableCreationConfig
from dynamo_sessions.db.dynamodb import DynamoDBKeyValueStore
from dynamo_sessions.observability.logging import get_logger, setup_logging_from_config
from dynamo_sessions.sessions.bootstrap import TableBootstrapper

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--table", help="Table name (defaults to configured table)")
    parser.add_argument("--hash-key", help="Partition key attribute name")
    parser.add_argument("--endpoint-url", help="DynamoDB endpoint override")
    parser.add_argument("--region", help="AWS region")
    parser.add_argument(
        "--attempts",
        type=int,
        help="Status checks before giving up on the table becoming ACTIVE",
    )
    return parser.parse_args(argv)


async def bootstrap(args: argparse.Namespace) -> bool:
    settings = get_settings()
    setup_logging_from_config(settings.observability.logging)

    session_config = settings.storage.session
    aws_config = settings.storage.aws.model_copy(
        update={
            k: v
            for k, v in {
                "endpoint_url": args.endpoint_url,
                "region_name": args.region,
            }.items()
            if v is not None
        }
    )
    creation = session_config.create_table or TableCreationConfig()
    if args.attempts is not None:
        creation = creation.model_copy(update={"poll_attempts": args.attempts})

    table_name = args.table or session_config.table_name
    hash_key = args.hash_key or session_config.hash_key

    async with await DynamoDBKeyValueStore.connect(aws_config) as kv:
        ready = await TableBootstrapper(kv, logger=logger).ensure_table(
            table_name, hash_key, creation
        )

    logger.info("bootstrap_finished", table=table_name, ready=ready)
    return ready


def main(argv: list[str] | None = None) -> int:
    return 0 if asyncio.run(bootstrap(parse_args(argv))) else 1


if __name__ == "__main__":
    sys.exit(main())
