import argparse
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

from common.errors import StorageConnectionError
from dal.factory import create_storage, get_schema_inspector

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def _run(args) -> object:
    storage = await create_storage()
    try:
        inspector = get_schema_inspector(storage)
        if args.command == "tables":
            return await inspector.get_tables()
        if args.command == "inspect":
            table = await inspector.get_table(args.table)
            return table.model_dump()
        schema = await inspector.get_schema()
        return schema.model_dump()
    finally:
        await storage.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect the content store schema")
    subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)
    subparsers.add_parser("tables", help="List content tables")
    inspect_parser = subparsers.add_parser("inspect", help="Describe one table")
    inspect_parser.add_argument("table", help="Table name")
    subparsers.add_parser("dump", help="Describe every table")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    return parser


def main(argv=None):
    """Run the schema inspection CLI."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    try:
        result = asyncio.run(_run(args))
    except StorageConnectionError as e:
        logger.error(f"Cannot reach the content store: {e}")
        sys.exit(2)
    except Exception as e:
        logger.error(f"Schema inspection failed: {e}", exc_info=True)
        sys.exit(1)
    print(json.dumps(result, indent=args.indent, default=str))


if __name__ == "__main__":
    main()
