"""Command line adapter.

One command per invocation; results are printed as JSON. Run through
`run_cli.py` or `python -m restkv`.

Examples:

    # Check the API key
    python run_cli.py ping

    # Create a value only if the key is free, then read it back
    python run_cli.py put users u1 '{"name": "Ada"}' --if-absent
    python run_cli.py get users u1

    # Page through a collection
    python run_cli.py list users --limit 20 --after u1
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from restkv.client import Client
from restkv.conditions import MatchRef, NoCondition, RequireAbsent
from restkv.config import ClientConfig
from restkv.errors import RestKVError
from restkv.responses import CollectionResponse, ItemResponse, Response

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="restkv", description="Talk to a key/value, events and graph API"
    )
    parser.add_argument("--base-url", default=None, help="API base URL (default: $RESTKV_BASE_URL)")
    parser.add_argument("--api-key", default=None, help="API key (default: $RESTKV_API_KEY)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("ping", help="Check authentication")

    p = commands.add_parser("get", help="Get a value")
    p.add_argument("collection")
    p.add_argument("key")
    p.add_argument("--ref", default=None, help="Get this ref instead of the latest")

    p = commands.add_parser("put", help="Create or update a value")
    p.add_argument("collection")
    p.add_argument("key")
    p.add_argument("body", help="JSON value")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--if-match", default=None, metavar="REF", help="Only if the current ref matches")
    group.add_argument("--if-absent", action="store_true", help="Only if the key has no value")

    p = commands.add_parser("delete", help="Delete a value")
    p.add_argument("collection")
    p.add_argument("key")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--ref", default=None, help="Only if the current ref matches")
    group.add_argument("--purge", action="store_true", help="Also delete the ref history")

    p = commands.add_parser("list", help="List a collection in key order")
    p.add_argument("collection")
    _add_range_arguments(p)

    p = commands.add_parser("search", help="Search a collection")
    p.add_argument("collection")
    p.add_argument("query")
    p.add_argument("--limit", default=None)
    p.add_argument("--offset", type=int, default=None)

    p = commands.add_parser("refs", help="List the refs of a key")
    p.add_argument("collection")
    p.add_argument("key")
    p.add_argument("--limit", default=None)
    p.add_argument("--offset", type=int, default=None)
    p.add_argument("--values", action="store_true", help="Include each ref's value")

    p = commands.add_parser("events", help="List events of one type")
    p.add_argument("collection")
    p.add_argument("key")
    p.add_argument("event_type")
    _add_range_arguments(p)

    p = commands.add_parser("relations", help="Walk relations from a key")
    p.add_argument("collection")
    p.add_argument("key")
    p.add_argument("kinds", nargs="+")

    return parser


def _add_range_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--limit", default=None)
    for bound in ("start", "after", "before", "end"):
        parser.add_argument(f"--{bound}", default=None)


def _range_options(args: argparse.Namespace) -> dict[str, Any]:
    names = ("limit", "start", "after", "before", "end")
    return {n: getattr(args, n) for n in names if getattr(args, n) is not None}


def render(response: Response) -> dict[str, Any]:
    """Reduce a response to a JSON-friendly dict."""
    if isinstance(response, CollectionResponse):
        return {
            "count": response.count,
            "total_count": response.total_count,
            "next": response.next_link,
            "results": [render(item) for item in response.results],
        }
    if isinstance(response, ItemResponse):
        return {
            "collection": response.collection,
            "key": response.key,
            "ref": response.ref,
            "value": response.value,
        }
    return {"status": response.status}


async def run_command(client: Client, args: argparse.Namespace) -> Response:
    """Dispatch parsed arguments to the matching client operation."""
    command = args.command
    if command == "ping":
        return await client.ping()
    if command == "get":
        return await client.get(args.collection, args.key, args.ref)
    if command == "put":
        if args.if_absent:
            condition = RequireAbsent()
        elif args.if_match:
            condition = MatchRef(args.if_match)
        else:
            condition = NoCondition()
        return await client.put(args.collection, args.key, json.loads(args.body), condition)
    if command == "delete":
        if args.purge:
            return await client.purge(args.collection, args.key)
        return await client.delete(args.collection, args.key, args.ref)
    if command == "list":
        return await client.list(args.collection, **_range_options(args))
    if command == "search":
        options = {"limit": args.limit, "offset": args.offset}
        return await client.search(
            args.collection, args.query, **{k: v for k, v in options.items() if v is not None}
        )
    if command == "refs":
        options: dict[str, Any] = {"limit": args.limit, "offset": args.offset}
        if args.values:
            options["values"] = True
        return await client.list_refs(
            args.collection, args.key, **{k: v for k, v in options.items() if v is not None}
        )
    if command == "events":
        return await client.list_events(
            args.collection, args.key, args.event_type, **_range_options(args)
        )
    if command == "relations":
        return await client.get_relations(args.collection, args.key, *args.kinds)
    raise ValueError(f"unknown command: {command}")


def _fail(command: str, error: Exception) -> int:
    logger.debug("%s failed", command, exc_info=True)
    print(f"error: {type(error).__name__}: {error}", file=sys.stderr)
    return 1


async def run(args: argparse.Namespace, client: Client | None = None) -> int:
    """Run one command, print its result and return the exit code."""
    if client is None:
        overrides = {}
        if args.base_url:
            overrides["base_url"] = args.base_url
        if args.api_key:
            overrides["api_key"] = args.api_key
        try:
            client = Client(ClientConfig.from_env(**overrides))
        except ValueError as e:
            return _fail(args.command, e)

    try:
        response = await run_command(client, args)
    except (RestKVError, json.JSONDecodeError) as e:
        return _fail(args.command, e)
    finally:
        await client.close()

    print(json.dumps(render(response), indent=2, default=str))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger("restkv").setLevel(logging.DEBUG)
    return asyncio.run(run(args))
