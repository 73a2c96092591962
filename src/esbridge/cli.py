"""
esbridge CLI — Command-Line Interface
=====================================

Command-line access to the protocol client, mostly for checking a cluster
before pointing a job at it.

Usage:
    esbridge nodes
    esbridge nodes --info
    esbridge health logs --status yellow --timeout 30s
    esbridge exists logs/event
    esbridge shards logs/event
    esbridge scan logs/event --query '{"query": {"match_all": {}}}'
    esbridge load logs/event data/events.jsonl
    esbridge refresh logs/event
    esbridge delete logs
"""

import argparse
import json
import logging
import sys
from typing import List, Optional


logger = logging.getLogger(__name__)


def get_settings(args):
    """Build Settings from the global options."""
    from .settings import Settings

    kwargs = {}
    if args.hosts:
        kwargs["hosts"] = args.hosts
    if args.port:
        kwargs["port"] = args.port
    return Settings(**kwargs)


def open_client(args):
    from .client import RestClient

    return RestClient(get_settings(args))


def cmd_nodes(args):
    """List cluster nodes."""
    with open_client(args) as client:
        if not args.info:
            for address in client.discover_nodes():
                print(address)
            return

        nodes = client.get_nodes()
        print(f"\n{'Id':<24} {'Name':<20} {'HTTP':<22} {'Role':<6}")
        print("-" * 75)
        for node in nodes.values():
            role = "client" if node.is_client else ("data" if node.is_data else "-")
            print(
                f"{node.id:<24} "
                f"{node.name or '':<20} "
                f"{node.http_address or '':<22} "
                f"{role:<6}"
            )


def cmd_health(args):
    """Wait for an index to reach a health status."""
    from .client import Health
    from .unit import TimeValue

    status = Health[args.status.upper()]
    timeout = TimeValue.parse(args.timeout)

    with open_client(args) as client:
        reached = client.health(args.index, status, timeout)

    if reached:
        print(f"Index {args.index} reached status {status.wire}")
    else:
        print(f"Index {args.index} did not reach status {status.wire} within {timeout}")
    return 0 if reached else 1


def cmd_exists(args):
    """Check whether an index or type exists."""
    with open_client(args) as client:
        found = client.exists(args.path)
    print(f"{args.path}: {'exists' if found else 'missing'}")
    return 0 if found else 1


def cmd_refresh(args):
    """Refresh an index."""
    from .resource import Resource

    resource = Resource.parse(args.resource)
    with open_client(args) as client:
        client.refresh(resource)
    print(f"Refreshed index: {resource.index}")


def cmd_delete(args):
    """Delete an index."""
    if not args.force:
        confirm = input(f"Delete index '{args.index}'? [y/N] ")
        if confirm.lower() != 'y':
            print("Aborted.")
            return

    with open_client(args) as client:
        client.delete_index(args.index)
    print(f"Deleted index: {args.index}")


def cmd_shards(args):
    """Show the shard copies backing a resource."""
    from .resource import Resource

    resource = Resource.parse(args.resource)
    with open_client(args) as client:
        shards = client.target_shards(resource)

    print(f"\n{'Shard':>6} {'Primary':>8} {'State':<12} {'Node':<24}")
    print("-" * 55)
    for group in shards:
        for copy in group:
            print(
                f"{copy.get('shard', ''):>6} "
                f"{str(copy.get('primary', '')):>8} "
                f"{copy.get('state', ''):<12} "
                f"{copy.get('node', ''):<24}"
            )


def cmd_scan(args):
    """Print every hit of a search as JSON lines."""
    from .repository import ScrollQuery
    from .resource import Resource

    body = json.loads(args.query) if args.query else None
    settings = get_settings(args)

    with open_client(args) as client:
        with ScrollQuery(client, Resource.parse(args.resource), settings, body) as query:
            for hit in query:
                print(json.dumps(hit, ensure_ascii=False))
            logger.info("Read %d of %s hits", query.read, query.size)


def cmd_load(args):
    """Bulk load a JSONL file."""
    from .repository import BulkWriter
    from .resource import Resource

    resource = Resource.parse(args.resource)
    settings = get_settings(args)

    with open_client(args) as client:
        with BulkWriter(client, resource, settings) as writer:
            with open(args.file, 'r', encoding='utf-8') as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    doc = json.loads(line)
                    doc_id = doc.get(args.id_field) if args.id_field else None
                    writer.write(doc, doc_id=doc_id)

    print(f"Loaded {writer.documents_written:,} documents into {resource} "
          f"({writer.flushes} bulk requests)")


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="esbridge",
        description="esbridge — Elasticsearch REST protocol client"
    )

    # Global options
    parser.add_argument(
        "--hosts",
        help="Elasticsearch hosts (comma-separated)",
        default=None
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Default HTTP port",
        default=None
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every request"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    nodes_parser = subparsers.add_parser("nodes", help="List cluster nodes")
    nodes_parser.add_argument("--info", action="store_true", help="Show node details")

    health_parser = subparsers.add_parser("health", help="Wait for index health")
    health_parser.add_argument("index", help="Index name")
    health_parser.add_argument(
        "--status", choices=["red", "yellow", "green"], default="yellow",
        help="Minimum status"
    )
    health_parser.add_argument("--timeout", default="30s", help="Wait timeout")

    exists_parser = subparsers.add_parser("exists", help="Check an index or type exists")
    exists_parser.add_argument("path", help="Index or index/type")

    refresh_parser = subparsers.add_parser("refresh", help="Refresh an index")
    refresh_parser.add_argument("resource", help="index/type")

    delete_parser = subparsers.add_parser("delete", help="Delete an index")
    delete_parser.add_argument("index", help="Index name")
    delete_parser.add_argument("-f", "--force", action="store_true", help="Skip confirmation")

    shards_parser = subparsers.add_parser("shards", help="Show target shards")
    shards_parser.add_argument("resource", help="index/type")

    scan_parser = subparsers.add_parser("scan", help="Dump every hit of a search")
    scan_parser.add_argument("resource", help="index/type[/?query]")
    scan_parser.add_argument("--query", help="Search body (JSON)")

    load_parser = subparsers.add_parser("load", help="Bulk load a JSONL file")
    load_parser.add_argument("resource", help="index/type")
    load_parser.add_argument("file", help="JSONL file")
    load_parser.add_argument("--id-field", dest="id_field", help="Field holding the document id")

    # Parse and dispatch
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    commands = {
        "nodes": cmd_nodes,
        "health": cmd_health,
        "exists": cmd_exists,
        "refresh": cmd_refresh,
        "delete": cmd_delete,
        "shards": cmd_shards,
        "scan": cmd_scan,
        "load": cmd_load,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 2
    return handler(args) or 0


if __name__ == "__main__":
    sys.exit(main())
