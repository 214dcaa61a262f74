from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path

from bucketfs.adapter import BucketAdapter
from bucketfs.config import AdapterConfig, load_config_file
from bucketfs.domain.attributes import DirectoryAttributes
from bucketfs.errors import BucketFsError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect and edit a prefix-scoped S3 bucket.")
    parser.add_argument("--config", type=Path, default=None, help="YAML adapter config")
    parser.add_argument("--bucket", type=str, default=None)
    parser.add_argument("--prefix", type=str, default=None)
    parser.add_argument("--verbose", action="store_true", default=False)

    sub = parser.add_subparsers(dest="command", required=True)

    ls = sub.add_parser("ls", help="List a directory")
    ls.add_argument("path", nargs="?", default="")
    ls.add_argument("--recursive", "-r", action="store_true", default=False)

    cat = sub.add_parser("cat", help="Print a file to stdout")
    cat.add_argument("path")

    put = sub.add_parser("put", help="Upload a local file")
    put.add_argument("source", type=Path)
    put.add_argument("path")
    put.add_argument("--public", action="store_true", default=False)

    rm = sub.add_parser("rm", help="Delete a file")
    rm.add_argument("path")

    mkdir = sub.add_parser("mkdir", help="Create a directory placeholder")
    mkdir.add_argument("path")

    rmdir = sub.add_parser("rmdir", help="Delete a directory placeholder (not its contents)")
    rmdir.add_argument("path")

    url = sub.add_parser("url", help="Print the public URL of a path")
    url.add_argument("path")

    stat = sub.add_parser("stat", help="Show metadata and visibility of a path")
    stat.add_argument("path")
    return parser


def _resolve_config(args: argparse.Namespace) -> AdapterConfig:
    if args.config:
        config = load_config_file(args.config)
    else:
        env = dict(os.environ)
        if args.bucket:
            env["S3_BUCKET_NAME"] = args.bucket
        config = AdapterConfig.from_env(env)

    overrides: dict[str, str] = {}
    if args.bucket:
        overrides["bucket"] = args.bucket
    if args.prefix is not None:
        overrides["prefix"] = args.prefix
    return dataclasses.replace(config, **overrides) if overrides else config


def _build_adapter(args: argparse.Namespace) -> BucketAdapter:
    return BucketAdapter.from_config(_resolve_config(args))


def _run(adapter: BucketAdapter, args: argparse.Namespace) -> int:
    command = args.command
    if command == "ls":
        for entry in adapter.list_contents(args.path, recursive=args.recursive):
            if isinstance(entry, DirectoryAttributes):
                print(f"{entry.path}/")
            else:
                print(f"{entry.path}\t{entry.file_size}")
        return 0
    if command == "cat":
        sys.stdout.buffer.write(adapter.read(args.path))
        sys.stdout.flush()
        return 0
    if command == "put":
        with open(args.source, "rb") as handle:
            adapter.write_stream(
                args.path, handle, visibility="public" if args.public else "private"
            )
        return 0
    if command == "rm":
        adapter.delete(args.path)
        return 0
    if command == "mkdir":
        adapter.create_directory(args.path)
        return 0
    if command == "rmdir":
        adapter.delete_directory(args.path)
        return 0
    if command == "url":
        print(adapter.get_url(args.path))
        return 0
    if command == "stat":
        meta = adapter.get_metadata(args.path)
        print(meta)
        if not isinstance(meta, DirectoryAttributes):
            print(f"visibility={adapter.visibility(args.path).visibility.value}")
        return 0
    raise ValueError(f"Unknown command: {command}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        adapter = _build_adapter(args)
        return _run(adapter, args)
    except BucketFsError as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
