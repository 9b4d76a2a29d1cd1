"""Decode command wiring for pzcache CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import Any, cast

from cli.output import print_json
from core.types import SUPPORTED_RECORD_TYPES, RecordType
from store.cache_sdk import PzCacheClient
from store.record_payload import fields_to_payload


def add_decode_command(subparsers: Any) -> None:
    """Register decode subcommand."""
    parser = subparsers.add_parser(
        "decode",
        help="Decode one raw blob file and print the extraction",
    )
    parser.add_argument("blob_file", help="File holding the raw blob bytes")
    parser.add_argument(
        "--type",
        dest="record_type",
        choices=SUPPORTED_RECORD_TYPES,
        default="player",
        help="Record type used to classify the blob",
    )


def run_decode_command(client: PzCacheClient, args: argparse.Namespace) -> int:
    """Decode a blob file and print its extracted fields."""
    blob_path = Path(args.blob_file).expanduser()
    try:
        data = blob_path.read_bytes()
    except OSError as error:
        print(f"error: failed to read blob file {blob_path}: {error}", file=sys.stderr)
        return 1
    result = client.decode(data, cast(RecordType, args.record_type))
    print_json(
        {
            "record_type": result.record_type,
            "byte_length": len(result.raw_bytes),
            "extracted": fields_to_payload(result.fields),
        }
    )
    return 0
