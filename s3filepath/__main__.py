"""CLI entry point for resolving export paths.

Usage:
    python -m s3filepath resolve --bucket lake --schema sales --table orders \\
        --date 2021-03-05T00:00:00Z
    python -m s3filepath render --bucket lake --schema sales --table orders \\
        --date 2021-03-05 --suffix json.gz
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from s3filepath.checker import LocalPathChecker, PathChecker, S3PathChecker
from s3filepath.config import BucketConfig, load_bucket_config, load_env_file
from s3filepath.errors import S3FilePathError
from s3filepath.logging import setup_logging
from s3filepath.models import S3Bucket, S3File
from s3filepath.resolver import CANDIDATE_SUFFIXES, create_s3_file

logger = logging.getLogger(__name__)


def parse_date(value: str) -> datetime:
    """Parse an ISO 8601 date or datetime; missing offsets mean UTC."""
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid date {value!r}; use YYYY-MM-DD or an RFC 3339 timestamp"
        ) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _add_target_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--bucket", help="Bucket name (overrides --bucket-config)")
    parser.add_argument(
        "--region", default="", help="Bucket region (overrides --bucket-config)"
    )
    parser.add_argument(
        "--redshift-role-arn",
        default="",
        help="Role passed through to loaders (overrides --bucket-config)",
    )
    parser.add_argument(
        "--bucket-config", help="YAML file with bucket and checker settings"
    )
    parser.add_argument("--schema", required=True, help="Warehouse schema")
    parser.add_argument("--table", required=True, help="Warehouse table")
    parser.add_argument(
        "--date",
        required=True,
        type=parse_date,
        help="Export timestamp (YYYY-MM-DD or RFC 3339)",
    )
    parser.add_argument(
        "--config-file",
        default="",
        dest="supplied_conf",
        help="Use this config path instead of deriving one",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print the descriptor as JSON"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s3filepath",
        description="Resolve object-store paths of warehouse table exports",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    parser.add_argument(
        "--json-log",
        action="store_true",
        help="Output logs in JSON format (for log aggregation systems)",
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--env-file", help="Load environment variables from a .env file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser(
        "resolve", help="Find which export format exists for a table and date"
    )
    _add_target_arguments(resolve_parser)
    resolve_parser.add_argument(
        "--endpoint-url", help="Custom S3 endpoint (MinIO, LocalStack, etc.)"
    )
    resolve_parser.add_argument(
        "--local-root",
        help="Check paths under this local directory instead of S3",
    )

    render_parser = subparsers.add_parser(
        "render", help="Print the paths for a known suffix without checking"
    )
    _add_target_arguments(render_parser)
    render_parser.add_argument(
        "--suffix",
        default="",
        choices=CANDIDATE_SUFFIXES,
        help="Export suffix (default: none)",
    )

    return parser


def _bucket_and_checker(args: argparse.Namespace) -> Tuple[S3Bucket, PathChecker]:
    endpoint_url = getattr(args, "endpoint_url", None) or None
    if args.bucket_config:
        config = load_bucket_config(args.bucket_config)
        # non-empty flags win over the file
        bucket = S3Bucket(
            args.bucket or config.bucket.name,
            args.region or config.bucket.region,
            args.redshift_role_arn or config.bucket.redshift_role_arn,
        )
        settings = config.checker
        if args.region:
            settings = replace(settings, region=args.region)
        if endpoint_url:
            settings = replace(settings, endpoint_url=endpoint_url)
        checker: PathChecker = BucketConfig(bucket, settings).build_checker()
    elif args.bucket:
        bucket = S3Bucket(args.bucket, args.region, args.redshift_role_arn)
        checker = S3PathChecker(region=args.region or None, endpoint_url=endpoint_url)
    else:
        raise S3FilePathError("Either --bucket or --bucket-config is required")

    local_root = getattr(args, "local_root", None)
    if local_root:
        checker = LocalPathChecker(local_root)
    return bucket, checker


def _print_result(s3_file: S3File, as_json: bool) -> None:
    if as_json:
        print(json.dumps(s3_file.to_dict(), indent=2))
    else:
        print(s3_file.data_path)
        print(s3_file.conf_file)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, json_format=args.json_log, log_file=args.log_file)
    if args.env_file:
        load_env_file(args.env_file)

    try:
        bucket, checker = _bucket_and_checker(args)
        if args.command == "render":
            s3_file = S3File.build(
                bucket,
                args.schema,
                args.table,
                args.date,
                suffix=args.suffix,
                conf_file=args.supplied_conf,
            )
        else:
            s3_file = create_s3_file(
                checker, bucket, args.schema, args.table, args.supplied_conf, args.date
            )
    except S3FilePathError as e:
        logger.error("%s", e)
        return 1

    _print_result(s3_file, args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
