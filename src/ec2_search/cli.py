from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

if __package__ in (None, ""):
    sys.path.append(str(Path(__file__).resolve().parents[1]))
    from ec2_search.aws_api import (
        AwsApiError,
        AwsEc2Service,
        build_search_filter,
        build_table_rows,
        extract_private_ips,
        records_from_reservations,
    )
    from ec2_search.models import SearchConfig
    from ec2_search.render import (
        NO_MATCHES_MESSAGE,
        make_console,
        render_ips,
        render_message,
        render_table,
    )
    from ec2_search.search_config import DEFAULT_CONFIG_PATH, load_search_defaults
else:
    from .aws_api import (
        AwsApiError,
        AwsEc2Service,
        build_search_filter,
        build_table_rows,
        extract_private_ips,
        records_from_reservations,
    )
    from .models import SearchConfig
    from .render import (
        NO_MATCHES_MESSAGE,
        make_console,
        render_ips,
        render_message,
        render_table,
    )
    from .search_config import DEFAULT_CONFIG_PATH, load_search_defaults

DISTRIBUTION_NAME = "ec2-search"
FALLBACK_VERSION = "development"
FILTER_DOCS_URL = "https://docs.aws.amazon.com/AWSEC2/latest/APIReference/API_DescribeInstances.html"
QUIET_LOGGERS = ("botocore", "boto3", "urllib3")

logger = logging.getLogger(__name__)


def get_version() -> str:
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return FALLBACK_VERSION


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ec2-search",
        description="Search EC2 instances by tag or attribute substring",
    )
    parser.add_argument("search", nargs="?", help="EC2 instance name search term")
    parser.add_argument("-i", "--ip-only", action="store_true", help="Output only private IPs")
    parser.add_argument(
        "-n",
        "--new-line",
        action="store_true",
        help="Output each IP on a new line (with --ip-only)",
    )
    parser.add_argument("-d", "--delimiter", default=None, help="IP delimiter (default: a single space)")
    parser.add_argument(
        "-f",
        "--filter-type",
        default=None,
        help=f"EC2 filter type, default tag:Name ({FILTER_DOCS_URL})",
    )
    parser.add_argument("-v", "--version", action="store_true", help="Print version")
    parser.add_argument("--profile", default=None, help="AWS CLI profile name (default: ambient config)")
    parser.add_argument("--region", default=None, help="AWS region name (default: ambient config)")
    parser.add_argument(
        "--config",
        default=str(DEFAULT_CONFIG_PATH),
        help="YAML file with default delimiter, filter type, profile and region",
    )
    parser.add_argument("--debug", action="store_true", help="Log AWS calls to stderr")
    args = parser.parse_args(argv)
    if not args.version and not args.search:
        parser.error("the following arguments are required: search")
    return args


def build_config(args: argparse.Namespace) -> SearchConfig:
    defaults = load_search_defaults(args.config)
    return SearchConfig(
        search=args.search,
        ip_only=args.ip_only,
        new_line=args.new_line,
        delimiter=args.delimiter if args.delimiter is not None else defaults.delimiter,
        filter_type=args.filter_type or defaults.filter_type,
        profile=args.profile or defaults.profile,
        region=args.region or defaults.region,
        debug=args.debug,
    )


def configure_logging(debug: bool = False, console: Console | None = None) -> None:
    handler = RichHandler(
        console=console or make_console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if debug else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def run(
    config: SearchConfig,
    *,
    service: AwsEc2Service | None = None,
    console: Console | None = None,
    err_console: Console | None = None,
) -> int:
    console = console or make_console()
    err_console = err_console or make_console(stderr=True)

    search_filter = build_search_filter(config.search, config.filter_type)
    try:
        if service is None:
            service = AwsEc2Service(profile=config.profile, region=config.region)
        reservations = service.describe_reservations(search_filter)
    except AwsApiError as error:
        logger.debug("Describe instances failed (code=%s)", error.code)
        render_message(f"error: {error.message}", err_console)
        return 1

    if not reservations:
        render_message(NO_MATCHES_MESSAGE, console)
        return 0

    records = records_from_reservations(reservations)
    logger.debug("Matched %d instance(s)", len(records))
    if config.ip_only:
        render_ips(
            extract_private_ips(records),
            console,
            new_line=config.new_line,
            delimiter=config.delimiter,
        )
    else:
        render_table(build_table_rows(records), console)
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    if args.version:
        print(get_version())
        return

    config = build_config(args)
    configure_logging(config.debug)
    try:
        status = run(config)
    except KeyboardInterrupt:
        status = 130
    sys.exit(status)


if __name__ == "__main__":
    main()
