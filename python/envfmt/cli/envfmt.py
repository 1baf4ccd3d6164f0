#!/usr/bin/env python3
"""
envfmt/cli/envfmt.py

CLI for reading parameters from AWS Systems Manager Parameter Store into
environment configuration formats, and writing local .env files back:

  envfmt read /path/to/ --format dot-env > .env
  envfmt read /path/to/ --format php-fpm --out env.conf
  envfmt write local.env --prefix /path/to --overwrite

MFA-gated profiles use --mfa (prompt for the code) or --mfa-token CODE.
A failed read prints an error and writes no output at all.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any, Callable, Coroutine, List, NoReturn, Optional

import aiofiles
from pydantic import ValidationError

from envfmt.errors import EnvFmtError, ParameterStoreError
from envfmt.formatters import get_formatter
from envfmt.models.params import ParamBag
from envfmt.models.settings import EnvFmtSettings, OutputFormat
from envfmt.session import build_session
from envfmt.sources import bag_from_dotenv
from envfmt.ssm.client import BotoParameterStoreClient, ParameterStoreClient
from envfmt.ssm.fetch import fetch_all
from envfmt.ssm.writer import ThrottledWriter
from envfmt.utils.async_retry import async_retry

logger = logging.getLogger(__name__)

RETRY_DELAY_SECONDS = 1.0


#
# Subcommand handlers
#
async def run_read(args: argparse.Namespace) -> None:
    """
    Fetch every parameter under args.path and emit it in the chosen format.

    Output goes to stdout, or to args.out when given. Nothing is emitted if
    any page fails.
    """
    settings = _build_settings(args)
    client = await _make_client(settings)

    @async_retry(
        retries=settings.retries,
        delay=RETRY_DELAY_SECONDS,
        retry_on=(ParameterStoreError,),
        noisy=True,
    )
    async def _fetch() -> ParamBag:
        return await fetch_all(client, args.path)

    bag = await _fetch()
    formatted = get_formatter(settings.output_format.value)(bag.resolved())
    text = formatted + "\n" if formatted else ""

    if settings.out:
        async with aiofiles.open(settings.out, "w") as f:
            await f.write(text)
    else:
        sys.stdout.write(text)


async def run_write(args: argparse.Namespace) -> None:
    """
    Write the params from args.file_path under args.prefix, one at a time.

    Raises SystemExit(1) if any single write failed.
    """
    settings = _build_settings(args)
    bag = bag_from_dotenv(args.file_path, args.prefix or "")
    client = await _make_client(settings)

    writer = ThrottledWriter(
        client, args.overwrite, delay_seconds=settings.write_delay_seconds
    )
    outcomes = await writer.write(bag)

    for outcome in outcomes:
        if outcome.ok:
            print(f"Wrote {outcome.path}")
        else:
            print(f"Failed to write {outcome.path} due to {outcome.error}")

    if any(not o.ok for o in outcomes):
        sys.exit(1)


#
# Helpers
#
def _build_settings(args: argparse.Namespace) -> EnvFmtSettings:
    """
    Construct EnvFmtSettings from CLI arguments.

    Flags left unset are omitted so the environment (AWS_PROFILE, AWS_REGION,
    ...) can supply them.

    Raises:
        EnvFmtError: If the arguments do not form valid settings.
    """
    flags = {
        "profile": args.profile,
        "region": args.region,
        "mfa": args.mfa,
        "mfa_token": args.mfa_token,
        "output_format": args.format,
        "out": args.out,
        "recursive": args.recursive,
        "with_decryption": args.decrypt,
        "retries": args.retries,
    }
    try:
        return EnvFmtSettings(**{k: v for k, v in flags.items() if v is not None})
    except ValidationError as exc:
        raise EnvFmtError(f"Invalid arguments: {exc}") from exc


async def _make_client(settings: EnvFmtSettings) -> ParameterStoreClient:
    """Resolve the session once and build the parameter store client on it."""
    session = await build_session(settings)
    return BotoParameterStoreClient(
        session.client("ssm"),
        recursive=settings.recursive,
        with_decryption=settings.with_decryption,
    )


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if not debug:
        # boto's own loggers are noisy below WARNING
        logging.getLogger("botocore").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envfmt",
        description=(
            "Read parameters from a Parameter Store path and print them as "
            "environment configuration, or write a local .env file back."
        ),
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        help="Sub-command to run. Use -h/--help after a subcommand for more usage details.",
    )

    #
    # read
    #
    read_parser = subparsers.add_parser("read", help="Read parameters from AWS.")
    _add_common_cli_args(read_parser)
    read_parser.add_argument("path", help="Path prefix to select parameters for.")
    read_parser.add_argument(
        "--recursive",
        action="store_true",
        default=False,
        help="Include parameters nested below the path's direct children.",
    )
    read_parser.add_argument(
        "--decrypt",
        action="store_true",
        default=False,
        help="Decrypt SecureString values.",
    )
    read_parser.add_argument(
        "--retries",
        type=int,
        default=1,
        help="Total attempts for the whole fetch (default: 1, no retry).",
    )
    read_parser.set_defaults(func=run_read)

    #
    # write
    #
    write_parser = subparsers.add_parser("write", help="Write parameters to AWS.")
    _add_common_cli_args(write_parser)
    write_parser.add_argument(
        "file_path", help="Path to a .env file to read parameters from."
    )
    write_parser.add_argument(
        "--prefix", help="Path prefix to prepend to each parameter name."
    )
    write_parser.add_argument(
        "-w",
        "--overwrite",
        action="store_true",
        default=False,
        help="Allow overwriting of existing values.",
    )
    write_parser.set_defaults(func=run_write, recursive=False, decrypt=False, retries=1)

    return parser


def _add_common_cli_args(subparser: argparse.ArgumentParser) -> None:
    """
    Add the flags shared by every subcommand: format, region, profile,
    output location, debug, and the two mutually exclusive MFA modes.
    """
    subparser.add_argument(
        "-f",
        "--format",
        choices=[f.value for f in OutputFormat],
        help="Format to use when printing results (default: dot-env).",
    )
    subparser.add_argument(
        "-r",
        "--region",
        help="AWS region to query against. Defaults to the profile's region, then us-east-1.",
    )
    subparser.add_argument(
        "-p",
        "--profile",
        help="AWS profile to authenticate with.",
    )
    subparser.add_argument(
        "-o",
        "--out",
        help="Output location for parameters instead of stdout.",
    )
    subparser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Display verbose debug information.",
    )
    group = subparser.add_mutually_exclusive_group()
    group.add_argument(
        "--mfa",
        action="store_true",
        default=False,
        help="Enables MFA authentication and token prompt (mutually exclusive with --mfa-token).",
    )
    group.add_argument(
        "--mfa-token",
        help="Enables MFA authentication and accepts the token instead of prompting.",
    )


def main(argv: Optional[List[str]] = None) -> NoReturn:
    """
    CLI entry point: parse arguments, run the subcommand, exit 0 or 1.
    """
    args = build_parser().parse_args(argv)
    _configure_logging(args.debug)

    # The `args.func` is an async function, so we run it via asyncio
    func: Callable[[argparse.Namespace], Coroutine[Any, Any, None]] = args.func
    try:
        asyncio.run(func(args))
    except EnvFmtError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
