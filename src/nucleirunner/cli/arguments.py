"""Argument parser construction for nuclei-runner CLI.

This module builds the argument parser with subcommands:
- nuclei-runner scan     - Provision nuclei and scan a target
- nuclei-runner agent    - Remote side of a dispatched scan
- nuclei-runner status   - Show platform and binary status
- nuclei-runner validate - Validate a configuration file
"""

from __future__ import annotations

import argparse


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add global options available to all commands."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show nuclei-runner version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )


def _build_scan_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'scan' subcommand parser."""
    scan_parser = subparsers.add_parser(
        "scan",
        help="Provision nuclei and scan a target.",
        description=(
            "Download nuclei and its templates into the working directory "
            "if needed, then scan the target. Runs on a remote agent over "
            "ssh when a remote host is configured."
        ),
    )
    scan_parser.add_argument(
        "--target", "-t",
        help="URL of the application to scan (required unless set in config).",
    )
    scan_parser.add_argument(
        "--extra-flags",
        help="Additional nuclei flags as one whitespace-delimited string (e.g. '-v -debug').",
    )
    scan_parser.add_argument(
        "--reporting-config",
        metavar="FILE",
        help="Issue tracker configuration file passed to nuclei via -report-config.",
    )
    scan_parser.add_argument(
        "--workdir",
        help="Working directory for binaries, templates and output (default: current directory).",
    )
    scan_parser.add_argument(
        "--run-id",
        help="Identifier used in the output file name (default: UTC timestamp).",
    )
    scan_parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to config file (default: .nuclei-runner.yml in working directory).",
    )
    scan_parser.add_argument(
        "--nuclei-version",
        help="Override the pinned nuclei version.",
    )
    scan_parser.add_argument(
        "--skip-checksum",
        action="store_true",
        help="Do not verify the release archive checksum.",
    )

    remote_group = scan_parser.add_argument_group("remote execution")
    remote_group.add_argument("--remote-host", help="Run the scan on this host over ssh.")
    remote_group.add_argument("--remote-user", help="SSH user for the remote host.")
    remote_group.add_argument("--remote-port", type=int, help="SSH port (default: 22).")
    remote_group.add_argument("--remote-key", help="SSH private key file.")
    remote_group.add_argument("--remote-workdir", help="Working directory on the remote host.")
    remote_group.add_argument(
        "--remote-agent",
        help="Command starting nuclei-runner on the remote host (default: nuclei-runner).",
    )


def _build_agent_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'agent' subcommand parser."""
    agent_parser = subparsers.add_parser(
        "agent",
        help="Run a dispatched scan (used over ssh by 'scan --remote-host').",
        description="Read an execution spec as JSON from stdin and run it locally.",
    )
    agent_parser.add_argument(
        "--workdir",
        required=True,
        help="Working directory on this host.",
    )


def _build_status_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'status' subcommand parser."""
    status_parser = subparsers.add_parser(
        "status",
        help="Show platform, pinned version and binary status.",
    )
    status_parser.add_argument(
        "--workdir",
        help="Working directory to inspect (default: current directory).",
    )


def _build_validate_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'validate' subcommand parser."""
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a nuclei-runner configuration file.",
    )
    validate_parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to config file (default: .nuclei-runner.yml in current directory).",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the main argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="nuclei-runner",
        description="nuclei-runner - Provision and run the nuclei scanner from build pipelines.",
    )
    _add_global_options(parser)

    subparsers = parser.add_subparsers(dest="command", title="commands")
    _build_scan_parser(subparsers)
    _build_agent_parser(subparsers)
    _build_status_parser(subparsers)
    _build_validate_parser(subparsers)

    return parser
