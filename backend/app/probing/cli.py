"""
Probe CLI

Command-line interface for testing a single server without the web UI.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from app.core.config import get_settings
from app.utils.structured_logging import configure_logging

from .http_client import ProbeHttpClient
from .pipeline import ProbePipeline
from .schemas import ProbeRequest, ProbeResult

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description='MCP Server Tester - check that an endpoint is reachable and responds',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Basic probe
  python -m app.probing.cli probe https://example.com/mcp

  # Probe with a bearer token
  python -m app.probing.cli probe https://example.com/mcp --api-key sk-123

  # Save the JSON result
  python -m app.probing.cli probe https://example.com/mcp -o result.json
        """
    )

    parser.add_argument(
        'command',
        choices=['probe'],
        help='Command to execute'
    )

    parser.add_argument(
        'url',
        help='Server URL to test'
    )

    parser.add_argument(
        '-k', '--api-key',
        default=None,
        help='Bearer token sent in the Authorization header'
    )

    parser.add_argument(
        '-o', '--output',
        help='Output file (JSON format)'
    )

    parser.add_argument(
        '--json-logs',
        action='store_true',
        help='Emit logs as single-line JSON'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    return parser.parse_args(argv)


async def probe_command(args) -> ProbeResult:
    """Execute probe command"""
    settings = get_settings()
    request = ProbeRequest(target_url=args.url, credential=args.api_key)

    async with ProbeHttpClient(settings) as client:
        result = await ProbePipeline(client, settings).run(request)

    display_result(result, args.verbose)

    if args.output:
        save_result(result, args.output)

    return result


def display_result(result: ProbeResult, verbose: bool = False):
    """Display probe result to console"""
    print("\n" + "=" * 80)
    print("MCP SERVER TEST RESULT")
    print("=" * 80)

    print(f"\n  Success: {'yes' if result.success else 'no'}")
    print(f"  Message: {result.message}")

    if result.error:
        if result.error.status is not None:
            print(f"  Error Status: {result.error.status} {result.error.status_text or ''}")
        if result.error.message:
            print(f"  Error: {result.error.message}")

    if result.connectivity:
        print(f"\n  Connectivity: {result.connectivity.status} {result.connectivity.status_text}")

    functionality = result.functionality
    if functionality:
        print(f"  Functionality: {functionality.status} {functionality.status_text}")
        if functionality.is_html:
            print(f"  Response: HTML document ({len(functionality.response)} chars)")
        else:
            summary = functionality.response
            print(f"  Server: {summary.server}")
            if summary.version is not None:
                print(f"  Version: {summary.version}")
            if summary.features:
                print(f"  Features: {', '.join(summary.features)}")
            if verbose:
                print(f"  Raw Response:\n{summary.raw_response}")

    print("\n" + "=" * 80 + "\n")


def save_result(result: ProbeResult, output_file: str):
    """Save the wire-format result to a JSON file"""
    try:
        with open(output_file, 'w') as f:
            json.dump(result.to_response(), f, indent=2)
        logger.info(f"Result saved to {output_file}")
    except OSError as e:
        logger.error(f"Failed to save result: {e}")


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = parse_args(argv)
    settings = get_settings()

    configure_logging(
        "DEBUG" if args.verbose else settings.LOG_LEVEL,
        json_logs=args.json_logs or settings.LOG_JSON,
    )

    if args.command == 'probe':
        result = await probe_command(args)
        return 0 if result.success else 1

    return 2


def run():
    sys.exit(asyncio.run(main()))


if __name__ == '__main__':
    run()
