#!/usr/bin/env python3
"""
Dazibao - Self-Refreshing Status Page

Usage:
    dazibao                      # Serve the page on the configured port
    dazibao -d                   # Generate the page once and print it
    dazibao -d -o status.html    # Generate the page once into a file
    dazibao -t 60 -o status.html # Regenerate the file every 60 seconds
    dazibao -v                   # Enable debug logging
"""

import argparse
import asyncio
import sys

from dazibao import APP_NAME, __version__
from dazibao.common.exceptions import DazibaoError, StartupError
from dazibao.common.logging_setup import configure_service_loggers, get_service_logger
from dazibao.common.settings import load_settings
from dazibao.services.static import StaticPageGenerator
from dazibao.services.system import ensure_assets
from dazibao.supervisor import Supervisor

logger = get_service_logger("main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dazibao",
        description=f"{APP_NAME} - self-refreshing status page",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Files (under the home directory, default ~/.dazibao):
    config.json     Blocks, their last outputs and page settings
    template.html   Page template (${config_json}, ${icon_data_uri})
    icons/          Page icon
    settings.yaml   Optional host, shell and logging settings
        """,
    )

    parser.add_argument(
        "-d", "--dry-run",
        action="store_true",
        help="Generate static HTML once and exit",
    )

    parser.add_argument(
        "-t", "--interval",
        type=int,
        default=0,
        help="Interval in seconds for static page generation",
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default="",
        help="Path to write the generated HTML file",
    )

    parser.add_argument(
        "--home",
        type=str,
        default=None,
        help="Home directory (default: $DAZIBAO_HOME or ~/.dazibao)",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (debug) logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"{APP_NAME} v{__version__}",
    )

    return parser


async def run_dry(generator: StaticPageGenerator, output: str) -> None:
    html = await generator.generate()
    if output:
        generator.write_html(html, output)
        logger.info(f"Successfully wrote static page to {output}")
    else:
        print(html)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.home)
        if args.verbose:
            settings.log_level = "DEBUG"
        configure_service_loggers(settings.log_level, settings.log_format == "json")

        ensure_assets(settings)

        if args.dry_run:
            asyncio.run(run_dry(StaticPageGenerator(settings), args.output))
            return 0

        if args.interval > 0:
            generator = StaticPageGenerator(settings)
            asyncio.run(generator.run_every(args.interval, args.output or None))
            return 0

        asyncio.run(Supervisor(settings).start())
        return 0

    except StartupError as e:
        logger.critical(str(e))
        return 1
    except DazibaoError as e:
        logger.critical(f"Fatal error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0


if __name__ == "__main__":
    sys.exit(main())
