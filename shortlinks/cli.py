#!/usr/bin/env python3
"""
Command-line interface for shortlinks.

Usage:
    shortlinks shorten <url> [--validity MINUTES] [--custom-code CODE]
    shortlinks visit <short_code> [--no-open]
    shortlinks recent [--limit N]
    shortlinks stats [<short_code>]
"""

import argparse
import json
import sys
import webbrowser
from typing import Any, Dict, List, Optional, TextIO

from rich.console import Console

from .common.logging_config import setup_logging
from .common.timestamps import iso_z
from .common.url_builder import extract_short_code
from .config import Config, load_config
from .errors import (
    LinkExpiredError,
    LinkNotFoundError,
    ShortcodeGenerationError,
    StorageError,
    ValidationError,
)
from .models import LinkRecord, LinkStatus
from .registry import LinkRegistry
from .render import TerminalRenderer
from .telemetry import TelemetryValidationError, reporter_from_config


def record_to_json(record: LinkRecord, status: LinkStatus, include_clicks: bool = False) -> Dict[str, Any]:
    data = {
        "id": record.id,
        "shortcode": record.shortcode,
        "short_url": record.short_url,
        "original_url": record.original_url,
        "created_at": iso_z(record.created_at),
        "expiry_at": iso_z(record.expiry_at),
        "clicks": record.clicks,
        "status": status.value,
    }
    if include_clicks:
        data["click_events"] = [event.to_dict() for event in record.click_events]
    return data


class ShortLinksCLI:
    """Command-line interface for the link registry."""

    def __init__(
        self,
        config: Config,
        output_format: str = "json",
        verbose: bool = False,
        registry: Optional[LinkRegistry] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        opener=None,
    ):
        """Initialize CLI."""
        self.config = config
        self.output_format = output_format
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        # Log to stderr so JSON output on stdout stays parseable
        self.logger = setup_logging(
            level="DEBUG" if verbose else "WARNING",
            log_file=config.log_file,
            json_format=config.log_json,
            stream=self.stderr,
        )
        self.registry = registry
        self.opener = opener or webbrowser.open
        self.renderer = TerminalRenderer(Console(file=self.stdout))
        self.error_renderer = TerminalRenderer(Console(file=self.stderr))

    def initialize(self) -> None:
        """Load the registry from the configured store."""
        if self.registry is not None:
            return
        telemetry = reporter_from_config(self.config)
        self.registry = LinkRegistry.from_config(
            self.config,
            telemetry=telemetry,
            logger=self.logger,
        )

    def cleanup(self) -> None:
        if self.registry:
            self.registry.close()

    @property
    def table_output(self) -> bool:
        return self.output_format == "table"

    def _emit(self, payload: Dict[str, Any]) -> None:
        print(json.dumps(payload, indent=2), file=self.stdout)

    def _fail(self, message: str, **extra) -> int:
        if self.table_output:
            self.error_renderer.render_error(message)
        else:
            print(json.dumps({"success": False, "error": message, **extra}, indent=2), file=self.stderr)
        return 1

    def shorten(self, url: str, validity: Any = None, custom_code: Optional[str] = None) -> int:
        """Shorten a URL."""
        if custom_code is not None:
            custom_code = custom_code.strip() or None

        try:
            record = self.registry.create(url, validity, custom_code)
        except ValidationError as e:
            if self.table_output:
                self.error_renderer.render_validation_errors(e)
                return 1
            return self._fail(str(e), errors=e.to_dict())
        except ShortcodeGenerationError as e:
            return self._fail(str(e))

        message = f"URL shortened successfully! Short URL: {record.short_url}"
        if self.table_output:
            self.renderer.render_success(message)
            self.renderer.render_recent_links(self.registry.list_active(self.config.recent_links_limit))
        else:
            self._emit({
                "success": True,
                "message": message,
                "link": record_to_json(record, self.registry.status(record)),
            })
        return 0

    def visit(self, short_code: str, open_target: bool = True) -> int:
        """Record a click on a short link and open its target.

        ``short_code`` may also be a full short URL under the configured base.
        """
        code = extract_short_code(short_code, self.config.base_url)
        record = self.registry.find_by_shortcode(code) if code else None
        if record is None:
            return self._fail(f"Short code '{short_code}' not found")

        try:
            event = self.registry.record_visit(record.id)
        except LinkExpiredError as e:
            if self.table_output:
                self.error_renderer.render_warning(str(e))
                return 1
            return self._fail(str(e), expired_at=iso_z(e.expiry_at))
        except LinkNotFoundError as e:
            return self._fail(str(e))

        if open_target:
            self.opener(record.original_url, new=2)

        if self.table_output:
            self.renderer.render_success(f"Opening {record.original_url} ({record.clicks} clicks)")
        else:
            self._emit({
                "success": True,
                "original_url": record.original_url,
                "clicks": record.clicks,
                "click": event.to_dict(),
            })
        return 0

    def recent(self, limit: Optional[int] = None) -> int:
        """List active links, most recent first."""
        records = self.registry.list_active(limit or self.config.recent_links_limit)
        if self.table_output:
            self.renderer.render_recent_links(records)
        else:
            self._emit({
                "success": True,
                "count": len(records),
                "links": [record_to_json(r, LinkStatus.ACTIVE) for r in records],
            })
        return 0

    def stats(self, short_code: Optional[str] = None) -> int:
        """Show statistics for every link, or for one short code."""
        if short_code:
            record = self.registry.find_by_shortcode(short_code)
            if record is None:
                return self._fail(f"Short code '{short_code}' not found")
            records: List[LinkRecord] = [record]
        else:
            records = self.registry.list_all()

        if self.table_output:
            self.renderer.render_statistics(self.registry, records)
        else:
            self._emit({
                "success": True,
                "statistics": self.registry.statistics(),
                "links": [
                    record_to_json(r, self.registry.status(r), include_clicks=True)
                    for r in records
                ],
            })
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shortlinks",
        description="Local URL shortener",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL valid for 30 minutes
  %(prog)s shorten https://example.com/long/url

  # Shorten with custom code and validity
  %(prog)s shorten https://example.com/long/url --custom-code mylink --validity 120

  # Visit a short link (records a click and opens the browser)
  %(prog)s visit mylink

  # Show active links and statistics
  %(prog)s recent --format table
  %(prog)s stats
        """
    )

    parser.add_argument(
        "--storage-dir",
        help="Directory holding the link collection (default: from STORAGE_DIR env or ~/.shortlinks)"
    )

    parser.add_argument(
        "--base-url",
        help="Base URL for displayed short links (default: from BASE_URL env or http://localhost:3000)"
    )

    parser.add_argument(
        "--format",
        choices=["json", "table"],
        default="json",
        help="Output format"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--validity", help="Validity period in minutes")
    shorten_parser.add_argument("--custom-code", help="Custom short code")

    visit_parser = subparsers.add_parser("visit", help="Visit a short link")
    visit_parser.add_argument("short_code", help="Short code or short URL to visit")
    visit_parser.add_argument("--no-open", action="store_true", help="Record the click without opening a browser")

    recent_parser = subparsers.add_parser("recent", help="List active links")
    recent_parser.add_argument("--limit", type=int, help="Maximum number to return")

    stats_parser = subparsers.add_parser("stats", help="Show link statistics")
    stats_parser.add_argument("short_code", nargs="?", help="Only show this short code")

    return parser


def main(argv: Optional[List[str]] = None, config: Optional[Config] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    overrides = {}
    if args.storage_dir:
        overrides["storage_dir"] = args.storage_dir
    if args.base_url:
        overrides["base_url"] = args.base_url
    if config is None:
        config = load_config(**overrides)
    elif overrides:
        config = config.model_copy(update=overrides)

    cli = ShortLinksCLI(config, output_format=args.format, verbose=args.verbose)

    try:
        cli.initialize()

        if args.command == "shorten":
            return cli.shorten(args.url, args.validity, args.custom_code)
        elif args.command == "visit":
            return cli.visit(args.short_code, open_target=not args.no_open)
        elif args.command == "recent":
            return cli.recent(args.limit)
        elif args.command == "stats":
            return cli.stats(args.short_code)
        else:
            parser.print_help()
            return 1

    except (StorageError, TelemetryValidationError) as e:
        return cli._fail(str(e))
    finally:
        cli.cleanup()


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
