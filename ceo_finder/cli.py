"""
Command-line interface.

Loads the email list, dispatches the searches to worker processes and writes
the three result files. Returns a process exit code instead of raising.
"""
import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from ceo_finder.classifier import MergeConflictError
from ceo_finder.config import config, Config, ConfigurationError, KNOWN_BACKENDS
from ceo_finder.dispatcher import dispatch, DispatchError
from ceo_finder.inputs import load_domains, InputError
from ceo_finder.report import write_reports, write_summary

# Initialize logger
log = logging.getLogger(__name__)


class CLI:
    """Command-line front end for a search run."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create command-line argument parser.

        Returns:
            Configured argument parser
        """
        parser = argparse.ArgumentParser(
            prog="ceo-finder",
            description="Find the senior leader of each email domain via web search",
        )

        parser.add_argument(
            "input_file",
            nargs="?",
            help="Email list (.txt one per line, or .csv/.xlsx with an 'Email' column; default: INPUT_FILE or input.txt)"
        )

        parser.add_argument(
            "-o", "--output-dir",
            help="Directory for the result files (default: OUTPUT_DIR or cwd)"
        )

        parser.add_argument(
            "-v", "--verbose",
            action="store_true",
            help="Enable verbose logging"
        )

        parser.add_argument(
            "--workers",
            type=int,
            help="Number of worker processes (default: MAX_WORKERS or 4)"
        )

        parser.add_argument(
            "--backend",
            choices=KNOWN_BACKENDS,
            help="Search backend (default: SEARCH_BACKEND or browser)"
        )

        parser.add_argument(
            "--site-filter",
            action="append",
            dest="site_filters",
            help="Site to restrict queries to (repeatable; default from SITE_FILTERS)"
        )

        parser.add_argument(
            "--retries",
            type=int,
            help="Retries per query after a navigation error (default: SEARCH_MAX_RETRIES or 0)"
        )

        parser.add_argument(
            "--strict-merge",
            action="store_true",
            help="Fail when two workers report different outcomes for one query"
        )

        parser.add_argument(
            "--summary",
            help="Also write all outcomes to this .csv or .xlsx file"
        )

        parser.add_argument(
            "--headful",
            action="store_true",
            help="Show the browser window"
        )

        parser.add_argument(
            "--config",
            help="Path to custom .env configuration file"
        )

        return parser

    def setup_logging(self, verbose: bool) -> str:
        """
        Set up logging configuration.

        Args:
            verbose: Whether to enable verbose logging

        Returns:
            Path to log file
        """
        logfile = f"ceo_finder_{time.strftime('%Y%m%d_%H%M%S')}.log"
        level = logging.DEBUG if verbose else logging.INFO

        logging.basicConfig(
            level=level,
            format="%(asctime)s | %(levelname)-7s | %(name)-20s | %(message)s",
            handlers=[
                logging.FileHandler(logfile, encoding="utf-8"),
                logging.StreamHandler(sys.stdout)
            ]
        )

        # Set lower level for external libraries
        logging.getLogger("asyncio").setLevel(logging.WARNING)
        logging.getLogger("googleapiclient").setLevel(logging.WARNING)

        return logfile

    def apply_args(self, args: argparse.Namespace) -> None:
        """Update the global configuration from command-line arguments."""
        if args.config:
            config.update_from_dict(Config(env_file=args.config).as_dict())

        if args.input_file:
            config.input_file = args.input_file
        if args.output_dir:
            config.output_dir = args.output_dir
        if args.workers is not None:
            config.max_workers = args.workers
        if args.backend:
            config.search_backend = args.backend
        if args.retries is not None:
            config.search_max_retries = args.retries
        if args.strict_merge:
            config.strict_merge = True
        if args.site_filters:
            config.site_filters = tuple(args.site_filters)
        if args.headful:
            config.headless = False

    def run_search(self, args: argparse.Namespace) -> bool:
        """
        Search every domain of the input file and write the reports.

        Returns:
            True if successful, False otherwise
        """
        logfile = self.setup_logging(args.verbose)
        self.apply_args(args)

        log.info("CEO finder starting")
        log.info("Input file: %s", config.input_file)
        log.info("Output dir: %s", config.output_dir)
        log.info("Workers: %d", config.max_workers)
        log.info("Backend: %s", config.search_backend)
        log.info("Site filters: %s", ", ".join(config.site_filters))
        log.info("Retries: %d", config.search_max_retries)

        try:
            config.validate_or_raise()
        except ConfigurationError as e:
            log.error("Configuration error: %s", e)
            return False

        try:
            domains = load_domains(config.input_file)
        except InputError as e:
            log.error("Input validation failed: %s", e)
            return False

        start_time = time.time()
        try:
            results = dispatch(domains, config.max_workers)
        except (DispatchError, MergeConflictError) as e:
            log.error("Search run aborted: %s", e)
            return False

        try:
            written = write_reports(results, config.output_dir)
            if args.summary:
                write_summary(results, args.summary)
        except (OSError, ValueError) as e:
            log.error("Failed to save results: %s", e)
            return False

        elapsed = time.time() - start_time
        counts = results.counts()
        log.info(
            "\n+--------------------------------------------------+\n"
            "| RUN SUMMARY                                      |\n"
            "+--------------------------------------------------+\n"
            f"| Domains         : {len(domains):>3}\n"
            f"| Queries         : {len(results):>3}\n"
            f"| Found           : {counts['found']:>3}\n"
            f"| Not found       : {counts['not_found']:>3}\n"
            f"| Failed          : {counts['failed']:>3}\n"
            f"| Runtime         : {elapsed:6.1f} s\n"
            "+--------------------------------------------------+"
        )
        log.info(
            "Results saved to %s",
            ", ".join(str(p) for p in written.values())
        )
        log.info("Verbose log -> %s", Path(logfile).resolve())
        return True

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run the CLI with the given arguments.

        Args:
            args: Command-line arguments (defaults to sys.argv[1:])

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        try:
            parsed_args = self.parser.parse_args(args)
            success = self.run_search(parsed_args)
            return 0 if success else 1

        except Exception as e:
            log.error("Unhandled exception: %s", e, exc_info=True)
            return 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CEO finder.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    cli = CLI()

    try:
        return cli.run(argv)

    except KeyboardInterrupt:
        log.warning("Execution interrupted by user")
        return 130
