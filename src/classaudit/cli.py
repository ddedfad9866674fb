"""
classaudit command line.

Imports the named classes, extracts their constants and/or class-method
results, and prints (or writes) a Markdown or CSV comparison report.

    classaudit -c myapp.services.ServiceA -c myapp.services.ServiceB \\
        -k constants -k class_methods --handle-errors -o audit.md
"""

import argparse
import logging
import sys
from typing import Any

from classaudit.config import ConfigurationManager
from classaudit.extractor import Extractor
from classaudit.shared.console import ConsoleManager, classLogger


class CliInterface:
    """
    Handles command-line arguments and application bootstrapping.
    """

    def __init__(self) -> None:
        self._parser = self._build_parser()

    def run(self, argv: list[str] | None = None) -> None:
        args = self._parser.parse_args(argv)

        log_level = args.log_level or logging.INFO
        logging.basicConfig(
            level=log_level,
            format="%(message)s",
            handlers=[logging.StreamHandler(sys.stderr)],
        )
        classLogger.setLevel(log_level)

        console = ConsoleManager(
            level=log_level,
            no_color=args.no_color,
            debug_level=args.debug_level or "basic",
        )

        try:
            config = self._build_config(args)
            extractor = self._build_extractor(config, console)
            report = self._render(extractor, config, args.output_path)
        except (ValueError, TypeError, OSError) as e:
            console.error(str(e))
            sys.exit(1)
        except Exception as e:
            console.critical(f"Unexpected error: {type(e).__name__}: {e}")
            sys.exit(2)

        if not args.output_path:
            sys.stdout.write(report)
            if report and not report.endswith("\n"):
                sys.stdout.write("\n")
        sys.exit(0)

    def _build_config(self, args: argparse.Namespace) -> dict[str, Any]:
        filters: list[Any] | None = None
        if args.filters or args.regexes:
            filters = list(args.filters or [])
            filters += [{"regex": pattern} for pattern in args.regexes or []]

        overrides = {
            "kinds": args.kinds,
            "classes": args.classes,
            "filters": filters,
            "scope": "strict" if args.strict else None,
            "include_private": args.include_private,
            "show_source": args.show_source,
            "expand_hashes": args.expand_hashes,
            "handle_errors": args.handle_errors,
            "hash_display": args.hash_display,
            "format": args.format,
        }

        mgr = ConfigurationManager()
        config = mgr.load_config(args.config, overrides)
        if args.title:
            section = config["format"]
            config[section] = {**config[section], "title": args.title}
        if not config["classes"]:
            raise ValueError(
                "No classes given (use --class or the 'classes' config key)"
            )
        return config

    def _build_extractor(
        self, config: dict[str, Any], console: ConsoleManager
    ) -> Extractor:
        extractor = Extractor(*config["kinds"], console=console).from_(config["classes"])

        for spec in ConfigurationManager.build_filters(config["filters"]):
            extractor.filter(spec)
        if config["scope"] == "strict":
            extractor.strict()
        if config["include_private"]:
            extractor.with_private()
        if config["show_source"]:
            extractor.show_source()
        if config["expand_hashes"]:
            extractor.expand_hashes()
        if config["handle_errors"]:
            extractor.handle_errors()

        display = config["hash_display"]
        if display == "main":
            extractor.show_only_main()
        elif display == "keys":
            extractor.show_only_keys()
        elif display == "details":
            extractor.show_expanded_details()
        return extractor

    def _render(
        self, extractor: Extractor, config: dict[str, Any], output: str | None
    ) -> str:
        fmt = config["format"]
        if fmt == "csv":
            return extractor.to_csv(output, **config["csv"])
        return extractor.to_markdown(output, **config["markdown"])

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="classaudit",
            description="Compare constants and class-method results across classes.",
            formatter_class=argparse.RawTextHelpFormatter,
        )

        # Core
        parser.add_argument(
            "-c", "--class", action="append", dest="classes",
            help="Fully-qualified class name (repeatable).",
        )
        parser.add_argument(
            "-k", "--kind", action="append", dest="kinds",
            help="Extraction kind: constants, class_methods (repeatable).",
        )
        parser.add_argument("--config", help="Path to JSONC config.")

        # Filtering & scope
        parser.add_argument("-f", "--filter", action="append", dest="filters")
        parser.add_argument("-r", "--regex", action="append", dest="regexes")
        parser.add_argument("--strict", action="store_true")
        parser.add_argument(
            "--with-private", action="store_true", dest="include_private", default=None
        )
        parser.add_argument("--show-source", action="store_true", default=None)
        parser.add_argument("--expand-hashes", action="store_true", default=None)
        parser.add_argument("--hash-display", choices=["main", "keys", "details"])
        parser.add_argument("--handle-errors", action="store_true", default=None)

        # Output
        parser.add_argument("--format", choices=["markdown", "csv"])
        parser.add_argument("-o", "--output", dest="output_path")
        parser.add_argument("--title")

        # Log
        log_g = parser.add_mutually_exclusive_group()
        log_g.add_argument(
            "-v",
            "--verbose",
            action="store_const",
            dest="log_level",
            const=logging.DEBUG,
        )
        log_g.add_argument(
            "-q", "--quiet", action="store_const", dest="log_level", const=logging.ERROR
        )
        parser.add_argument(
            "--debug-level", choices=["basic", "detailed", "verbose"]
        )
        parser.add_argument("--no-color", action="store_true")

        return parser


def main() -> None:
    CliInterface().run()


if __name__ == "__main__":
    main()
