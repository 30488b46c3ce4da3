"""CLI entrypoints for csimplegen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, split_patterns
from .logging import configure_logging
from .pipeline import CompilationError, GeneratePipeline
from .writer import OutputWriteError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csimplegen",
        description="Generate Java sources for csimple expressions found in Camel routes.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Compile csimple expressions into generated source files.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    generate_parser.add_argument(
        "--include-test",
        action="store_true",
        default=None,
        help="Also scan test sources.",
    )
    generate_parser.add_argument(
        "--no-java",
        dest="include_java",
        action="store_false",
        default=None,
        help="Skip Java route builder sources.",
    )
    generate_parser.add_argument(
        "--no-xml",
        dest="include_xml",
        action="store_false",
        default=None,
        help="Skip XML route documents.",
    )
    generate_parser.add_argument(
        "--includes",
        help="Comma separated wildcard or regex patterns of files to include.",
    )
    generate_parser.add_argument(
        "--excludes",
        help="Comma separated wildcard or regex patterns of files to exclude.",
    )
    generate_parser.add_argument(
        "--output-dir",
        help="Directory for generated source files.",
    )
    generate_parser.add_argument(
        "--output-resource-dir",
        help="Directory for the generated csimple.properties resource.",
    )
    generate_parser.add_argument(
        "--resource-dir",
        help="Directory containing camel-csimple.properties.",
    )
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report generated files without writing them.",
    )
    generate_parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write log records to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for csimplegen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=getattr(args, "log_file", None),
    )

    if args.command == "generate":
        pipeline = GeneratePipeline()
        dry_run = bool(getattr(args, "dry_run", False))
        try:
            outcome = pipeline.run_path(
                args.path,
                dry_run=dry_run,
                include_test=args.include_test,
                include_java=args.include_java,
                include_xml=args.include_xml,
                includes=split_patterns(args.includes) or None,
                excludes=split_patterns(args.excludes) or None,
                output_dir=args.output_dir,
                output_resource_dir=args.output_resource_dir,
                resource_dir=args.resource_dir,
            )
        except (FileNotFoundError, ConfigError) as exc:
            parser.exit(1, f"{exc}\n")
        except CompilationError as exc:
            parser.exit(1, f"csimplegen generate failed: {exc}\n")
        except OutputWriteError as exc:
            parser.exit(1, f"csimplegen generate failed: {exc}\nRun with --verbose for more details.\n")

        if not outcome.units:
            print("No csimple expressions found")
            return
        suffix = " (dry-run)" if dry_run else ""
        print(
            f"Compiled {len(outcome.units)} csimple expression(s); "
            f"{len(outcome.written)} file(s) changed{suffix}"
        )
        for path in outcome.written:
            print(f"  {_relativize(path)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
