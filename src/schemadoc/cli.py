"""schemadoc command-line interface. Use --help for usage."""

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml
from dotenv import load_dotenv

from config import load_config
from config.config import DEFAULT_CONFIG_FILE, DocsConfig
from core.errors import ConfigError, OutputError, SchemadocError, SchemaValidationError, wrap_exception
from core.logging import generate_build_id, log_exception, setup_logging
from schemadoc import __version__
from schemadoc.generator import build, check_outputs, load_and_validate, write_outputs
from schemadoc.render.environment import RenderSettings
from schemadoc.render.examples import component_example
from schemadoc.render.metadata import render_metadata
from schemadoc.schema.types import KINDS, SECTION_BY_KIND

# Placeholder logger until setup_logging() is called in main()
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STALE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schemadoc",
        description="Resolve configuration schema files and generate reference documentation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Check the schema for errors
    schemadoc validate

    # Generate documentation into ./docs
    schemadoc generate --output-dir docs

    # Fail CI when committed documentation is out of date
    schemadoc check

    # Print the example configuration for a sink
    schemadoc example sink kafka --advanced
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Generator configuration file (default: {DEFAULT_CONFIG_FILE} if present)",
    )
    parser.add_argument(
        "--schema-dir",
        type=Path,
        default=None,
        help="Schema directory (overrides configuration and SCHEMADOC_SCHEMA_DIR)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Write JSON log lines to stderr instead of the human-readable format",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Also write JSON logs to this file")

    commands = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    validate = commands.add_parser("validate", help="Load, resolve and validate the schema")
    validate.add_argument("--json", action="store_true", help="Print the result as JSON")

    generate = commands.add_parser("generate", help="Build and write documentation")
    generate.add_argument("--output-dir", type=Path, default=None, help="Documentation root")
    generate.add_argument("--dry-run", action="store_true", help="Report changes without writing")
    generate.add_argument(
        "--prune",
        action="store_true",
        help="Remove generated files that are no longer produced",
    )

    check = commands.add_parser("check", help="Exit 1 if the generated documentation is out of date")
    check.add_argument("--output-dir", type=Path, default=None, help="Documentation root")

    export = commands.add_parser("export", help="Print the metadata JSON export")
    export.add_argument("--output", type=Path, default=None, help="Write to a file instead of stdout")

    example = commands.add_parser("example", help="Print example TOML configuration for a component")
    example.add_argument("kind", choices=list(KINDS) + list(SECTION_BY_KIND.values()), metavar="KIND")
    example.add_argument("name", metavar="NAME")
    example.add_argument("--advanced", action="store_true", help="Include every option")

    show_config = commands.add_parser("show-config", help="Print the merged generator configuration")
    show_config.add_argument("--json", action="store_true", help="Print as JSON instead of YAML")

    return parser


def _load_settings(args: argparse.Namespace) -> DocsConfig:
    config = load_config(args.config, required=args.config is not None)
    if args.schema_dir is not None:
        config.schema_dir = args.schema_dir
    if getattr(args, "output_dir", None) is not None:
        config.output_dir = args.output_dir
    return config


def cmd_validate(args: argparse.Namespace, config: DocsConfig) -> int:
    try:
        schema = load_and_validate(config.schema_dir)
    except SchemadocError as e:
        if args.json:
            errors = e.errors if isinstance(e, SchemaValidationError) else [str(e)]
            print(json.dumps({"valid": False, "errors": errors}, indent=2))
        raise

    summary = {
        "valid": True,
        "sources": len(schema.sources),
        "transforms": len(schema.transforms),
        "sinks": len(schema.sinks),
        "fragments": len(schema.fragments),
        "options": len(schema.options),
        "releases": len(schema.releases),
    }
    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        print(
            f"Schema is valid: {summary['sources']} sources, {summary['transforms']} transforms, "
            f"{summary['sinks']} sinks, {summary['fragments']} fragments, "
            f"{summary['options']} global options, {summary['releases']} releases"
        )
    return EXIT_OK


def cmd_generate(args: argparse.Namespace, config: DocsConfig) -> int:
    result = build(config)
    report = write_outputs(
        result,
        config.output_dir,
        prune=args.prune or config.prune,
        dry_run=args.dry_run,
    )
    if args.dry_run:
        for relative in report.written:
            print(f"would write: {relative}")
        for relative in report.removed:
            print(f"would remove: {relative}")

    logger.info(
        "Documentation %s: %d written, %d unchanged, %d removed",
        "checked (dry run)" if args.dry_run else "generated",
        len(report.written),
        len(report.unchanged),
        len(report.removed),
        extra={"output_dir": str(config.output_dir), "document_count": result.document_count},
    )
    return EXIT_OK


def cmd_check(args: argparse.Namespace, config: DocsConfig) -> int:
    result = build(config)
    problems = check_outputs(result, config.output_dir)
    if problems:
        for problem in problems:
            print(problem)
        logger.warning(
            f"Documentation in {config.output_dir} is out of date; run 'schemadoc generate'",
            extra={"stale_count": len(problems)},
        )
        return EXIT_STALE
    logger.info(f"Documentation in {config.output_dir} is up to date")
    return EXIT_OK


def cmd_export(args: argparse.Namespace, config: DocsConfig) -> int:
    schema = load_and_validate(config.schema_dir)
    text = render_metadata(schema, RenderSettings.from_config(config))
    if args.output is None:
        sys.stdout.write(text)
        return EXIT_OK

    try:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputError(f"Cannot write {args.output}", cause=e) from e
    logger.info(f"Metadata written to {args.output}", extra={"path": str(args.output)})
    return EXIT_OK


def cmd_example(args: argparse.Namespace, config: DocsConfig) -> int:
    schema = load_and_validate(config.schema_dir)
    component = schema.component(args.kind, args.name)
    if component is None:
        raise ConfigError(f"Unknown component: {args.kind} '{args.name}'")
    sys.stdout.write(component_example(component, advanced=args.advanced))
    return EXIT_OK


def cmd_show_config(args: argparse.Namespace, config: DocsConfig) -> int:
    data = config.to_dict()
    if args.json:
        print(json.dumps(data, indent=2))
    else:
        sys.stdout.write(yaml.safe_dump({"schemadoc": data}, sort_keys=False))
    return EXIT_OK


COMMANDS = {
    "validate": cmd_validate,
    "generate": cmd_generate,
    "check": cmd_check,
    "export": cmd_export,
    "example": cmd_example,
    "show-config": cmd_show_config,
}


def main(argv: list[str] | None = None) -> int:
    global logger

    args = build_parser().parse_args(argv)
    # Variables already in the environment win over .env
    load_dotenv(Path.cwd() / ".env")

    console_level = logging.DEBUG if args.verbose else logging.INFO
    build_id = generate_build_id()
    setup_logging(
        console_level=console_level,
        json_format=args.json_logs,
        log_file=args.log_file,
        build_id=build_id,
    )
    logger = logging.getLogger(__name__)

    try:
        config = _load_settings(args)
        if config.log_dir is not None and args.log_file is None:
            setup_logging(
                console_level=console_level,
                json_format=args.json_logs,
                log_dir=config.log_dir,
                build_id=build_id,
            )
        return COMMANDS[args.command](args, config)
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_INTERRUPTED
    except SchemadocError as e:
        log_exception(logger, e, f"{args.command} failed: {e}", include_traceback=args.verbose)
        return e.exit_code
    except Exception as e:
        error = wrap_exception(e)
        log_exception(logger, e, f"{args.command} failed unexpectedly: {e}")
        return error.exit_code


if __name__ == "__main__":
    sys.exit(main())
