"""
Command-line interface for DAO generation.

Subcommands:
    generate   Generate DAO classes for tables of a database or schema file
    tables     List the tables of a database or schema file
    languages  List supported target languages
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from .codegen import (
    GenerationMode,
    BatchGenerator,
    BatchSummary,
    RegistryError,
    get_generator,
    get_language_info,
    list_supported_languages,
)
from .codegen.core.config import ConfigError, get_config_manager, load_config
from .codegen.core.storage import OutputLocationError, resolve_output_directory
from .logging_config import get_logger, setup_logging
from .sources import (
    ConnectionSettings,
    JsonFileSchemaSource,
    SchemaSource,
    SchemaUnavailableError,
    create_schema_source,
)

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

console = Console()


class CLIError(Exception):
    """Exception raised for CLI usage errors."""

    pass


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("schema source")
    group.add_argument(
        "--schema-file", metavar="FILE", help="Read tables from a JSON schema dump"
    )
    group.add_argument(
        "--driver",
        choices=["mysql", "mariadb", "postgresql"],
        default="mysql",
        help="Database engine (default: mysql)",
    )
    group.add_argument("--host", default="localhost", help="Database host")
    group.add_argument("--port", type=int, help="Database port (default per driver)")
    group.add_argument("--user", "-u", help="Database user")
    group.add_argument(
        "--password-prompt",
        action="store_true",
        help="Prompt for the password instead of reading DAO_GENERATOR_PASSWORD",
    )
    group.add_argument("--database", "-d", help="Database to read tables from")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dao-generator",
        description="Generate data-access classes from database table metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dao-generator generate -d shop -u root --password-prompt -o ./DAO
  dao-generator generate --schema-file schema.json --tables rv_users --mode overwrite
  dao-generator tables --driver postgresql -d shop -u app
  dao-generator languages
        """.strip(),
    )
    parser.add_argument(
        "--verbose", "-v", action="count", default=0, help="Increase log verbosity"
    )

    subparsers = parser.add_subparsers(dest="command")

    generate = subparsers.add_parser("generate", help="Generate DAO classes")
    _add_source_args(generate)
    generate.add_argument(
        "--tables", "-t", nargs="+", metavar="TABLE", help="Tables (default: all)"
    )
    generate.add_argument(
        "--mode",
        choices=[mode.value for mode in GenerationMode],
        help="save: back up existing files first; overwrite: replace in place",
    )
    generate.add_argument("--output", "-o", metavar="DIR", help="Output directory")
    generate.add_argument("--config", metavar="FILE", help="JSON configuration file")
    generate.add_argument(
        "--language", "-l", default="php", help="Target language (default: php)"
    )
    generate.set_defaults(func=handle_generate)

    tables = subparsers.add_parser("tables", help="List tables")
    _add_source_args(tables)
    tables.set_defaults(func=handle_tables)

    languages = subparsers.add_parser("languages", help="List target languages")
    languages.set_defaults(func=handle_languages)

    return parser


def _open_source(args: argparse.Namespace) -> SchemaSource:
    if args.schema_file:
        return JsonFileSchemaSource(args.schema_file)

    password = None
    if args.password_prompt:
        password = Prompt.ask("Password", password=True, console=console)

    try:
        settings = ConnectionSettings(
            driver=args.driver,
            host=args.host,
            port=args.port,
            user=args.user,
            password=password,
            database=args.database,
        )
    except ValueError as e:
        raise CLIError(str(e)) from e

    try:
        return create_schema_source(settings)
    except ImportError as e:
        raise CLIError(f"Database driver for {settings.driver} is not installed: {e}") from e


def _database_name(args: argparse.Namespace, source: SchemaSource) -> str | None:
    if args.database:
        return args.database
    if isinstance(source, JsonFileSchemaSource):
        return source.database
    return None


def handle_generate(args: argparse.Namespace) -> int:
    """Run a generation batch and print its summary."""
    overrides = {"output_dir": args.output, "mode": args.mode}
    config = load_config(args.language, custom_config=overrides, config_file=args.config)

    for warning in get_config_manager().validate_config(config):
        console.print(f"[yellow]⚠️ {warning}[/yellow]")

    mode = config.generation_mode

    with _open_source(args) as source:
        database = _database_name(args, source)
        if database and not config.database_name:
            config.database_name = database

        generator = get_generator(args.language, config)
        output_dir = resolve_output_directory(config.output_dir, workspace_root=".")

        table_names = args.tables or source.fetch_tables(database)
        if not table_names:
            console.print("[yellow]No tables to generate.[/yellow]")
            return EXIT_OK

        batch = BatchGenerator(generator, output_dir)
        summary = batch.generate_from_source(source, database, table_names, mode)

    print_summary(summary, output_dir)
    return EXIT_FAILURE if summary.has_errors else EXIT_OK


def handle_tables(args: argparse.Namespace) -> int:
    with _open_source(args) as source:
        names = source.fetch_tables(_database_name(args, source))

    table = Table(title="📋 Tables", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Table", style="bold green")
    for index, name in enumerate(names, 1):
        table.add_row(str(index), name)

    console.print(table)
    return EXIT_OK


def handle_languages(args: argparse.Namespace) -> int:
    table = Table(title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for language in list_supported_languages():
        info = get_language_info(language)
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(language, info["file_extension"], info["class"], aliases)

    console.print(table)
    return EXIT_OK


def print_summary(summary: BatchSummary, output_dir) -> None:
    """Render a batch summary with rich."""
    counts = Table(box=box.SIMPLE, show_header=False)
    counts.add_column("Outcome", style="bold")
    counts.add_column("Count", justify="right")
    counts.add_row("[green]Generated[/green]", str(summary.generated))
    counts.add_row("[yellow]Skipped[/yellow]", str(summary.skipped))
    counts.add_row("[blue]Backed up[/blue]", str(summary.backed_up))
    counts.add_row("[red]Failed[/red]", str(summary.failed))

    console.print(
        Panel(counts, title=f"📦 Generation into {output_dir}", border_style="cyan")
    )

    for path in summary.written_paths:
        console.print(f"  [green]✓[/green] {path}")

    if summary.errors:
        console.print("\n[red]Errors:[/red]")
        for error in summary.errors:
            console.print(f"  [red]✗[/red] {error}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING - 10 * min(args.verbose, 2)
    setup_logging(level)

    if not getattr(args, "func", None):
        parser.print_help()
        return EXIT_USAGE

    try:
        return args.func(args)
    except (CLIError, ConfigError, RegistryError) as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return EXIT_USAGE
    except (OutputLocationError, SchemaUnavailableError) as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        logger.error("Aborted: %s", e)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
