"""
DataGear - Main Entry Point

Command-line interface for rendering chart widgets and running batch
data import/export jobs.
"""

import sys
import logging
from typing import List, Optional
from pathlib import Path
import time

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from datagear import __version__
from datagear.config import (
    DataGearConfig,
    DatabaseConfig,
    DatabaseType,
    ExceptionResolve,
)
from datagear.analysis.exceptions import RenderException, ChartPluginException
from datagear.analysis.html.loader import load_plugins
from datagear.analysis.html.page import render_page, render_widgets
from datagear.analysis.widget_loader import load_widgets
from datagear.dataexchange.base import LoggingDataExchangeListener
from datagear.dataexchange.connection import ConnectionFactory
from datagear.dataexchange.csv_exchange import (
    BatchCsvDataExport,
    BatchCsvDataImport,
    CsvDataExportService,
    CsvDataImportService,
)
from datagear.dataexchange.exceptions import DataExchangeException
from datagear.dataexchange.service import BatchDataExchangeService
from datagear.persistence.file_path import FilePathValueResolver
from datagear.persistence.param_mapper import FileValuePstParamMapper

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

console = Console()


def _load_config(config_path: Optional[str]) -> DataGearConfig:
    if config_path:
        return DataGearConfig.from_yaml(config_path)
    return DataGearConfig()


def _database_config(
    config: DataGearConfig,
    db_type: Optional[str],
    db_path: Optional[str],
    host: Optional[str],
    port: Optional[int],
    database: Optional[str],
    user: Optional[str],
    password: Optional[str],
) -> DatabaseConfig:
    """Command line options override the database section of the config file."""
    if db_type:
        return DatabaseConfig(
            db_type=DatabaseType(db_type),
            db_path=db_path,
            host=host,
            port=port,
            database=database,
            username=user,
            password=password,
        )
    if config.database is None:
        raise click.UsageError("No database given: use --db-type or a config file with a database section")
    return config.database


def _print_results(title: str, names: List[str], results: list):
    table = Table(title=title, show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Rows", style="green")
    table.add_column("Failed", style="red")

    for name, result in zip(names, results):
        if result is None:
            table.add_row(name, "-", "not submitted")
        else:
            table.add_row(name, str(result.success_count), str(result.fail_count))

    console.print(table)


def database_options(f):
    """Shared database connection options."""
    options = [
        click.option('--db-type', '-t', type=click.Choice([t.value for t in DatabaseType]),
                     help='Database type'),
        click.option('--db-path', '-p', type=click.Path(), help='Path to SQLite database'),
        click.option('--host', '-h', help='Database host'),
        click.option('--port', type=int, help='Database port'),
        click.option('--database', '-d', help='Database name'),
        click.option('--user', '-u', help='Database username'),
        click.option('--password', help='Database password'),
        click.option('--config', '-c', 'config_path', type=click.Path(exists=True),
                     help='YAML configuration file'),
        click.option('--verbose', '-v', is_flag=True, help='Verbose output'),
    ]
    for option in reversed(options):
        f = option(f)
    return f


# CLI Commands
@click.group()
@click.version_option(version=__version__, prog_name="DataGear")
def cli():
    """DataGear - Data Analysis and Visualization Toolkit"""
    pass


@cli.command()
@click.argument('definition', type=click.Path(exists=True))
@click.option('--plugins', '-P', 'plugin_dirs', multiple=True, type=click.Path(),
              help='Chart plugin root directory (repeatable)')
@click.option('--output', '-o', type=click.Path(), help='Output file (default: stdout)')
@click.option('--fragment', is_flag=True, help='Write only the chart fragments, not a full page')
@click.option('--script', '-s', 'scripts', multiple=True, help='Script URL to include in the page')
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True),
              help='YAML configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def render(definition, plugin_dirs, output, fragment, scripts, config_path, verbose):
    """
    Render chart widgets defined in a YAML file to HTML.

    Examples:

        datagear render widgets.yml -P ./plugins -o dashboard.html
    """
    config = _load_config(config_path)
    verbose = verbose or config.verbose
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        dirs = list(plugin_dirs) or list(config.render.plugin_dirs)
        manager = load_plugins(
            dirs,
            new_line=config.render.new_line,
            element_tag_name=config.render.element_tag_name,
        )
        widgets = load_widgets(definition, manager)

        if fragment:
            html = render_widgets(widgets)
        else:
            html = render_page(widgets, title=config.render.page_title, scripts=list(scripts))

        if output:
            Path(output).write_text(html, encoding="utf-8")
            console.print(f"[bold green]✓ Rendered {len(widgets)} charts to {output}[/bold green]")
        else:
            click.echo(html, nl=False)

    except (RenderException, ChartPluginException, OSError) as e:
        console.print(f"[bold red]✗ Error: {e}[/bold red]")
        if verbose:
            logger.exception("Render failed")
        sys.exit(1)


@cli.command()
@database_options
@click.option('--table', 'tables', multiple=True, help='Table to export (repeatable, default: all)')
@click.option('--output', '-o', default='./export', help='Output directory')
@click.option('--workers', '-w', type=int, help='Number of worker threads')
def export(db_type, db_path, host, port, database, user, password, config_path, verbose,
           tables, output, workers):
    """
    Export tables to CSV files, one file per table.

    Examples:

        datagear export -t sqlite -p ./data/sales.db -o ./export
    """
    config = _load_config(config_path)
    verbose = verbose or config.verbose
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    db_config = _database_config(config, db_type, db_path, host, port, database, user, password)
    start_time = time.time()

    try:
        with ConnectionFactory(db_config) as factory:
            table_names = list(tables) or sorted(factory.get_table_names())
            batch = BatchCsvDataExport.for_tables(
                factory,
                table_names,
                output,
                encoding=config.exchange.encoding,
                listener=LoggingDataExchangeListener("export"),
                sub_listener=LoggingDataExchangeListener("export table"),
            )

            with BatchDataExchangeService(
                CsvDataExportService(),
                max_workers=workers or config.exchange.max_workers,
            ) as service:
                service.exchange(batch)
                results = batch.wait_for_results()

        _print_results("📤 Export Summary", table_names, results)
        console.print(f"[dim]Finished in {time.time() - start_time:.1f}s[/dim]")

    except DataExchangeException as e:
        console.print(f"\n[bold red]✗ Error: {e}[/bold red]")
        if verbose:
            logger.exception("Export failed")
        sys.exit(1)


@cli.command(name='import')
@database_options
@click.option('--input', '-i', 'input_dir', required=True, type=click.Path(exists=True, file_okay=False),
              help='Directory of CSV files, each named after its table')
@click.option('--workers', '-w', type=int, help='Number of worker threads')
@click.option('--ignore-errors', is_flag=True, help='Skip rows that cannot be imported')
@click.option('--ignore-inexistent-columns', is_flag=True, help='Skip CSV columns the table does not have')
@click.option('--file-value-charset', help='Charset of text files referenced by "file:" values')
def import_(db_type, db_path, host, port, database, user, password, config_path, verbose,
            input_dir, workers, ignore_errors, ignore_inexistent_columns, file_value_charset):
    """
    Import CSV files into tables.

    Values of the form "file:<path>" are replaced by the content of the file.

    Examples:

        datagear import -t sqlite -p ./data/sales.db -i ./export --ignore-errors
    """
    config = _load_config(config_path)
    verbose = verbose or config.verbose
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    db_config = _database_config(config, db_type, db_path, host, port, database, user, password)
    exchange_config = config.exchange

    resolve = ExceptionResolve.IGNORE if ignore_errors else exchange_config.exception_resolve
    param_mapper = FileValuePstParamMapper(
        FilePathValueResolver(file_value_charset or exchange_config.file_value_charset)
    )
    start_time = time.time()

    try:
        with ConnectionFactory(db_config) as factory:
            batch = BatchCsvDataImport.for_directory(
                factory,
                input_dir,
                encoding=exchange_config.encoding,
                exception_resolve=resolve,
                ignore_inexistent_columns=ignore_inexistent_columns or exchange_config.ignore_inexistent_columns,
                param_mapper=param_mapper,
                listener=LoggingDataExchangeListener("import"),
                sub_listener=LoggingDataExchangeListener("import table"),
            )

            with BatchDataExchangeService(
                CsvDataImportService(),
                max_workers=workers or exchange_config.max_workers,
            ) as service:
                service.exchange(batch)
                results = batch.wait_for_results()

        names = [sub.table for sub in batch.get_sub_data_exchanges()]
        _print_results("📥 Import Summary", names, results)
        console.print(f"[dim]Finished in {time.time() - start_time:.1f}s[/dim]")

    except DataExchangeException as e:
        console.print(f"\n[bold red]✗ Error: {e}[/bold red]")
        if verbose:
            logger.exception("Import failed")
        sys.exit(1)


@cli.command()
def version():
    """Show version information."""
    console.print(Panel(
        f"[bold]DataGear[/bold] v{__version__}\n\n"
        "Data analysis and visualization toolkit.\n\n"
        "Components:\n"
        "  • Chart widgets and HTML chart plugins\n"
        "  • Batch CSV data import/export\n"
        "  • File path value resolution",
        title="About",
        border_style="blue"
    ))


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
