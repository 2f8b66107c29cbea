#!/usr/bin/env python3
"""
Convert a standard format file to InfluxDB line protocol.

Writes line protocol to a file (or stdout) or directly to an InfluxDB
database. Unset options fall back to config/settings.yaml.

Usage Examples:
    # Write line protocol to stdout
    python scripts/standard_to_lineprotocol.py --input par.tsv

    # Comma-delimited input to a file
    python scripts/standard_to_lineprotocol.py --input par.csv --delimiter , --output par.lp

    # Write to InfluxDB
    python scripts/standard_to_lineprotocol.py --input par.tsv --host http://localhost:8181 --db cruise
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import click
from tscop.config import load_settings
from tscop.errors import TimeSeriesCopError
from tscop.logging import configure_logging, get_logger
from tscop.standard import parse_standard_file

logger = get_logger('scripts.standard_to_lineprotocol')


@click.command()
@click.option('--input', '-i', 'input_path', required=True,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Standard format input file')
@click.option('--output', '-o', default=None,
              help="Line protocol output file ('-' for stdout). Incompatible with --host/--db.")
@click.option('--host', '-H', default=None, help='InfluxDB host. Requires --db.')
@click.option('--db', '-d', 'database', default=None, help='InfluxDB database. Requires --host.')
@click.option('--token', default=None, envvar='INFLUXDB3_AUTH_TOKEN', help='InfluxDB token')
@click.option('--batch-size', '-b', default=None, type=int,
              help='Points per write batch. Downsampling queries fire after every batch.')
@click.option('--delimiter', default=None,
              help="Field delimiter (default: tab). Use 'whitespace' to split on runs of whitespace.")
@click.option('--settings', 'settings_path', default=None,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Settings YAML file (default: config/settings.yaml)')
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
              help='Log level')
def main(input_path, output, host, database, token, batch_size, delimiter, settings_path, log_level):
    """Convert a standard format file to line protocol."""
    try:
        settings = load_settings(settings_path)
    except TimeSeriesCopError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    configure_logging(level=(log_level or settings['log_level']).upper())
    logger.debug(f"Converting {input_path}")

    if output and (host or database):
        click.echo("Error: --output is incompatible with --host/--db.", err=True)
        sys.exit(1)
    if bool(host) != bool(database):
        click.echo("Error: --host and --db must be given together.", err=True)
        sys.exit(1)

    influx = settings['influxdb']
    if not output and not host:
        host = influx['host']
        database = influx['database']
        if not (host and database):
            output = '-'

    delimiter = delimiter or settings['delimiter']
    if delimiter == '\\t':
        delimiter = '\t'

    options = dict(
        delimiter=delimiter,
        batch_size=batch_size or settings['batch_size'],
        missing_values=settings['missing_values'],
        ensure_sorted=settings['ensure_sorted'],
    )

    try:
        if output:
            with click.open_file(output, 'w', encoding='utf-8') as out:
                result = parse_standard_file(input_path, outstream=out, **options)
        else:
            result = parse_standard_file(
                input_path,
                host=host,
                database=database,
                token=token or influx['token'],
                downsample_query=influx['downsample_query'],
                **options,
            )
    except TimeSeriesCopError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(result.message, err=True)


if __name__ == '__main__':
    main()
