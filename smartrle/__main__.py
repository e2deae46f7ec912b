"""
Entry point for python -m smartrle
"""

import click
from smartrle.cli import compress, decompress, inspect, benchmark, smoke

@click.group()
@click.version_option(version='1.0.0')
def cli():
    """smartrle - Reversible Log Compression"""
    pass

cli.add_command(compress)
cli.add_command(decompress)
cli.add_command(inspect)
cli.add_command(benchmark)
cli.add_command(smoke)

if __name__ == '__main__':
    cli()
