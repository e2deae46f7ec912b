"""
CLI commands for SmartRLE.
"""

import click
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from smartrle.errors import ConfigError
from smartrle.services import SmartRLECodec, run_benchmark, run_smoke


def _read_text(path: Path) -> str:
    # newline='' keeps CRLF terminators intact
    with open(path, 'r', encoding='utf-8', newline='') as f:
        return f.read()


def _write_text(path: Path, text: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(text)


def _require_file(path: Path, label: str):
    if not path.exists():
        click.echo(f"Error: {label} not found: {path}", err=True)
        sys.exit(1)


def _build_codec(**overrides) -> SmartRLECodec:
    try:
        return SmartRLECodec(**overrides)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)


@click.command()
@click.option('--input', '-i', required=True, help='Input log file path')
@click.option('--output', '-o', required=True, help='Output artifact path')
@click.option('--measure', '-m', is_flag=True, help='Measure and display compression metrics')
@click.option('--verbose', '-v', is_flag=True, help='Show stage-by-stage progress')
@click.option('--max-patterns', default=30, help='Maximum pattern codes per document (default: 30)')
@click.option('--char-map', is_flag=True, help='Enable the aggressive character remap pass')
def compress(input, output, measure, verbose, max_patterns, char_map):
    """
    Compress a log file into a SmartRLE artifact.

    Example:
        smartrle compress -i access.log -o access.srle -m
    """
    input_path = Path(input)
    output_path = Path(output)
    _require_file(input_path, "Input file")

    click.echo(f"Compressing {input_path.name}...")

    codec = _build_codec(max_patterns=max_patterns, char_map=char_map)
    try:
        text = _read_text(input_path)
    except UnicodeDecodeError as e:
        click.echo(f"Error: {input_path} is not valid UTF-8 ({e.reason})", err=True)
        sys.exit(1)

    artifact, stats = codec.compress_with_stats(text, verbose=verbose)
    _write_text(output_path, artifact)

    if measure:
        click.echo("\n=== Compression Results ===")
        click.echo(f"Original size: {stats.original_size:,} bytes")
        click.echo(f"Compressed size: {stats.compressed_size:,} bytes ({stats.ratio_percent:.2f}%)")
        click.echo(f"Compression ratio: {stats.compression_ratio:.2f}×")
        click.echo(f"Lines: {stats.line_count:,}")
        click.echo(f"Patterns: {stats.pattern_count}")
        click.echo(f"Header self-compressed: {'yes' if stats.header_compressed else 'no'}")
        click.echo(f"Processing time: {stats.compression_time:.2f}s")

    click.echo(f"\n✓ Compressed to {output_path}")


@click.command()
@click.option('--input', '-i', required=True, help='SmartRLE artifact path')
@click.option('--output', '-o', required=True, help='Restored log file path')
@click.option('--verbose', '-v', is_flag=True, help='Show stage-by-stage progress')
def decompress(input, output, verbose):
    """
    Restore the original log file from a SmartRLE artifact.

    Example:
        smartrle decompress -i access.srle -o access.log
    """
    input_path = Path(input)
    output_path = Path(output)
    _require_file(input_path, "Artifact")

    codec = SmartRLECodec()
    text = codec.decompress(_read_text(input_path), verbose=verbose)
    _write_text(output_path, text)

    click.echo(f"✓ Decompressed to {output_path}")


@click.command()
@click.option('--input', '-i', required=True, help='SmartRLE artifact path')
def inspect(input):
    """
    Show the side tables recorded in an artifact header.

    Example:
        smartrle inspect -i access.srle
    """
    input_path = Path(input)
    _require_file(input_path, "Artifact")

    ctx = SmartRLECodec().read_header(_read_text(input_path))
    if ctx is None:
        click.echo("No SmartRLE header found (legacy artifact)")
        return

    table = Table(title=f"Header: {input_path.name}")
    table.add_column("Table", style="cyan")
    table.add_column("Entries", justify="right", style="green")

    for tag, side_table in ctx.tables.items():
        if len(side_table):
            table.add_row(tag, str(len(side_table)))
    if ctx.apache.is_set:
        table.add_row(f"ATS (base {ctx.apache.base_epoch} {ctx.apache.offset})",
                      str(len(ctx.apache.deltas)))
    table.add_row("Dictionary codes", str(len(ctx.dictionary_codes)))
    table.add_row("Patterns", str(len(ctx.patterns)))
    table.add_row("Line templates", str(len(ctx.line_templates)))
    if ctx.char_map:
        table.add_row("Character map", str(len(ctx.char_map)))

    console = Console()
    console.print(table)
    eol = 'CRLF' if ctx.line_terminator == '\r\n' else 'LF'
    click.echo(f"Line terminator: {eol}, trailing: {'yes' if ctx.trailing_terminator else 'no'}")


@click.command()
@click.option('--input', '-i', required=True, help='Log file to benchmark')
@click.option('--zstd-level', default=19, help='Zstandard level for the baseline (default: 19)')
def benchmark(input, zstd_level):
    """
    Compare SmartRLE against gzip and Zstandard on one file.

    Example:
        smartrle benchmark -i apache_access_5mb.log
    """
    input_path = Path(input)
    _require_file(input_path, "Input file")

    click.echo(f"Benchmarking {input_path.name}...")
    result = run_benchmark(_read_text(input_path), zstd_level=zstd_level)

    table = Table(title=f"Benchmark: {input_path.name}")
    table.add_column("Method", style="cyan")
    table.add_column("Size (bytes)", justify="right")
    table.add_column("Ratio", justify="right", style="green")
    table.add_column("Compress (ms)", justify="right")
    table.add_column("Decompress (ms)", justify="right")

    table.add_row("Original", f"{result.original_bytes:,}", "100.00%", "-", "-")
    table.add_row("SmartRLE", f"{result.smartrle_bytes:,}", f"{result.smartrle_percent:.2f}%",
                  f"{result.compress_ms:.2f}", f"{result.decompress_ms:.2f}")
    table.add_row("gzip", f"{result.gzip_bytes:,}", f"{result.gzip_percent:.2f}%",
                  f"{result.gzip_ms:.2f}", "-")
    table.add_row(f"zstd ({zstd_level})", f"{result.zstd_bytes:,}", f"{result.zstd_percent:.2f}%",
                  f"{result.zstd_ms:.2f}", "-")

    console = Console()
    console.print(table)
    click.echo(f"Correctness (SmartRLE): {result.correct}")
    if not result.correct:
        sys.exit(1)


@click.command()
def smoke():
    """
    Run the built-in sample strings through the codec.

    Example:
        smartrle smoke
    """
    results = run_smoke()

    table = Table(title="SmartRLE smoke test")
    table.add_column("Sample", style="cyan")
    table.add_column("Original", justify="right")
    table.add_column("Compressed", justify="right")
    table.add_column("Ratio", justify="right", style="green")
    table.add_column("Round trip", justify="center")

    for r in results:
        table.add_row(r.name, str(r.original_length), str(r.compressed_length),
                      f"{r.ratio_percent:.2f}%", "✓" if r.correct else "✗")

    console = Console()
    console.print(table)
    if not all(r.correct for r in results):
        click.echo("Error: round trip failed", err=True)
        sys.exit(1)
