"""Command line interface for bintree.

Commands:
- demo: run the full operation walkthrough on every tree in a driver file
- show: print each tree in a driver file, optionally sideways or as DOT
"""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import get_settings, load_settings, set_settings
from .driver import DEFAULT_PROBES, build_tree, read_trees, run_demo
from .exceptions import BinTreeError
from .sequence import SequenceBuffer
from .tree import BinTree


def _configure_logging(level: str) -> None:
    logger = logging.getLogger("dataknobs_bintree")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML or JSON settings file",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Override the configured log level",
)
def cli(config_path, log_level):
    """Binary search tree demonstration tool"""
    try:
        settings = load_settings(config_path) if config_path else get_settings()
    except BinTreeError as e:
        raise click.ClickException(str(e)) from e
    set_settings(settings)
    _configure_logging((log_level or settings.log_level).upper())


@cli.command()
@click.argument("infile", type=click.File("r"))
@click.option(
    "--probe",
    "probes",
    multiple=True,
    help="Word to retrieve and depth-query (repeatable)",
)
@click.option("--capacity", type=int, help="Sequence buffer capacity")
def demo(infile, probes, capacity):
    """Run every tree operation on each tree in INFILE"""
    try:
        count = run_demo(
            infile,
            sys.stdout,
            probes=probes or DEFAULT_PROBES,
            capacity=capacity,
        )
    except BinTreeError as e:
        raise click.ClickException(str(e)) from e
    if count == 0:
        click.echo("No trees found in input", err=True)


@cli.command()
@click.argument("infile", type=click.File("r"))
@click.option("--sideways", is_flag=True, help="Also print the rotated tree view")
@click.option("--balanced", is_flag=True, help="Rebuild each tree balanced before printing")
@click.option(
    "--dot",
    "dot_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write Graphviz DOT source of each tree (suffixed by its index)",
)
def show(infile, sideways, balanced, dot_path):
    """Print each tree in INFILE in order"""
    out = sys.stdout
    for idx, tokens in enumerate(read_trees(infile)):
        tree = BinTree()
        build_tree(tree, tokens)
        if balanced:
            buffer = SequenceBuffer(capacity=None)
            tree.to_sorted_sequence(buffer)
            tree.from_sorted_sequence(buffer)
        tree.display(out)
        if sideways:
            tree.display_sideways(out)
        if dot_path is not None:
            target = dot_path.with_name(f"{dot_path.stem}_{idx}{dot_path.suffix}")
            target.write_text(tree.build_dot(name=f"tree_{idx}").source)
            click.echo(f"Wrote {target}", err=True)


def main():
    cli()


if __name__ == "__main__":
    main()
