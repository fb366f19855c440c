"""Main CLI entry point for stylestrata."""

import logging

import click

from stylestrata import __version__


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log pipeline progress at DEBUG level.")
def main(verbose):
    """Stylestrata: stylesheet dependency analysis for static sites."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--out-file", type=click.Path(dir_okay=False), default=None,
              help="Output file path (stdout if not specified).")
def stratify(path, out_file):
    """Stratify an analysis dataset into a graph of nodes and children.

    PATH is the JSON edge list produced by the analyzer.
    """
    from stylestrata.stratify import run_stratify
    run_stratify(path, out_file)


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--css-file", required=True, help="Stylesheet path as it appears in the dataset.")
@click.option("-r", "--recursive", is_flag=True,
              help="Also list pages reached through stylesheets that import it.")
def dependents(path, css_file, recursive):
    """List the dependents of a css file given an analysis dataset.

    PATH is the JSON edge list produced by the analyzer.
    """
    from stylestrata.dependents import run_dependents
    run_dependents(path, css_file, recursive)


if __name__ == "__main__":
    main()
