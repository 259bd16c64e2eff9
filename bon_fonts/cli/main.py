"""
Main CLI entry point for bon-fonts.
"""

import sys
from pathlib import Path

import click

from bon_fonts import __version__
from bon_fonts.config.paths import CONFIG_FILE, OUT_DIR

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=CONFIG_FILE,
    show_default=True,
    help="Font family configuration file.",
)

version_option = click.option(
    "--version-string",
    "version",
    type=str,
    default="1.000",
    show_default=True,
    help="Version stamped into the fonts.",
)

jobs_option = click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of fonts built in parallel.",
)


def fail(message: str) -> None:
    """Log an error and exit non-zero."""
    from bon_fonts.utils.logging import logger

    logger.error(message)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def cli():
    """Bon hybrid Latin/Korean font build system."""
    pass


@cli.group()
def build():
    """Font build commands."""
    pass


@build.command()
@config_option
@version_option
@jobs_option
def all(config_path, version, jobs):
    """Build every available weight of every family."""
    from bon_fonts.config.fonts import load_config, resolve_targets
    from bon_fonts.core.errors import ConfigurationError
    from bon_fonts.pipeline.runner import run_all

    try:
        config = load_config(config_path)
        targets = resolve_targets(config)
        run_all(config, targets, version, jobs)
    except ConfigurationError as e:
        fail(str(e))


@build.command()
@click.argument("font_key")
@click.option("--weight", "weights", multiple=True, help="Weight to build (repeatable).")
@click.option(
    "--italic/--upright",
    default=None,
    help="Build only italic or only upright styles (default: both).",
)
@config_option
@version_option
@jobs_option
def font(font_key, weights, italic, config_path, version, jobs):
    """Build the weights of one family."""
    from bon_fonts.config.fonts import load_config, resolve_targets
    from bon_fonts.core.errors import ConfigurationError
    from bon_fonts.pipeline.runner import run_all

    try:
        config = load_config(config_path)
        targets = resolve_targets(config, [font_key], list(weights) or None, italic)
        run_all(config, targets, version, jobs)
    except ConfigurationError as e:
        fail(str(e))


@build.command()
@click.argument("source", type=click.Path(path_type=Path))
@click.argument("output", type=click.Path(path_type=Path))
@click.option("--font", "font_key", default=None, help="Family whose Korean adjustments to apply.")
@click.option(
    "--units-per-em",
    type=click.IntRange(min=16, max=16384),
    default=None,
    help="Rescale the subset to this units-per-em (default: keep the source's).",
)
@config_option
def korean(source, output, font_key, units_per_em, config_path):
    """Extract the Korean subset of a font."""
    from bon_fonts.config.fonts import DEFAULT_MONO_WIDTH, load_config
    from bon_fonts.core.errors import BuildError
    from bon_fonts.operations.korean import extract_korean

    try:
        adjustments = None
        mono_width = DEFAULT_MONO_WIDTH
        if font_key:
            font_config = load_config(config_path).font(font_key)
            adjustments = font_config.korean_adjustments
            mono_width = font_config.mono_width
        extract_korean(source, output, adjustments, mono_width, units_per_em)
    except BuildError as e:
        fail(str(e))


@build.command()
@click.argument("source", type=click.Path(path_type=Path))
@click.argument("output", type=click.Path(path_type=Path))
@click.option("--weight", default="Regular", show_default=True, help="Weight name.")
@click.option("--italic", is_flag=True, help="Name the instance as italic.")
def instance(source, output, weight, italic):
    """Extract a static weight instance from a variable font."""
    from bon_fonts.core.errors import BuildError
    from bon_fonts.operations.variable import save_variable_instance

    try:
        result = save_variable_instance(source, output, weight, italic)
    except BuildError as e:
        fail(str(e))

    if result.degraded:
        click.echo(f"Warning: {output} is the default instance, not {weight}", err=True)


@build.command()
@click.option("--all", "full", is_flag=True, help="Also remove the out/ directory.")
def clean(full):
    """Remove build artifacts (.build/ and optionally out/)."""
    from bon_fonts.pipeline.runner import clean as do_clean

    do_clean(full)


@cli.group()
def validate():
    """Font validation commands."""
    pass


@validate.command()
@click.option(
    "--out-dir",
    type=click.Path(path_type=Path),
    default=OUT_DIR,
    show_default=True,
    help="Directory holding the built fonts.",
)
def outputs(out_dir):
    """Validate built fonts for coverage and metadata consistency."""
    from bon_fonts.pipeline.validate import main

    main(out_dir)


if __name__ == "__main__":
    cli()
