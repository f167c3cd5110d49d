"""Command-line interface for windyplug."""

import click
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .. import __version__
from ..core import Config, ChunkInfo
from ..transform import (
    BuildDriver, BundlerHook, ChunkJob, SideConfigLoader, TransformError, write_outputs
)
from ..utils.output import OutputFormatter


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool, quiet: bool, log_level: str = "INFO",
                  log_file: Optional[Path] = None) -> None:
    """Setup logging configuration."""
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, log_level, logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        filename=str(log_file) if log_file else None
    )


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress output except errors')
@click.option('--config', '-c', type=click.Path(exists=True, path_type=Path),
              help='Configuration file path')
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool, config: Optional[Path]):
    """windyplug - transform bundled plugin chunks for the host runtime."""
    ctx.ensure_object(dict)

    try:
        if config:
            loaded = Config.load_from_file(config)
        else:
            config_file = Config.find_config_file()
            loaded = Config.load_from_file(config_file) if config_file else Config.get_default_config()
    except Exception as e:
        click.echo(f"Error: invalid configuration: {e}", err=True)
        sys.exit(1)

    loaded = loaded.merge_with_cli_args(verbose=verbose or None, quiet=quiet or None)
    setup_logging(loaded.output.verbose, loaded.output.quiet, loaded.log_level, loaded.log_file)

    config_issues = loaded.validate_config()
    for issue in config_issues:
        click.echo(f"Warning: {issue}", err=True)
    if config_issues:
        logger.warning(f"Configuration issues: {config_issues}")

    ctx.obj['config'] = loaded


@cli.command()
@click.argument('chunk', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--entry', '-e', required=True, type=click.Path(path_type=Path),
              help='Source module the chunk was built from (locates the side config)')
@click.option('--out-dir', '-o', type=click.Path(file_okay=False, path_type=Path),
              help='Directory to write the transformed chunk to')
@click.option('--sourcemap/--no-sourcemap', default=None,
              help='Emit a source map next to the output')
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'json']),
              help='Report format')
@click.pass_context
def transform(ctx, chunk: Path, entry: Path, out_dir: Optional[Path],
              sourcemap: Optional[bool], output_format: Optional[str]):
    """Transform one bundled CHUNK file."""
    config = ctx.obj['config'].merge_with_cli_args(sourcemap=sourcemap, format=output_format)

    try:
        code = chunk.read_text(encoding='utf-8')
    except (OSError, UnicodeError) as e:
        click.echo(f"Error: cannot read {chunk}: {e}", err=True)
        sys.exit(1)

    hook = BundlerHook(config)
    hook.options({'output': {'sourcemap': config.output.sourcemap}})

    job = ChunkJob(code=code, chunk=ChunkInfo(file_name=chunk.name, facade_module_id=str(entry)))
    report = BuildDriver(hook).run([job])

    if not report.succeeded:
        for failure in report.failures:
            click.echo(f"Error: {failure.error}", err=True)
            if failure.error_path:
                click.echo(f"  in {failure.error_path}", err=True)
        sys.exit(1)

    if out_dir is None:
        click.echo(report.outcomes[0].result.code, nl=False)
        return

    written = write_outputs(report, out_dir)
    if not config.output.quiet:
        click.echo(OutputFormatter(config.output).format_report(report))
        for path in written:
            click.echo(f"Wrote {path}")


@cli.command('show-config')
@click.argument('directory', type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.pass_context
def show_config(ctx, directory: Path):
    """Show the stamped side config found in DIRECTORY."""
    config = ctx.obj['config']

    try:
        record = SideConfigLoader(config.side_config).load(directory)
    except TransformError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(record, indent=2, ensure_ascii=False))


@cli.command()
@click.option('--output', '-o', type=click.Path(path_type=Path),
              default=Path('.windyplug.yaml'),
              help='Output configuration file path')
@click.pass_context
def init(ctx, output: Path):
    """Initialize a new configuration file."""
    try:
        if output.exists():
            if not click.confirm(f"Configuration file {output} already exists. Overwrite?"):
                click.echo("Cancelled.")
                return

        config = Config.get_default_config()
        config.save_to_file(output)

        click.echo(f"Configuration file created: {output}")

    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
