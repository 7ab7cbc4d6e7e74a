"""Command-line interface for the semantic diff engine."""

import logging
import sys
import click
from .config import STRATEGIES, load_config
from .engine import SemanticDiffEngine, detect_language
from .errors import SourceParseError


def _build_engine(config_file, verbose, debug) -> SemanticDiffEngine:
    try:
        config = load_config(config_file)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--config')

    level = config.log_level
    if verbose:
        level = 'INFO'
    if debug:
        level = 'DEBUG'
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s', stream=sys.stderr)

    return SemanticDiffEngine(config)


def _read_text(path: str) -> str:
    # Binary read keeps CRLF line endings intact
    with click.open_file(path, 'rb') as f:
        return f.read().decode('utf-8')


@click.group()
@click.option('--config', '-c', 'config_file', default=None, type=click.Path(exists=True), help='Path to configuration file (YAML/JSON)')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, config_file, verbose, debug):
    """Symbol-level diffs and patch splitting for reviewable commits."""
    ctx.obj = _build_engine(config_file, verbose, debug)


@cli.command()
@click.argument('before', type=click.Path(exists=True, dir_okay=False))
@click.argument('after', type=click.Path(exists=True, dir_okay=False))
@click.option('--language', '-l', default=None, help='Language tag (default: detected from AFTER extension)')
@click.pass_obj
def diff(engine, before, after, language):
    """Print the symbol-level changes between BEFORE and AFTER as JSON."""
    language = language or detect_language(after)
    try:
        response = engine.semantic_diff(_read_text(before), _read_text(after), language, file_path=after)
    except SourceParseError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    click.echo(response.to_json(indent=2))


@cli.command()
@click.argument('patch', type=click.Path(allow_dash=True))
@click.option('--language', '-l', default='unknown', help='Language tag of the patched file')
@click.option('--strategy', '-s', type=click.Choice(STRATEGIES, case_sensitive=False), default=None, help='Split strategy (default: from config)')
@click.option('--before', 'before_file', default=None, type=click.Path(exists=True, dir_okay=False), help='Old version of the file, enables symbol alignment')
@click.option('--after', 'after_file', default=None, type=click.Path(exists=True, dir_okay=False), help='New version of the file, enables symbol alignment')
@click.pass_obj
def split(engine, patch, language, strategy, before_file, after_file):
    """Split PATCH (or - for stdin) into independently appliable fragments as JSON."""
    patch_text = _read_text(patch)
    strategy = strategy or engine.config.default_strategy

    if strategy == 'symbol' and (before_file is None) != (after_file is None):
        raise click.UsageError('--before and --after must be given together')

    try:
        if strategy == 'symbol' and before_file:
            response = engine.split_patch_by_symbol(
                patch_text,
                _read_text(before_file),
                _read_text(after_file),
                language,
                file_path=after_file,
            )
        else:
            response = engine.split_patch(patch_text, language, strategy)
    except SourceParseError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    click.echo(response.to_json(indent=2))


def main():
    """Console script entry point."""
    cli()


if __name__ == '__main__':
    main()
