# === FILE: help_view/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point for the help viewer.

Commands:
  show URL    Load a page with all embedded resources and print a session report
  config      Print the effective configuration

Global options:
  --config PATH       Path to a YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only when omitted)
  --log-format FORMAT Logging format string

Options of `show`:
  --json PATH         Save the report as JSON
  --pretty            Indent JSON output
  --text              Print only the visible text of the page
  --timeout SEC       Timeout for loading the page and its resources

Also:
  --version, -v       Show the version

Example:
  help-view show docs/index.html --pretty
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from help_view import __version__
from help_view.config import load_config
from help_view.logger import configure
from help_view.report import render_json
from help_view.viewer import load_page

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def to_url(target: str) -> str:
    """Turn an existing local path into a file:// URL, leave URLs alone."""
    path = Path(target).expanduser()
    if "://" not in target and path.exists():
        return path.resolve().as_uri()
    return target


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='HelpView, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stderr only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """HelpView command group."""
    configure(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format,
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('show', context_settings=CONTEXT_SETTINGS)
@click.argument('target')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON report to a file'
)
@click.option('--pretty', is_flag=True, help='Indent JSON output (2 spaces)')
@click.option('--text', 'text_only', is_flag=True, help='Print only the visible page text')
@click.option(
    '--timeout', 'load_timeout',
    type=float,
    default=None,
    help='Timeout for the page and its resources (seconds)'
)
@click.pass_context
def show(ctx, target, json_output, pretty, text_only, load_timeout):
    """Load TARGET (URL or local file) with all embedded resources."""
    cfg = ctx.obj['config']
    url = to_url(target)
    try:
        summary = asyncio.run(load_page(cfg, url, timeout=load_timeout))
    except asyncio.TimeoutError:
        print_error(f'Loading did not finish within {load_timeout} seconds')
    except Exception as e:
        print_error(f'Error while loading: {e}')

    if summary['url'] is None:
        reason = summary['status'][-1] if summary['status'] else 'nothing was loaded'
        print_error(reason)

    if json_output:
        try:
            saved = render_json(summary, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved}')
        except Exception as e:
            print_error(f'Error while saving JSON: {e}')
        return

    if text_only:
        click.echo(summary['text'])
        return

    indent = 2 if pretty else None
    click.echo(json.dumps(summary, ensure_ascii=False, indent=indent))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Print the current configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2, exclude={"credentials": {"__all__": {"password"}}}))


if __name__ == "__main__":
    cli()
