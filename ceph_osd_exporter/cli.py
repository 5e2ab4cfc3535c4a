# ceph_osd_exporter/cli.py - Command-line interface
"""
Command-line interface for the Ceph OSD exporter.
"""

import json
import sys

import click

from . import __version__
from .ceph.admin_socket import AdminSocket, AdminSocketCommand
from .ceph.discovery import get_all_admin_sockets
from .ceph.errors import CephError
from .utils.config import Config, ConfigError
from .utils.helpers import check_prerequisites
from .utils.logger import setup_logging


@click.group()
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Log level (overrides config)')
@click.option('--log-file', type=click.Path(), help='Log file path')
@click.option('--config', 'config_file', type=click.Path(), help='Configuration file')
@click.version_option(__version__, prog_name='ceph_osd_exporter')
@click.pass_context
def cli(ctx, log_level, log_file, config_file):
    """
    Ceph OSD Exporter

    Prometheus exporter for metrics read from Ceph OSD admin sockets.
    """
    ctx.ensure_object(dict)

    try:
        cfg = Config(config_file)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if log_level:
        cfg.set('logging.level', log_level)
    if log_file:
        cfg.set('logging.file', log_file)

    setup_logging(level=cfg.get('logging.level', 'INFO'), log_file=cfg.get('logging.file'))

    ctx.obj['config'] = cfg


@cli.command()
@click.option('--listen-address', help='Address to listen on')
@click.option('--port', type=int, help='Port to listen on')
@click.option('--telemetry-path', help='Path under which to expose metrics')
@click.pass_context
def serve(ctx, listen_address, port, telemetry_path):
    """
    Serve metrics over HTTP.

    Example:
        ceph-osd-exporter serve --port 9282
    """
    from .exporters.prometheus import PrometheusExporter

    cfg = ctx.obj['config']
    if listen_address:
        cfg.set('exporter.listen_address', listen_address)
    if port is not None:
        cfg.set('exporter.port', port)
    if telemetry_path:
        cfg.set('exporter.telemetry_path', telemetry_path)

    exporter = PrometheusExporter(cfg)
    try:
        exporter.start()
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.pass_context
def scrape(ctx):
    """
    Collect once and print the metrics.
    """
    from .exporters.prometheus import PrometheusExporter

    exporter = PrometheusExporter(ctx.obj['config'])
    click.echo(exporter.get_metrics_text(), nl=False)


@cli.command()
@click.pass_context
def discover(ctx):
    """
    List the OSD admin sockets on this host.
    """
    run_dir = ctx.obj['config'].get('ceph.run_dir')

    try:
        sockets = get_all_admin_sockets(run_dir=run_dir)
    except CephError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not sockets:
        click.echo(f"No OSD admin sockets found under {run_dir}")
        return

    for admin_socket in sockets:
        click.echo(f"osd.{admin_socket.osd}\t{admin_socket.path}")


@cli.command()
@click.argument('socket_path', type=click.Path())
@click.argument('prefix', nargs=-1, required=True)
@click.option('--format', 'output_format', help='Output format hint passed to the daemon')
@click.pass_context
def query(ctx, socket_path, prefix, output_format):
    """
    Send one command to an admin socket and print the response.

    Example:
        ceph-osd-exporter query /var/run/ceph/ceph-osd.0.asok bluestore allocator score block
    """
    command = AdminSocketCommand(prefix=' '.join(prefix), format=output_format)
    timeout = ctx.obj['config'].get('ceph.socket_timeout')

    try:
        response = AdminSocket(path=socket_path).send_command(command, timeout=timeout)
    except CephError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(response.to_dict(), indent=2, sort_keys=True))


@cli.command()
@click.pass_context
def check(ctx):
    """
    Check that admin sockets can be discovered.

    Verifies:
    - Run directory exists
    - Run directory is readable
    - At least one OSD admin socket is present
    """
    run_dir = ctx.obj['config'].get('ceph.run_dir')

    all_passed = True
    click.echo("Checking prerequisites...")
    for name, passed in check_prerequisites(run_dir):
        status = "✓" if passed else "✗"
        click.echo(f"  {status} {name}")
        all_passed = all_passed and passed

    if all_passed:
        click.echo("\n✓ All prerequisites met!")
    else:
        click.echo("\n✗ Some prerequisites are missing")
        sys.exit(1)


if __name__ == '__main__':
    cli(obj={})
