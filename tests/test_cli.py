# tests/test_cli.py - Tests for the command-line interface
"""
Tests for the click commands, run against fake admin sockets on disk.
"""

import json
import logging
import os

import pytest
import yaml
from click.testing import CliRunner

from conftest import frame_json
from ceph_osd_exporter import __version__
from ceph_osd_exporter.cli import cli


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces the root handlers, put them back afterwards"""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers = handlers
    root_logger.setLevel(level)


@pytest.fixture
def config_file(tmp_path, socket_dir):
    path = tmp_path / 'config.yaml'
    path.write_text(yaml.safe_dump({
        'ceph': {'run_dir': socket_dir, 'socket_timeout': 5},
        'logging': {'level': 'ERROR'},
    }))
    return str(path)


def run(*args):
    return CliRunner().invoke(cli, list(args), obj={})


class TestCli:
    """Test cases for the CLI commands"""

    def test_version(self):
        result = run('--version')

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_discover(self, config_file, socket_dir):
        os.mkdir(os.path.join(socket_dir, 'fsid'))
        open(os.path.join(socket_dir, 'ceph-osd.1.asok'), 'w').close()
        open(os.path.join(socket_dir, 'fsid', 'ceph-osd.42.asok'), 'w').close()

        result = run('--config', config_file, 'discover')

        assert result.exit_code == 0
        assert 'osd.1\t' in result.output
        assert 'osd.42\t' in result.output

    def test_discover_empty(self, config_file, socket_dir):
        result = run('--config', config_file, 'discover')

        assert result.exit_code == 0
        assert 'No OSD admin sockets found' in result.output

    def test_discover_missing_run_dir(self, tmp_path):
        config_file = tmp_path / 'config.yaml'
        config_file.write_text(yaml.safe_dump({'ceph': {'run_dir': str(tmp_path / 'missing')}}))

        result = run('--log-level', 'ERROR', '--config', str(config_file), 'discover')

        assert result.exit_code == 1
        assert 'failed to scan admin sockets' in result.output

    def test_query(self, config_file, socket_dir, admin_socket_server):
        path = os.path.join(socket_dir, 'ceph-osd.1.asok')
        server = admin_socket_server(path, [frame_json({'fragmentation_rating': 0.5})])

        result = run('--config', config_file, 'query', path, 'perf', 'dump', '--format', 'json')

        assert result.exit_code == 0
        assert json.loads(result.output) == {'fragmentation_rating': 0.5}
        assert server.requests == [b'{"prefix":"perf dump","format":"json"}\x00']

    def test_query_missing_socket(self, config_file, socket_dir):
        path = os.path.join(socket_dir, 'ceph-osd.1.asok')

        result = run('--config', config_file, 'query', path, 'perf', 'dump')

        assert result.exit_code == 1
        assert 'connect failed' in result.output

    def test_scrape(self, config_file, socket_dir, admin_socket_server):
        admin_socket_server(os.path.join(socket_dir, 'ceph-osd.2.asok'),
                            [frame_json({'fragmentation_rating': 0.2})])
        open(os.path.join(socket_dir, 'ceph-osd.3.asok'), 'w').close()

        result = run('--config', config_file, 'scrape')

        assert result.exit_code == 0
        assert 'ceph_osd_fragmentation_rating{osd="2"} 0.2' in result.output
        assert 'osd="3"' not in result.output

    def test_check_passes(self, config_file, socket_dir):
        open(os.path.join(socket_dir, 'ceph-osd.1.asok'), 'w').close()

        result = run('--config', config_file, 'check')

        assert result.exit_code == 0
        assert 'All prerequisites met' in result.output

    def test_check_fails_without_sockets(self, config_file):
        result = run('--config', config_file, 'check')

        assert result.exit_code == 1
        assert '✗ OSD admin sockets found' in result.output

    def test_invalid_config(self, tmp_path):
        config_file = tmp_path / 'broken.yaml'
        config_file.write_text('ceph: [unclosed\n')

        result = run('--config', str(config_file), 'discover')

        assert result.exit_code == 1
        assert 'Error:' in result.output
