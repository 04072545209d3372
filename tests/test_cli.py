import json
import logging

import pytest

from netsweep import cli
from netsweep.models import Finding, OpenPort, ScanResult, Severity
from netsweep.risk import build_summary
from netsweep.scanner import COMMON_PORTS

from tests.helpers import make_host


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class FakeNetworkScanner:
    """Stands in for the engine, returning a canned result"""

    hosts = []
    instances = []

    def __init__(self, config):
        self.config = config
        self.on_discovery_progress = None
        self.on_port_scan_start = None
        self.on_host_scanned = None
        FakeNetworkScanner.instances.append(self)

    async def run(self, addresses):
        self.addresses = list(addresses)
        for _ in self.addresses:
            self.on_discovery_progress()
        self.on_port_scan_start(self.hosts)
        for host in self.hosts:
            self.on_host_scanned(host)
        return ScanResult(hosts=list(self.hosts), summary=build_summary(self.hosts, 0.5))


@pytest.fixture
def fake_engine(monkeypatch):
    FakeNetworkScanner.hosts = []
    FakeNetworkScanner.instances = []
    monkeypatch.setattr(cli, 'NetworkScanner', FakeNetworkScanner)
    return FakeNetworkScanner


def test_parser_defaults():
    args = cli.build_parser().parse_args([])
    assert args.cidr == ''
    assert args.output == 'scan_results.json'
    assert args.summary_output == 'scan_summary.json'
    assert args.ports == 'common'
    assert args.html is None
    assert args.concurrency == 100
    assert args.port_concurrency == 50
    assert not (args.quick or args.deep or args.verbose or args.online_vendor)


def test_html_flag_optional_filename():
    parser = cli.build_parser()
    assert parser.parse_args(['--html']).html == 'scan_report.html'
    assert parser.parse_args(['--html', 'out.html']).html == 'out.html'


def test_config_from_args():
    args = cli.build_parser().parse_args([
        '--cidr', '10.0.0.0/28', '--quick', '-v', '-p', '22,80-82',
        '--concurrency', '20', '--port-concurrency', '5', '--online-vendor',
    ])
    config = cli.config_from_args(args)

    assert config.cidr == '10.0.0.0/28'
    assert config.ports == [22, 80, 81, 82]
    assert config.grab_banner is False
    assert config.verbose is True
    assert config.discovery_concurrency == 20
    assert config.port_concurrency == 5
    assert config.online_vendor is True


def test_deep_overrides_port_list():
    config = cli.config_from_args(cli.build_parser().parse_args(['--deep', '-p', '22']))
    assert len(config.ports) == 65535


def test_default_ports_are_common():
    config = cli.config_from_args(cli.build_parser().parse_args([]))
    assert config.ports == list(COMMON_PORTS)


def test_invalid_cidr_exits_with_error(fake_engine):
    assert cli.main(['--cidr', '10.0.0.300/24']) == 1
    assert fake_engine.instances == []


def test_invalid_port_spec_exits_with_error(fake_engine):
    assert cli.main(['--cidr', '10.0.0.0/30', '-p', '99999']) == 1
    assert fake_engine.instances == []


def test_undetectable_network_exits_with_error(fake_engine, monkeypatch):
    monkeypatch.setattr(cli, 'get_local_network_cidr', lambda: '')
    assert cli.main([]) == 1


def test_no_devices_found(fake_engine, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert cli.main(['--cidr', '192.0.2.0/30']) == 0

    [engine] = fake_engine.instances
    assert [str(a) for a in engine.addresses] == ['192.0.2.0', '192.0.2.1', '192.0.2.2', '192.0.2.3']
    assert engine.config.cidr == '192.0.2.0/30'
    assert not (tmp_path / 'scan_results.json').exists()


def test_auto_detected_network(fake_engine, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, 'get_local_network_cidr', lambda: '192.168.7.0/30')

    assert cli.main([]) == 0
    assert fake_engine.instances[0].config.cidr == '192.168.7.0/30'


def test_full_run_writes_reports(fake_engine, tmp_path):
    host = make_host('10.0.0.2', ports=[OpenPort(port=23, service='Telnet')], findings=[
        Finding(severity=Severity.CRITICAL, type='Unencrypted Remote Access',
                description='Telnet is enabled', port=23, remediation='Disable Telnet'),
    ])
    fake_engine.hosts = [host]

    results = tmp_path / 'results.json'
    summary = tmp_path / 'summary.json'
    report = tmp_path / 'report.html'

    code = cli.main([
        '--cidr', '10.0.0.0/30', '-v',
        '-o', str(results), '--summary-output', str(summary), '--html', str(report),
    ])

    assert code == 0
    assert json.loads(results.read_text())[0]['ip'] == '10.0.0.2'
    assert json.loads(summary.read_text())['critical_vulnerabilities'] == 1
    assert 'Unencrypted Remote Access' in report.read_text()


def test_unwritable_report_is_not_fatal(fake_engine, tmp_path):
    fake_engine.hosts = [make_host('10.0.0.2', ports=[22])]
    missing_dir = tmp_path / 'nope' / 'results.json'

    code = cli.main(['--cidr', '10.0.0.0/30', '-o', str(missing_dir),
                     '--summary-output', str(tmp_path / 'summary.json')])

    assert code == 0
    assert (tmp_path / 'summary.json').exists()


def test_interrupt_exits_130(fake_engine, monkeypatch):
    def interrupted(config, address_range):
        raise KeyboardInterrupt

    monkeypatch.setattr(cli, '_run', interrupted)
    assert cli.main(['--cidr', '10.0.0.0/30']) == 130


@pytest.mark.parametrize('flag', ['--concurrency', '--port-concurrency'])
@pytest.mark.parametrize('value', ['0', '-2'])
def test_unusable_concurrency_exits_with_error(fake_engine, flag, value):
    assert cli.main(['--cidr', '10.0.0.0/30', flag, value]) == 1
    assert fake_engine.instances == []


def test_combined_report(fake_engine, tmp_path):
    fake_engine.hosts = [make_host('10.0.0.2', ports=[22])]
    combined = tmp_path / 'combined.json'

    code = cli.main(['--cidr', '10.0.0.0/30', '-o', str(tmp_path / 'r.json'),
                     '--summary-output', str(tmp_path / 's.json'), '--report', str(combined)])

    assert code == 0
    data = json.loads(combined.read_text())
    assert set(data) == {'metadata', 'summary', 'hosts'}
    assert data['hosts'][0]['ip'] == '10.0.0.2'
    assert data['summary']['total_devices'] == 1
