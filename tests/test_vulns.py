from netsweep.models import Finding, OpenPort, Severity
from netsweep.vulns import (
    RULES,
    HostSnapshot,
    assess_vulnerabilities,
    cleartext_http,
    database_exposed,
    end_of_life_software,
    ftp_cleartext,
    large_attack_surface,
    lateral_movement,
    smb_exposed,
    telnet_exposed,
    version_disclosure,
    weak_ssh,
)

from tests.helpers import make_host


def snapshot(*ports):
    return HostSnapshot.from_host(make_host(ports=ports))


def test_no_open_ports_no_findings():
    assert assess_vulnerabilities(make_host()) == []


def test_every_rule_handles_empty_host():
    empty = snapshot()
    for check in RULES:
        assert list(check(empty)) == []


def test_telnet_is_critical():
    [f] = telnet_exposed(snapshot(23))
    assert f.severity is Severity.CRITICAL
    assert f.port == 23
    assert f.remediation


def test_ftp_and_vsftpd_backdoor():
    findings = list(ftp_cleartext(snapshot(OpenPort(port=21, banner='220 (vsFTPd 2.3.4)'))))
    assert [f.severity for f in findings] == [Severity.HIGH, Severity.CRITICAL]
    assert findings[1].cve == ('CVE-2011-2523',)


def test_legacy_and_outdated_ssh():
    findings = list(weak_ssh(snapshot(OpenPort(port=22, banner='SSH-1.99-OpenSSH_5.3'))))
    assert {f.type for f in findings} == {'Weak Protocol Version', 'Outdated Software'}

    assert list(weak_ssh(snapshot(OpenPort(port=22, banner='SSH-2.0-OpenSSH_9.6')))) == []


def test_ssh_rule_fires_per_port():
    findings = list(weak_ssh(snapshot(
        OpenPort(port=22, banner='SSH-1.5-OpenSSH_7.4'),
        OpenPort(port=2222, banner='SSH-1.5-dropbear'),
    )))
    assert [f.port for f in findings] == [22, 2222]


def test_smb_and_netbios():
    findings = list(smb_exposed(snapshot(139, 445)))
    assert [(f.port, f.severity) for f in findings] == [(445, Severity.HIGH), (139, Severity.MEDIUM)]
    assert 'CVE-2017-0144' in findings[0].cve


def test_databases():
    findings = {f.port: f for f in database_exposed(snapshot(3306, 6379, 27017, 80))}
    assert set(findings) == {3306, 6379, 27017}
    assert findings[6379].severity is Severity.CRITICAL
    assert findings[27017].type == 'Unauthenticated Database'
    assert findings[3306].severity is Severity.HIGH


def test_end_of_life_banners():
    findings = list(end_of_life_software(snapshot(
        OpenPort(port=80, banner='HTTP/1.1 200 OK\r\nServer: Apache/2.2.15 (CentOS)'),
        OpenPort(port=8080, banner='HTTP/1.1 200 OK\r\nServer: nginx/1.10.3'),
        OpenPort(port=8000, banner='HTTP/1.1 200 OK\r\nServer: nginx/1.24.0'),
    )))
    assert [f.port for f in findings] == [80, 8080]
    assert all(f.severity is Severity.HIGH for f in findings)


def test_cleartext_http_only_without_https():
    assert [f.port for f in cleartext_http(snapshot(80, 8080))] == [80, 8080]
    assert list(cleartext_http(snapshot(80, 443))) == []


def test_smb_with_unencrypted_management():
    [f] = lateral_movement(snapshot(445, 23))
    assert f.severity is Severity.HIGH
    assert list(lateral_movement(snapshot(445, 22))) == []


def test_version_disclosure_ignores_placeholders():
    findings = list(version_disclosure(snapshot(
        OpenPort(port=22, version='openssh_8.9'),
        OpenPort(port=3306, version='MySQL detected'),
        OpenPort(port=2222, version='SSH detected'),
    )))
    assert [f.port for f in findings] == [22]


def test_large_attack_surface():
    assert list(large_attack_surface(snapshot(*range(1000, 1020)))) == []
    [f] = large_attack_surface(snapshot(*range(1000, 1021)))
    assert f.severity is Severity.MEDIUM


def test_rules_do_not_mutate_host():
    host = make_host(ports=[OpenPort(port=23), OpenPort(port=445, banner='x')])
    before = [(p.port, p.banner, p.version) for p in host.open_ports]

    findings = assess_vulnerabilities(host)

    assert findings
    assert [(p.port, p.banner, p.version) for p in host.open_ports] == before
    assert host.vulnerabilities == []


def test_assessment_is_deterministic():
    host = make_host(ports=[21, 23, 80, 445, 3389, 6379])
    assert assess_vulnerabilities(host) == assess_vulnerabilities(host)


def test_custom_rule_catalogue():
    def ssh_present(snap):
        if 22 in snap.port_numbers:
            yield Finding(severity=Severity.LOW, type='SSH Present', description='ssh', port=22)

    host = make_host(ports=[22, 23])
    assert [f.type for f in assess_vulnerabilities(host, rules=[ssh_present])] == ['SSH Present']
    assert assess_vulnerabilities(host, rules=[]) == []


def test_windows_host_end_to_end():
    host = make_host(ports=[
        OpenPort(port=135), OpenPort(port=139), OpenPort(port=445),
        OpenPort(port=3389), OpenPort(port=80, banner='Server: Microsoft-IIS/6.0'),
    ])
    types = {f.type for f in assess_vulnerabilities(host)}
    assert {'Exposed File Sharing', 'Exposed Remote Desktop', 'End-of-Life Software',
            'Lateral Movement Risk', 'Unencrypted Web Service'} <= types
