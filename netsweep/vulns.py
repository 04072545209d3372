#!/usr/bin/env python3
"""
Heuristic vulnerability assessment

Each rule is a plain function taking an immutable HostSnapshot and yielding
zero or more Findings. Rules are registered with the ``@rule`` decorator and
evaluated independently, so they can be tested one at a time and the
catalogue can be swapped out by passing a different rule list.
"""

import re
from typing import Callable, Iterable, List, Optional, Sequence, Tuple
from dataclasses import dataclass

from .models import Finding, Host, OpenPort, Severity


@dataclass(frozen=True)
class HostSnapshot:
    """Read-only view of one host's observed state"""
    ip: str
    os_guess: str
    ports: Tuple[OpenPort, ...]

    @classmethod
    def from_host(cls, host: Host) -> 'HostSnapshot':
        return cls(ip=host.ip, os_guess=host.os_guess, ports=tuple(host.open_ports))

    @property
    def port_numbers(self) -> frozenset:
        return frozenset(p.port for p in self.ports)

    def get(self, port: int) -> Optional[OpenPort]:
        for p in self.ports:
            if p.port == port:
                return p
        return None

    def with_banner(self) -> List[OpenPort]:
        return [p for p in self.ports if p.banner]


Rule = Callable[[HostSnapshot], Iterable[Finding]]

RULES: List[Rule] = []


def rule(func: Rule) -> Rule:
    """Register a rule in the default catalogue"""
    RULES.append(func)
    return func


HTTP_PORTS = {80, 8000, 8080, 8888, 9000}
HTTPS_PORTS = {443, 8443}


@rule
def telnet_exposed(host: HostSnapshot) -> Iterable[Finding]:
    if 23 in host.port_numbers:
        yield Finding(
            severity=Severity.CRITICAL,
            type='Unencrypted Remote Access',
            description='Telnet is enabled; credentials and sessions travel in cleartext',
            port=23,
            remediation='Disable Telnet and use SSH for remote administration',
            impact='Credential theft and full session hijacking on the local network',
        )


@rule
def ftp_cleartext(host: HostSnapshot) -> Iterable[Finding]:
    ftp = host.get(21)
    if ftp is None:
        return
    yield Finding(
        severity=Severity.HIGH,
        type='Unencrypted File Transfer',
        description='FTP transmits credentials and data in cleartext',
        port=21,
        remediation='Replace FTP with SFTP or FTPS, or disable it',
        impact='Credentials and transferred files can be sniffed',
    )
    if 'vsftpd 2.3.4' in ftp.banner.lower():
        yield Finding(
            severity=Severity.CRITICAL,
            type='Backdoored Software',
            description='vsftpd 2.3.4 shipped with a known command-execution backdoor',
            port=21,
            cve=('CVE-2011-2523',),
            remediation='Upgrade vsftpd immediately and audit the host for compromise',
            impact='Unauthenticated remote root shell',
        )


_OPENSSH_VERSION = re.compile(r'openssh[_-](\d+)\.(\d+)')


@rule
def weak_ssh(host: HostSnapshot) -> Iterable[Finding]:
    for p in host.with_banner():
        banner = p.banner.lower()
        if not banner.startswith('ssh-'):
            continue
        if banner.startswith('ssh-1.'):
            yield Finding(
                severity=Severity.HIGH,
                type='Weak Protocol Version',
                description='SSH server still accepts protocol version 1',
                port=p.port,
                remediation='Disable SSHv1 (Protocol 2 only) in sshd_config',
                impact='SSHv1 sessions can be decrypted or hijacked',
            )
        match = _OPENSSH_VERSION.search(banner)
        if match and int(match.group(1)) < 7:
            yield Finding(
                severity=Severity.MEDIUM,
                type='Outdated Software',
                description=f"Outdated OpenSSH {match.group(1)}.{match.group(2)} detected",
                port=p.port,
                remediation='Upgrade OpenSSH to a supported release',
                impact='Exposure to published OpenSSH vulnerabilities',
            )


@rule
def smb_exposed(host: HostSnapshot) -> Iterable[Finding]:
    ports = host.port_numbers
    if 445 in ports:
        yield Finding(
            severity=Severity.HIGH,
            type='Exposed File Sharing',
            description='SMB is reachable; historically a major wormable attack vector',
            port=445,
            cve=('CVE-2017-0144', 'CVE-2020-0796'),
            remediation='Restrict SMB to trusted hosts, disable SMBv1 and apply patches',
            impact='Remote code execution on unpatched systems (EternalBlue, SMBGhost)',
        )
    if 139 in ports:
        yield Finding(
            severity=Severity.MEDIUM,
            type='Information Disclosure',
            description='NetBIOS session service exposes host and share information',
            port=139,
            remediation='Disable NetBIOS over TCP/IP where it is not needed',
        )


@rule
def remote_desktop_exposed(host: HostSnapshot) -> Iterable[Finding]:
    ports = host.port_numbers
    if 3389 in ports:
        yield Finding(
            severity=Severity.HIGH,
            type='Exposed Remote Desktop',
            description='RDP is reachable from the network',
            port=3389,
            cve=('CVE-2019-0708',),
            remediation='Put RDP behind a VPN, enable NLA and keep the host patched',
            impact='Brute force and pre-auth RCE on unpatched hosts (BlueKeep)',
        )
    if 5900 in ports:
        yield Finding(
            severity=Severity.HIGH,
            type='Exposed Remote Desktop',
            description='VNC is reachable; many deployments use weak or no passwords',
            port=5900,
            remediation='Require strong authentication and tunnel VNC over SSH or VPN',
            impact='Full interactive control of the desktop',
        )


# Data stores that commonly ship without authentication enabled
UNAUTHENTICATED_DATABASES = {6379: 'Redis', 27017: 'MongoDB'}
DATABASES = {3306: 'MySQL', 5432: 'PostgreSQL', 1433: 'MSSQL', 1521: 'Oracle', 50000: 'DB2'}


@rule
def database_exposed(host: HostSnapshot) -> Iterable[Finding]:
    for p in host.ports:
        if p.port in UNAUTHENTICATED_DATABASES:
            name = UNAUTHENTICATED_DATABASES[p.port]
            yield Finding(
                severity=Severity.CRITICAL,
                type='Unauthenticated Database',
                description=f"{name} is reachable and frequently runs without authentication",
                port=p.port,
                remediation=f"Bind {name} to localhost or enable authentication and firewall the port",
                impact='Data theft, tampering, or code execution via the database',
            )
        elif p.port in DATABASES:
            name = DATABASES[p.port]
            yield Finding(
                severity=Severity.HIGH,
                type='Exposed Database',
                description=f"{name} accepts connections from the network",
                port=p.port,
                remediation=f"Restrict {name} to application hosts with firewall rules",
                impact='Credential brute force and direct data access',
            )


END_OF_LIFE_MARKERS = [
    (re.compile(r'apache/2\.[02]\.'), 'Apache httpd 2.0/2.2'),
    (re.compile(r'nginx/(0\.|1\.(\d|1[0-4])\.)'), 'nginx < 1.15'),
    (re.compile(r'microsoft-iis/[56]\.'), 'Microsoft IIS 5/6'),
    (re.compile(r'php/5\.'), 'PHP 5'),
    (re.compile(r'openssl/(0\.9|1\.0)'), 'OpenSSL 0.9/1.0'),
]


@rule
def end_of_life_software(host: HostSnapshot) -> Iterable[Finding]:
    for p in host.with_banner():
        banner = p.banner.lower()
        for pattern, product in END_OF_LIFE_MARKERS:
            if pattern.search(banner):
                yield Finding(
                    severity=Severity.HIGH,
                    type='End-of-Life Software',
                    description=f"Banner reveals end-of-life {product}",
                    port=p.port,
                    remediation=f"Upgrade {product} to a vendor-supported release",
                    impact='Unpatched vulnerabilities with public exploits',
                )


@rule
def insecure_management(host: HostSnapshot) -> Iterable[Finding]:
    ports = host.port_numbers
    for port, name in ((161, 'SNMP'), (69, 'TFTP')):
        if port in ports:
            yield Finding(
                severity=Severity.MEDIUM,
                type='Insecure Management Protocol',
                description=f"{name} is exposed; it offers little or no authentication",
                port=port,
                remediation=f"Disable {name} or restrict it to a management network",
            )


@rule
def weak_vpn_and_proxy(host: HostSnapshot) -> Iterable[Finding]:
    ports = host.port_numbers
    if 1723 in ports:
        yield Finding(
            severity=Severity.MEDIUM,
            type='Weak VPN Protocol',
            description='PPTP uses MS-CHAPv2, which is cryptographically broken',
            port=1723,
            remediation='Migrate to WireGuard, OpenVPN or IPsec',
        )
    if 1080 in ports:
        yield Finding(
            severity=Severity.MEDIUM,
            type='Open Proxy',
            description='SOCKS proxy is reachable and may relay arbitrary traffic',
            port=1080,
            remediation='Require authentication on the proxy or close the port',
        )


@rule
def cleartext_http(host: HostSnapshot) -> Iterable[Finding]:
    ports = host.port_numbers
    if ports & HTTPS_PORTS:
        return
    for port in sorted(ports & HTTP_PORTS):
        yield Finding(
            severity=Severity.LOW,
            type='Unencrypted Web Service',
            description='Web service offered over HTTP only',
            port=port,
            remediation='Serve the interface over HTTPS and redirect HTTP',
        )


# Cleartext protocols that make harvested credentials reusable over SMB
CLEARTEXT_MANAGEMENT = {21, 23, 80, 161}


@rule
def lateral_movement(host: HostSnapshot) -> Iterable[Finding]:
    ports = host.port_numbers
    if ports & {139, 445} and ports & CLEARTEXT_MANAGEMENT:
        cleartext = ', '.join(str(p) for p in sorted(ports & CLEARTEXT_MANAGEMENT))
        yield Finding(
            severity=Severity.HIGH,
            type='Lateral Movement Risk',
            description=f"SMB exposed alongside unencrypted management ports ({cleartext})",
            remediation='Close the cleartext services and segment file-sharing hosts',
            impact='Sniffed credentials can be replayed against file shares',
        )


@rule
def version_disclosure(host: HostSnapshot) -> Iterable[Finding]:
    for p in host.ports:
        if p.version and not p.version.endswith('detected'):
            yield Finding(
                severity=Severity.LOW,
                type='Information Disclosure',
                description=f"Service banner discloses version: {p.version}",
                port=p.port,
                remediation='Suppress version details in service banners',
            )


LARGE_ATTACK_SURFACE = 20


@rule
def large_attack_surface(host: HostSnapshot) -> Iterable[Finding]:
    if len(host.ports) > LARGE_ATTACK_SURFACE:
        yield Finding(
            severity=Severity.MEDIUM,
            type='Large Attack Surface',
            description=f"{len(host.ports)} open ports detected",
            remediation='Disable unused services and firewall the rest',
        )


def assess_vulnerabilities(host: Host, rules: Optional[Sequence[Rule]] = None) -> List[Finding]:
    """
    Evaluate every rule against one host

    Args:
        host: Host whose port scan has completed
        rules: Rule catalogue (defaults to RULES)

    Returns:
        Findings in rule registration order
    """
    snapshot = HostSnapshot.from_host(host)
    findings: List[Finding] = []
    for check in (RULES if rules is None else rules):
        findings.extend(check(snapshot))
    return findings
