#!/usr/bin/env python3
"""
Coarse service version and OS fingerprinting from banners and port signatures
"""

from typing import Iterable

from .models import OpenPort

# Database protocols are confirmed by port plus a successful connect alone
DATABASE_MARKERS = {
    3306: 'MySQL detected',
    5432: 'PostgreSQL detected',
}

OPENSSH_SPAN = 20
HTTP_SERVER_SPAN = 15
FTP_SPAN = 50


def _anchored(text: str, marker: str, span: int) -> str:
    """Up to ``span`` chars starting at ``marker``, cut at the first whitespace"""
    idx = text.find(marker)
    if idx == -1:
        return ''
    return text[idx:idx + span].split()[0]


def extract_version(banner: str, port: int) -> str:
    """
    Extract a coarse version string from a service banner

    Args:
        banner: Banner text (may be empty)
        port: Port the banner was read from

    Returns:
        Version string, or '' when no rule matches
    """
    if port in DATABASE_MARKERS:
        return DATABASE_MARKERS[port]

    if not banner:
        return ''

    banner_lower = banner.lower()

    # SSH
    if 'ssh' in banner_lower:
        version = _anchored(banner_lower, 'openssh', OPENSSH_SPAN)
        return version or 'SSH detected'

    # Web servers
    if 'apache' in banner_lower:
        version = _anchored(banner_lower, 'apache/', HTTP_SERVER_SPAN)
        if version:
            return version

    if 'nginx' in banner_lower:
        version = _anchored(banner_lower, 'nginx/', HTTP_SERVER_SPAN)
        if version:
            return version

    # FTP greets with its product line
    if port == 21 and 'ftp' in banner_lower:
        return banner_lower[:FTP_SPAN]

    return ''


# Banner markers checked before falling back to port signatures
OS_BANNER_MARKERS = [
    (('windows', 'microsoft'), 'Windows'),
    (('ubuntu',), 'Linux (Ubuntu)'),
    (('debian',), 'Linux (Debian)'),
    (('centos', 'red hat', 'rhel', 'fedora'), 'Linux (Red Hat family)'),
    (('freebsd',), 'FreeBSD'),
    (('darwin', 'mac os'), 'macOS'),
]

WINDOWS_PORTS = {135, 139, 445, 3389}
APPLE_PORTS = {548, 62078}
PRINTER_PORTS = {515, 631, 9100}


def guess_os(open_ports: Iterable[OpenPort]) -> str:
    """
    Guess the operating system from banners, then from the open port set

    Args:
        open_ports: OpenPort records for one host

    Returns:
        Coarse OS label, 'Unknown' when nothing stands out
    """
    ports = list(open_ports)
    banners = ' '.join(p.banner.lower() for p in ports if p.banner)

    for markers, label in OS_BANNER_MARKERS:
        if any(marker in banners for marker in markers):
            return label

    numbers = {p.port for p in ports}
    if numbers & WINDOWS_PORTS:
        return 'Windows'
    if numbers & APPLE_PORTS:
        return 'macOS/iOS'
    if numbers & PRINTER_PORTS:
        return 'Printer/Embedded'
    if 22 in numbers:
        return 'Linux/Unix'
    if numbers == {23}:
        return 'Network Device/Embedded'
    return 'Unknown'
