#!/usr/bin/env python3
"""
Host enrichment helpers: local network detection, reverse DNS, MAC address
from the neighbour table, and OUI vendor lookup.

All functions here block and are run in an executor by the scan engine.
A missing value is returned as an empty string, never raised.
"""

import re
import sys
import socket
import logging
import ipaddress
import subprocess
from types import MappingProxyType

import requests

logger = logging.getLogger(__name__)

MAC_RE = re.compile(r'([0-9A-Fa-f]{2}[:-]){5}([0-9A-Fa-f]{2})')

OUI_VENDORS = MappingProxyType({
    '00:50:56': 'VMware',
    '08:00:27': 'Oracle VirtualBox',
    '52:54:00': 'QEMU Virtual NIC',
    '52:55:0A': 'QEMU/KVM',
    '00:0C:29': 'VMware',
    '00:1B:21': 'Intel Corporation',
    '00:1C:42': 'Parallels',
    '00:15:5D': 'Microsoft Hyper-V',
    'B8:27:EB': 'Raspberry Pi Foundation',
    'DC:A6:32': 'Raspberry Pi Trading',
    '00:11:22': 'Cimsys Inc',
    '00:1A:A0': 'Dell Inc',
    '00:1B:63': 'Apple Inc',
    '00:50:F2': 'Microsoft Corporation',
    '00:E0:4C': 'Realtek',
    'D8:BB:C1': 'Hewlett Packard',
    'F0:DE:F1': 'ASUSTek Computer',
    '00:03:93': 'Apple Inc',
    '00:0D:93': 'Apple Inc',
})

MAC_VENDOR_API = 'https://api.macvendors.com'


def get_local_network_cidr() -> str:
    """
    Best guess at the local private /24

    A connected UDP socket reveals the source address the kernel would use;
    no packet is sent.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.connect(('10.255.255.255', 1))
        local_ip = sock.getsockname()[0]
    except OSError as e:
        logger.debug("could not determine local address: %s", e)
        return ''
    finally:
        sock.close()

    addr = ipaddress.IPv4Address(local_ip)
    if not addr.is_private or addr.is_loopback:
        return ''
    return str(ipaddress.IPv4Network(f"{local_ip}/24", strict=False))


def resolve_hostname(ip: str) -> str:
    """Reverse DNS lookup, '' when the address has no PTR record"""
    try:
        name = socket.gethostbyaddr(ip)[0]
    except (socket.herror, socket.gaierror, OSError):
        return ''
    return name.rstrip('.')


def get_mac_address(ip: str) -> str:
    """Read the MAC for ``ip`` from the ARP/neighbour table"""
    if sys.platform.startswith('win'):
        cmd = ['arp', '-a', ip]
    else:
        cmd = ['arp', '-n', ip]

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=5)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("arp lookup failed for %s: %s", ip, e)
        return ''

    if result.returncode != 0:
        return ''
    match = MAC_RE.search(result.stdout)
    return match.group(0).upper().replace('-', ':') if match else ''


def _oui(mac: str) -> str:
    return mac.upper().replace('-', ':')[:8]


def lookup_vendor(mac: str) -> str:
    """Vendor for a MAC from the static OUI table"""
    if not mac:
        return ''
    return OUI_VENDORS.get(_oui(mac), 'Unknown')


def lookup_vendor_online(mac: str, timeout: float = 5.0) -> str:
    """
    Vendor for a MAC via the macvendors.com API, static table first

    Args:
        mac: MAC address
        timeout: HTTP timeout in seconds

    Returns:
        Vendor name, 'Unknown' if the lookup fails
    """
    vendor = lookup_vendor(mac)
    if vendor != 'Unknown':
        return vendor

    try:
        response = requests.get(f"{MAC_VENDOR_API}/{_oui(mac)}", timeout=timeout)
        response.raise_for_status()
        return response.text.strip() or 'Unknown'
    except requests.RequestException as e:
        logger.debug("online vendor lookup failed for %s: %s", mac, e)
        return 'Unknown'
