"""
netsweep - Network Security Scanner

Sweeps an address range for live hosts, probes their TCP services, grabs
banners for coarse version fingerprinting, and scores every host (and the
network as a whole) from heuristic security findings.

Modules:
- addresses: IPv4/IPv6 range parsing and enumeration
- discovery: TCP/ICMP liveness probing and bounded discovery sweep
- scanner: Async port scanner with banner grabbing
- fingerprint: Version extraction and OS guessing
- vulns: Heuristic vulnerability rules
- risk: Per-host and network risk scoring
- engine: End-to-end scan orchestration
- netinfo: Hostname, MAC and vendor enrichment
- report / console / cli: Output and command line
"""

__version__ = "1.0.0"

from .addresses import AddressRange, parse_range
from .discovery import DeviceDiscovery, LivenessProber
from .engine import NetworkScanner, run_scan
from .errors import ConfigError, NetsweepError, PortSpecError, RangeError
from .models import Finding, Host, NetworkSummary, OpenPort, ScanResult, Severity
from .scanner import AsyncPortScanner, COMMON_PORTS

__all__ = [
    'AddressRange',
    'parse_range',
    'DeviceDiscovery',
    'LivenessProber',
    'NetworkScanner',
    'run_scan',
    'ConfigError',
    'NetsweepError',
    'PortSpecError',
    'RangeError',
    'Finding',
    'Host',
    'NetworkSummary',
    'OpenPort',
    'ScanResult',
    'Severity',
    'AsyncPortScanner',
    'COMMON_PORTS',
]
