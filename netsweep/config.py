#!/usr/bin/env python3
"""
Scan configuration and port-list parsing
"""

from typing import List, Optional
from dataclasses import dataclass, field

from .errors import PortSpecError, check_concurrency
from .scanner import ALL_PORTS, COMMON_PORTS


@dataclass
class ScanConfig:
    """Everything a run needs; built by the CLI and handed to the engine"""
    cidr: str = ''
    ports: List[int] = field(default_factory=lambda: list(COMMON_PORTS))
    grab_banner: bool = True
    verbose: bool = False
    discovery_concurrency: int = 100
    port_concurrency: int = 50
    connect_timeout: float = 0.5
    echo_timeout: float = 1.0
    port_timeout: float = 2.0
    banner_timeout: float = 3.0
    online_vendor: bool = False
    output: str = 'scan_results.json'
    summary_output: str = 'scan_summary.json'
    html_output: Optional[str] = None
    report_output: Optional[str] = None

    def __post_init__(self):
        check_concurrency('discovery_concurrency', self.discovery_concurrency)
        check_concurrency('port_concurrency', self.port_concurrency)


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError as e:
        raise PortSpecError(f"invalid port '{value}'") from e
    if not 1 <= port <= 65535:
        raise PortSpecError(f"port {port} out of range 1-65535")
    return port


def parse_port_spec(port_range: str) -> List[int]:
    """
    Parse port range specification

    Args:
        port_range: 'common', 'all', or a list like '22,80,8000-8100'

    Returns:
        Sorted, de-duplicated list of ports

    Raises:
        PortSpecError: on malformed entries or ports outside 1-65535
    """
    spec = (port_range or '').strip().lower()
    if spec == 'common':
        return list(COMMON_PORTS)
    if spec == 'all':
        return list(ALL_PORTS)
    if not spec:
        raise PortSpecError("empty port specification")

    ports = set()
    for part in spec.split(','):
        part = part.strip()
        if not part:
            continue
        if '-' in part:
            start_s, _, end_s = part.partition('-')
            start, end = _port(start_s.strip()), _port(end_s.strip())
            if start > end:
                raise PortSpecError(f"descending port range '{part}'")
            ports.update(range(start, end + 1))
        else:
            ports.add(_port(part))

    if not ports:
        raise PortSpecError(f"no ports in '{port_range}'")
    return sorted(ports)
