#!/usr/bin/env python3
"""
Data model shared by the scan engine, the classifier and the report layer

Host records are mutated only by the worker scanning that host; once the
scan of a host completes they are treated as read-only.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field, asdict
from datetime import datetime


class Severity(Enum):
    """Finding severity, ordered CRITICAL > HIGH > MEDIUM > LOW"""
    CRITICAL = 'CRITICAL'
    HIGH = 'HIGH'
    MEDIUM = 'MEDIUM'
    LOW = 'LOW'

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __str__(self) -> str:
        return self.value


_SEVERITY_RANK = {
    Severity.CRITICAL: 4,
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}


@dataclass(frozen=True)
class Finding:
    """A single heuristic security observation about one host"""
    severity: Severity
    type: str
    description: str
    port: Optional[int] = None
    cve: Tuple[str, ...] = ()
    remediation: str = ''
    impact: str = ''

    def to_dict(self) -> Dict:
        data = {
            'severity': self.severity.value,
            'type': self.type,
            'description': self.description,
        }
        if self.port is not None:
            data['port'] = self.port
        if self.cve:
            data['cve'] = list(self.cve)
        if self.remediation:
            data['remediation'] = self.remediation
        if self.impact:
            data['impact'] = self.impact
        return data


@dataclass
class OpenPort:
    """An open TCP port; closed and filtered ports are never recorded"""
    port: int
    service: str = 'unknown'
    banner: str = ''
    version: str = ''
    state: str = 'open'
    protocol: str = 'tcp'

    def display_banner(self, limit: int = 70) -> str:
        """Banner capped for display, the full text stays in ``banner``"""
        if len(self.banner) > limit:
            return self.banner[:limit] + '...'
        return self.banner

    def to_dict(self) -> Dict:
        data = asdict(self)
        if not self.version:
            del data['version']
        return data


@dataclass
class Host:
    """A discovered live host and everything learned about it"""
    ip: str
    ip_version: str = 'IPv4'
    latency_ms: float = 0.0
    hostname: str = ''
    mac: str = ''
    vendor: str = ''
    os_guess: str = ''
    open_ports: List[OpenPort] = field(default_factory=list)
    vulnerabilities: List[Finding] = field(default_factory=list)
    last_seen: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def latency(self) -> str:
        return f"{self.latency_ms:.2f}ms"

    @property
    def risk_score(self) -> int:
        from .risk import host_risk_score
        return host_risk_score(self.vulnerabilities)

    @property
    def findings_by_severity(self) -> Dict[str, int]:
        counts = {s.value: 0 for s in Severity}
        for finding in self.vulnerabilities:
            counts[finding.severity.value] += 1
        return counts

    def to_dict(self) -> Dict:
        return {
            'ip': self.ip,
            'ip_version': self.ip_version,
            'hostname': self.hostname,
            'mac': self.mac,
            'vendor': self.vendor,
            'os_guess': self.os_guess,
            'latency': self.latency,
            'last_seen': self.last_seen,
            'risk_score': self.risk_score,
            'open_ports': [p.to_dict() for p in self.open_ports],
            'vulnerabilities': [v.to_dict() for v in self.vulnerabilities],
        }


@dataclass
class NetworkSummary:
    """Aggregate view over every scanned host, computed once per run"""
    total_devices: int = 0
    total_open_ports: int = 0
    total_vulnerabilities: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    vulnerabilities_by_type: Dict[str, int] = field(default_factory=dict)
    most_vulnerable_device: str = ''
    network_risk_score: int = 0
    scan_duration: float = 0.0

    def to_dict(self) -> Dict:
        data = asdict(self)
        # severity counts are published as <severity>_vulnerabilities
        for severity in ('critical', 'high', 'medium', 'low'):
            data[f"{severity}_vulnerabilities"] = data.pop(severity)
        data['scan_duration'] = round(self.scan_duration, 3)
        return data


@dataclass
class ScanResult:
    """Final output of a run: hosts sorted by descending risk, plus summary"""
    hosts: List[Host]
    summary: NetworkSummary
