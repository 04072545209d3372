#!/usr/bin/env python3
"""
Risk scoring for single hosts and for the whole scanned network

Both scores are pure functions of the finding multiset, clamped to 0-100.
"""

from collections import Counter
from typing import Iterable, List, Sequence

from .models import Finding, Host, NetworkSummary, Severity

MAX_SCORE = 100

# Per-host weights
HOST_CRITICAL_PENALTY = 40
HOST_WEIGHTS = {
    Severity.CRITICAL: 10,  # each critical beyond the first
    Severity.HIGH: 10,
    Severity.MEDIUM: 5,
    Severity.LOW: 2,
}

# Network-wide weights
NETWORK_CRITICAL_PENALTY = 40
NETWORK_WEIGHTS = {
    Severity.HIGH: 5,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}


def _clamp(score: int) -> int:
    return max(0, min(MAX_SCORE, score))


def severity_counts(findings: Iterable[Finding]) -> Counter:
    return Counter(f.severity for f in findings)


def host_risk_score(findings: Iterable[Finding]) -> int:
    """
    Risk score for one host

    A critical finding dominates with a fixed penalty; every further finding
    adds a smaller increment by severity.
    """
    counts = severity_counts(findings)
    score = 0
    if counts[Severity.CRITICAL]:
        score += HOST_CRITICAL_PENALTY
        score += (counts[Severity.CRITICAL] - 1) * HOST_WEIGHTS[Severity.CRITICAL]
    for severity in (Severity.HIGH, Severity.MEDIUM, Severity.LOW):
        score += counts[severity] * HOST_WEIGHTS[severity]
    return _clamp(score)


def network_risk_score(findings: Iterable[Finding]) -> int:
    """40 if any critical, plus 5 per high, 2 per medium, 1 per low; capped at 100"""
    counts = severity_counts(findings)
    score = NETWORK_CRITICAL_PENALTY if counts[Severity.CRITICAL] else 0
    for severity, weight in NETWORK_WEIGHTS.items():
        score += counts[severity] * weight
    return _clamp(score)


def build_summary(hosts: Sequence[Host], duration: float) -> NetworkSummary:
    """
    Aggregate every host's ports and findings into a NetworkSummary

    Args:
        hosts: Hosts in first-seen order (ties for most vulnerable go to the earliest)
        duration: Wall-clock scan time in seconds
    """
    summary = NetworkSummary(total_devices=len(hosts), scan_duration=duration)
    all_findings: List[Finding] = []
    max_vulns = 0

    for host in hosts:
        summary.total_open_ports += len(host.open_ports)
        if len(host.vulnerabilities) > max_vulns:
            max_vulns = len(host.vulnerabilities)
            summary.most_vulnerable_device = host.ip

        for finding in host.vulnerabilities:
            all_findings.append(finding)
            summary.vulnerabilities_by_type[finding.type] = summary.vulnerabilities_by_type.get(finding.type, 0) + 1

    counts = severity_counts(all_findings)
    summary.total_vulnerabilities = len(all_findings)
    summary.critical = counts[Severity.CRITICAL]
    summary.high = counts[Severity.HIGH]
    summary.medium = counts[Severity.MEDIUM]
    summary.low = counts[Severity.LOW]
    summary.network_risk_score = network_risk_score(all_findings)
    return summary


def risk_level(score: int) -> str:
    if score >= 80:
        return 'CRITICAL'
    elif score >= 60:
        return 'HIGH'
    elif score >= 40:
        return 'MEDIUM'
    elif score >= 20:
        return 'LOW'
    return 'MINIMAL'
