#!/usr/bin/env python3
"""
JSON and HTML report output
"""

import json
from html import escape
from typing import Dict, List
from datetime import datetime

from . import __version__
from .models import Host, NetworkSummary, ScanResult


def report_payload(result: ScanResult) -> Dict:
    """Combined metadata + summary + hosts document"""
    return {
        'metadata': {
            'scan_timestamp': datetime.now().isoformat(),
            'scanner_version': __version__,
        },
        'summary': result.summary.to_dict(),
        'hosts': [h.to_dict() for h in result.hosts],
    }


def save_results(hosts: List[Host], output_file: str):
    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump([h.to_dict() for h in hosts], f, indent=2)


def save_summary(summary: NetworkSummary, output_file: str):
    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump(summary.to_dict(), f, indent=2)


def save_report(result: ScanResult, output_file: str):
    """Single JSON document with metadata, summary and hosts"""
    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump(report_payload(result), f, indent=2)


HTML_STYLE = """
        body { font-family: Arial, sans-serif; margin: 20px; background: #f5f5f5; }
        .container { max-width: 1200px; margin: 0 auto; background: white; padding: 20px; }
        h1 { color: #333; border-bottom: 3px solid #007bff; padding-bottom: 10px; }
        .summary { background: #e9ecef; padding: 15px; border-radius: 5px; margin: 20px 0; }
        .device { border: 1px solid #ddd; margin: 15px 0; padding: 15px; border-radius: 5px; }
        .critical { color: #dc3545; font-weight: bold; }
        .high { color: #fd7e14; font-weight: bold; }
        .medium { color: #ffc107; font-weight: bold; }
        .low { color: #28a745; font-weight: bold; }
        table { width: 100%; border-collapse: collapse; margin: 10px 0; }
        th, td { padding: 8px; text-align: left; border-bottom: 1px solid #ddd; }
        th { background-color: #007bff; color: white; }
"""


def _device_html(index: int, host: Host) -> str:
    title = escape(host.hostname or host.ip)
    html = f"""
        <div class="device">
            <h3>Device #{index}: {title}</h3>
            <p><strong>IP:</strong> {escape(host.ip)} | <strong>MAC:</strong> {escape(host.mac or '-')} | <strong>Vendor:</strong> {escape(host.vendor or '-')} | <strong>OS:</strong> {escape(host.os_guess)}</p>
            <p><strong>Risk Score:</strong> {host.risk_score}/100 | <strong>Open Ports:</strong> {len(host.open_ports)} | <strong>Vulnerabilities:</strong> {len(host.vulnerabilities)}</p>"""

    if host.open_ports:
        html += "\n            <table>\n                <tr><th>Port</th><th>Service</th><th>Version</th></tr>"
        for p in host.open_ports:
            html += f"\n                <tr><td>{p.port}/{p.protocol}</td><td>{escape(p.service)}</td><td>{escape(p.version)}</td></tr>"
        html += "\n            </table>"

    if host.vulnerabilities:
        html += "\n            <table>\n                <tr><th>Severity</th><th>Type</th><th>Description</th><th>CVE</th><th>Remediation</th></tr>"
        for v in host.vulnerabilities:
            sev = v.severity.value
            html += (
                f"\n                <tr><td class=\"{sev.lower()}\">{sev}</td><td>{escape(v.type)}</td>"
                f"<td>{escape(v.description)}</td><td>{escape(', '.join(v.cve))}</td>"
                f"<td>{escape(v.remediation)}</td></tr>"
            )
        html += "\n            </table>"

    return html + "\n        </div>"


def generate_html_report(hosts: List[Host], summary: NetworkSummary, output_file: str):
    html = f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Network Security Scan Report</title>
    <style>{HTML_STYLE}    </style>
</head>
<body>
    <div class="container">
        <h1>Network Security Scan Report</h1>
        <p>Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}</p>

        <div class="summary">
            <h2>Summary</h2>
            <p><strong>Total Devices:</strong> {summary.total_devices}</p>
            <p><strong>Total Open Ports:</strong> {summary.total_open_ports}</p>
            <p><strong>Total Vulnerabilities:</strong> {summary.total_vulnerabilities}</p>
            <p><strong>Critical:</strong> <span class="critical">{summary.critical}</span></p>
            <p><strong>High:</strong> <span class="high">{summary.high}</span></p>
            <p><strong>Medium:</strong> <span class="medium">{summary.medium}</span></p>
            <p><strong>Low:</strong> <span class="low">{summary.low}</span></p>
            <p><strong>Most Vulnerable Device:</strong> {escape(summary.most_vulnerable_device or '-')}</p>
            <p><strong>Network Risk Score:</strong> {summary.network_risk_score}/100</p>
        </div>"""

    for i, host in enumerate(hosts, 1):
        html += _device_html(i, host)

    html += """
    </div>
</body>
</html>
"""

    with open(output_file, 'w', encoding='utf-8') as f:
        f.write(html)
