#!/usr/bin/env python3
"""
Rich console rendering: banner, progress, per-host result trees, summary
and recommendations. Also owns logging setup so log lines and progress bars
share one console.
"""

import os
import logging
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import (
    Progress,
    SpinnerColumn,
    BarColumn,
    TextColumn,
    MofNCompleteColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.table import Table
from rich.text import Text
from rich.tree import Tree
from rich import box

from .models import Finding, Host, NetworkSummary, Severity
from .risk import risk_level

console = Console()

SEVERITY_STYLES = {
    Severity.CRITICAL: 'bold red',
    Severity.HIGH: 'bold dark_orange',
    Severity.MEDIUM: 'bold yellow',
    Severity.LOW: 'bold green',
}

RISK_STYLES = {
    'CRITICAL': 'bold red',
    'HIGH': 'bold dark_orange',
    'MEDIUM': 'bold yellow',
    'LOW': 'green',
    'MINIMAL': 'bright_green',
}


def configure_logging(verbose: bool = False):
    """Route all logging through a RichHandler on the shared console"""
    if os.environ.get('NETSWEEP_DEBUG') == '1':
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(console=console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter('%(message)s'))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def severity_style(severity: Severity) -> str:
    return SEVERITY_STYLES.get(severity, 'white')


def risk_label(score: int) -> Text:
    level = risk_level(score)
    return Text(level, style=RISK_STYLES[level])


def by_severity(findings: List[Finding]) -> List[Finding]:
    """Most severe first; ties keep rule order"""
    return sorted(findings, key=lambda f: f.severity.rank, reverse=True)


def scan_progress() -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        TimeRemainingColumn(),
        console=console,
        transient=True,
    )


def print_banner():
    title = Text()
    title.append("netsweep", style="bold bright_cyan")
    title.append("  network security scanner\n", style="bold bright_white")
    title.append("Device discovery • Port & service fingerprinting • Risk scoring", style="dim")
    console.print(Panel(title, box=box.HEAVY, border_style="bright_cyan", expand=False))


def _host_tree(index: int, host: Host, verbose: bool) -> Tree:
    score = host.risk_score
    header = Text.assemble(
        (f"Device #{index} ", "bold"),
        (host.ip, "bold bright_white"),
        f"  risk {score}/100 ",
        risk_label(score),
    )
    tree = Tree(header)

    details = Table.grid(padding=(0, 2))
    details.add_column(style="cyan", justify="right")
    details.add_column()
    details.add_row("IP Address:", f"{host.ip} ({host.ip_version})")
    details.add_row("MAC Address:", host.mac or "-")
    details.add_row("Hostname:", host.hostname or "-")
    details.add_row("Vendor:", host.vendor or "-")
    details.add_row("OS Guess:", host.os_guess or "-")
    details.add_row("Latency:", host.latency)
    tree.add(details)

    if host.open_ports:
        ports = tree.add(f"[bold]Open Ports:[/bold] {len(host.open_ports)}")
        for port in host.open_ports:
            node = ports.add(f"{port.port}/{port.protocol} ({port.service})")
            if verbose and port.banner:
                node.add(Text(f"Banner: {port.display_banner()}", style="dim"))
            if port.version:
                node.add(Text(f"Version: {port.version}", style="bright_magenta"))
    else:
        tree.add("[bold]Open Ports:[/bold] none detected")

    if host.vulnerabilities:
        counts = ", ".join(f"{n} {sev.lower()}" for sev, n in host.findings_by_severity.items() if n)
        vulns = tree.add(f"[bold]Vulnerabilities:[/bold] {len(host.vulnerabilities)} ({counts})")
        for finding in by_severity(host.vulnerabilities):
            node = vulns.add(Text.assemble(
                (f"[{finding.severity.value}] ", severity_style(finding.severity)),
                finding.type,
            ))
            node.add(Text(finding.description))
            if finding.cve:
                node.add(Text(f"CVE: {', '.join(finding.cve)}", style="bright_red"))
            if verbose and finding.remediation:
                node.add(Text(f"Fix: {finding.remediation}", style="green"))
    else:
        tree.add("[bold]Vulnerabilities:[/bold] [green]none detected[/green]")

    return tree


def display_results(hosts: List[Host], verbose: bool = False):
    console.rule("[bold]SCAN RESULTS")
    for i, host in enumerate(hosts, 1):
        console.print(_host_tree(i, host, verbose))
        console.print()


def print_summary(summary: NetworkSummary):
    table = Table(show_header=False, box=box.ROUNDED, padding=(0, 2))
    table.add_column(style="cyan")
    table.add_column(justify="right")

    table.add_row("Total Devices Found", str(summary.total_devices))
    table.add_row("Total Open Ports", str(summary.total_open_ports))
    table.add_row("Total Vulnerabilities", str(summary.total_vulnerabilities))
    table.add_row("  Critical", Text(str(summary.critical), style=SEVERITY_STYLES[Severity.CRITICAL]))
    table.add_row("  High", Text(str(summary.high), style=SEVERITY_STYLES[Severity.HIGH]))
    table.add_row("  Medium", Text(str(summary.medium), style=SEVERITY_STYLES[Severity.MEDIUM]))
    table.add_row("  Low", Text(str(summary.low), style=SEVERITY_STYLES[Severity.LOW]))
    table.add_row("Most Vulnerable Device", summary.most_vulnerable_device or "-")
    table.add_row(
        "Network Risk Score",
        Text.assemble(f"{summary.network_risk_score}/100 ", risk_label(summary.network_risk_score)),
    )
    table.add_row("Scan Duration", f"{summary.scan_duration:.1f}s")

    console.print(Panel(table, title="[bold]NETWORK SECURITY SUMMARY", border_style="bright_cyan", expand=False))


def print_recommendations(hosts: List[Host], limit: int = 5):
    console.rule("[bold]TOP PRIORITY RECOMMENDATIONS")
    shown = 0
    for host in hosts:
        for finding in host.vulnerabilities:
            if finding.severity is not Severity.CRITICAL or shown >= limit:
                continue
            name = f" ({host.hostname})" if host.hostname else ""
            console.print(f"\n[bold red]CRITICAL[/bold red] - {host.ip}{name}")
            console.print(f"   Issue: {finding.description}")
            console.print(f"   Fix: {finding.remediation}")
            shown += 1

    if shown == 0:
        console.print("\n[green]No critical vulnerabilities found![/green]")
    console.print()


def print_error(message: str, hint: Optional[str] = None):
    console.print(f"[bold red]✗ Error:[/bold red] {message}")
    if hint:
        console.print(hint)
