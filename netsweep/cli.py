#!/usr/bin/env python3
"""
netsweep command line interface
"""

import sys
import asyncio
import argparse
from typing import List, Optional

from .addresses import parse_range
from .config import ScanConfig, parse_port_spec
from .console import (
    configure_logging,
    console,
    display_results,
    print_banner,
    print_error,
    print_recommendations,
    print_summary,
    scan_progress,
)
from .engine import NetworkScanner
from .errors import NetsweepError
from .netinfo import get_local_network_cidr
from .report import generate_html_report, save_report, save_results, save_summary
from .scanner import ALL_PORTS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='netsweep',
        description='Network security scanner - device discovery, port scanning and risk scoring',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scan the auto-detected local network (common ports)
  %(prog)s

  # Scan a specific subnet with verbose output and an HTML report
  %(prog)s --cidr 192.168.1.0/24 -v --html

  # Quick scan without banner grabbing
  %(prog)s --cidr 10.0.0.0/24 --quick

  # Custom port list
  %(prog)s --cidr 10.0.0.0/28 -p 22,80,443,8000-8100

  # Deep scan of every port (slow!)
  %(prog)s --cidr 10.0.0.5 --deep
        """
    )

    parser.add_argument('--cidr', default='',
                        help='Network CIDR to scan, e.g. 192.168.1.0/24 (default: auto-detect)')
    parser.add_argument('-o', '--output', default='scan_results.json',
                        help='Output JSON file (default: scan_results.json)')
    parser.add_argument('--summary-output', default='scan_summary.json',
                        help='Summary JSON file (default: scan_summary.json)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Verbose output')
    parser.add_argument('--quick', action='store_true',
                        help='Quick scan (skip banner grabbing)')
    parser.add_argument('--deep', action='store_true',
                        help='Deep scan (scan all 65535 ports)')
    parser.add_argument('-p', '--ports', default='common',
                        help="Ports to scan: 'common', 'all', or a list like 22,80,8000-8100")
    parser.add_argument('--html', nargs='?', const='scan_report.html', default=None,
                        metavar='FILE', help='Generate HTML report (default file: scan_report.html)')
    parser.add_argument('--report', default=None, metavar='FILE',
                        help='Also write one combined JSON report (metadata, summary and hosts)')
    parser.add_argument('--concurrency', type=int, default=100,
                        help='Max simultaneous liveness probes (default: 100)')
    parser.add_argument('--port-concurrency', type=int, default=50,
                        help='Max simultaneous port probes per host (default: 50)')
    parser.add_argument('--online-vendor', action='store_true',
                        help='Look up unknown MAC vendors via macvendors.com')
    return parser


def config_from_args(args: argparse.Namespace) -> ScanConfig:
    """Build a ScanConfig; raises PortSpecError on a bad port list"""
    ports = list(ALL_PORTS) if args.deep else parse_port_spec(args.ports)
    return ScanConfig(
        cidr=args.cidr,
        ports=ports,
        grab_banner=not args.quick,
        verbose=args.verbose,
        discovery_concurrency=args.concurrency,
        port_concurrency=args.port_concurrency,
        online_vendor=args.online_vendor,
        output=args.output,
        summary_output=args.summary_output,
        html_output=args.html,
        report_output=args.report,
    )


def _write_reports(config: ScanConfig, result):
    try:
        save_results(result.hosts, config.output)
        console.print(f"\n[green]✓[/green] Results saved to: {config.output}")
    except OSError as e:
        print_error(f"saving results: {e}")

    try:
        save_summary(result.summary, config.summary_output)
        console.print(f"[green]✓[/green] Summary saved to: {config.summary_output}")
    except OSError as e:
        print_error(f"saving summary: {e}")

    if config.report_output:
        try:
            save_report(result, config.report_output)
            console.print(f"[green]✓[/green] Combined report saved to: {config.report_output}")
        except OSError as e:
            print_error(f"saving combined report: {e}")

    if config.html_output:
        try:
            generate_html_report(result.hosts, result.summary, config.html_output)
            console.print(f"[green]✓[/green] HTML report saved to: {config.html_output}")
        except OSError as e:
            print_error(f"generating HTML report: {e}")


async def _run(config: ScanConfig, address_range):
    scanner = NetworkScanner(config)

    with scan_progress() as progress:
        task = progress.add_task("[cyan]Discovering devices...", total=address_range.size)
        scanner.on_discovery_progress = lambda: progress.advance(task)
        scanner.on_port_scan_start = lambda hosts: progress.reset(
            task, total=len(hosts), description="[cyan]Scanning ports and assessing hosts..."
        )
        scanner.on_host_scanned = lambda host: progress.advance(task)
        return await scanner.run(address_range)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    print_banner()

    cidr = args.cidr or get_local_network_cidr()
    if not cidr:
        print_error("could not determine local network range",
                    hint="Please specify one using: --cidr 192.168.1.0/24")
        return 1

    try:
        address_range = parse_range(cidr)
        config = config_from_args(args)
    except NetsweepError as e:
        print_error(str(e))
        return 1
    config.cidr = str(address_range)

    console.print(f"Scanning network: [bold]{address_range}[/bold] ({address_range.size} addresses, {len(config.ports)} ports)")
    if args.deep:
        console.print("[yellow]Deep scan mode enabled (all ports)[/yellow]")

    try:
        result = asyncio.run(_run(config, address_range))
    except KeyboardInterrupt:
        console.print("\n[yellow]Scan interrupted[/yellow]")
        return 130

    if not result.hosts:
        console.print("\n[bold red]No devices found on the network[/bold red]")
        return 0

    console.print(f"\n[green]✓[/green] Found {len(result.hosts)} device(s) in {result.summary.scan_duration:.1f}s\n")

    display_results(result.hosts, config.verbose)
    _write_reports(config, result)
    print_summary(result.summary)
    print_recommendations(result.hosts)
    return 0


if __name__ == '__main__':
    sys.exit(main())
