#!/usr/bin/env python3
"""
Scan engine: discovery, enrichment, per-host port scanning, classification
and scoring, strictly in that phase order.
"""

import time
import asyncio
import logging
from typing import Awaitable, Callable, Iterable, List, Optional

from .addresses import IPAddress
from .config import ScanConfig
from .discovery import DeviceDiscovery, LivenessProber
from .fingerprint import guess_os
from .models import Host, ScanResult
from .netinfo import get_mac_address, lookup_vendor, lookup_vendor_online, resolve_hostname
from .risk import build_summary
from .scanner import AsyncPortScanner
from .vulns import assess_vulnerabilities

logger = logging.getLogger(__name__)


async def _gather_all(coros: Iterable[Awaitable]):
    """Await every coroutine, then re-raise the first failure"""
    results = await asyncio.gather(*coros, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result


class NetworkScanner:
    """
    Runs one complete scan described by a ScanConfig

    Discovery uses one global semaphore; every host then gets its own port
    scan semaphore, and all hosts are port scanned concurrently.
    """

    def __init__(self, config: ScanConfig,
                 discovery: Optional[DeviceDiscovery] = None,
                 port_scanner: Optional[AsyncPortScanner] = None,
                 enrich: bool = True):
        self.config = config
        self.discovery = discovery or DeviceDiscovery(
            LivenessProber(connect_timeout=config.connect_timeout, echo_timeout=config.echo_timeout),
            max_concurrent=config.discovery_concurrency,
        )
        self.port_scanner = port_scanner or AsyncPortScanner(
            timeout=config.port_timeout,
            banner_timeout=config.banner_timeout,
            max_concurrent=config.port_concurrency,
        )
        self.enrich = enrich
        self.on_discovery_progress: Optional[Callable[[], None]] = None
        self.on_port_scan_start: Optional[Callable[[List[Host]], None]] = None
        self.on_host_scanned: Optional[Callable[[Host], None]] = None

    async def run(self, addresses: Iterable[IPAddress]) -> ScanResult:
        start = time.monotonic()

        hosts = await self.discovery.discover(addresses, progress=self.on_discovery_progress)
        logger.info("Discovery finished: %d live host(s)", len(hosts))

        if hosts and self.enrich:
            await _gather_all(self._enrich_host(h) for h in hosts)

        if self.on_port_scan_start is not None:
            self.on_port_scan_start(hosts)
        await _gather_all(self.scan_device(h) for h in hosts)

        summary = build_summary(hosts, time.monotonic() - start)
        ranked = sorted(hosts, key=lambda h: h.risk_score, reverse=True)
        return ScanResult(hosts=ranked, summary=summary)

    async def _enrich_host(self, host: Host):
        loop = asyncio.get_running_loop()
        host.hostname = await loop.run_in_executor(None, resolve_hostname, host.ip)
        host.mac = await loop.run_in_executor(None, get_mac_address, host.ip)
        if host.mac and self.config.online_vendor:
            host.vendor = await loop.run_in_executor(None, lookup_vendor_online, host.mac)
        else:
            host.vendor = lookup_vendor(host.mac)

    async def scan_device(self, host: Host):
        """Port scan one host, then guess its OS and assess it"""
        logger.info("[*] Scanning %s...", host.ip)
        host.open_ports = await self.port_scanner.scan_host_async(
            host.ip, self.config.ports, grab_banner=self.config.grab_banner
        )
        host.os_guess = guess_os(host.open_ports)
        host.vulnerabilities = assess_vulnerabilities(host)

        if self.on_host_scanned is not None:
            self.on_host_scanned(host)


def run_scan(config: ScanConfig, addresses: Iterable[IPAddress]) -> ScanResult:
    """Synchronous entry point"""
    return asyncio.run(NetworkScanner(config).run(addresses))
