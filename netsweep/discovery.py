#!/usr/bin/env python3
"""
Live host discovery

A host counts as live when a TCP connect to port 80 either completes or is
actively refused (both mean a TCP stack answered). Otherwise a single ICMP
echo through the system ping binary decides. Firewalled hosts that drop
both are missed; that is accepted, not an error.
"""

import sys
import time
import shutil
import asyncio
import logging
from typing import Callable, Iterable, List, Optional
from dataclasses import dataclass

from .addresses import IPAddress, ip_version
from .errors import check_concurrency
from .models import Host

logger = logging.getLogger(__name__)

LIVENESS_PORT = 80


@dataclass
class LivenessResult:
    alive: bool
    latency_ms: float


def ping_command(ip: str, platform: Optional[str] = None, timeout: float = 1.0) -> List[str]:
    """
    Build a single-echo ping command line for this platform

    Args:
        ip: Target address
        platform: sys.platform value (defaults to the running platform)
        timeout: Echo wait in seconds

    Returns:
        argv list for asyncio.create_subprocess_exec
    """
    platform = platform or sys.platform
    ipv6 = ':' in ip
    wait_s = str(max(1, int(round(timeout))))

    if platform.startswith('win'):
        cmd = ['ping', '-n', '1', '-w', str(int(timeout * 1000))]
        if ipv6:
            cmd.append('-6')
        return cmd + [ip]

    if platform == 'darwin':
        if ipv6:
            return ['ping6', '-c', '1', ip]
        return ['ping', '-c', '1', '-t', wait_s, ip]

    if ipv6:
        if shutil.which('ping6'):
            return ['ping6', '-c', '1', '-W', wait_s, ip]
        return ['ping', '-6', '-c', '1', '-W', wait_s, ip]
    return ['ping', '-c', '1', '-W', wait_s, ip]


class LivenessProber:
    """TCP connect probe with a one-shot ICMP echo fallback"""

    def __init__(self, connect_timeout: float = 0.5, echo_timeout: float = 1.0,
                 port: int = LIVENESS_PORT):
        self.connect_timeout = connect_timeout
        self.echo_timeout = echo_timeout
        self.port = port

    async def check(self, ip: str) -> LivenessResult:
        """Return the reachability verdict for one address and its latency"""
        start = time.perf_counter()
        alive = await self._tcp_probe(ip)
        if not alive:
            alive = await self._echo_probe(ip)
        latency_ms = (time.perf_counter() - start) * 1000
        return LivenessResult(alive=alive, latency_ms=latency_ms)

    async def _tcp_probe(self, ip: str) -> bool:
        try:
            conn = asyncio.open_connection(ip, self.port)
            reader, writer = await asyncio.wait_for(conn, timeout=self.connect_timeout)
        except ConnectionRefusedError:
            # RST from the target, so something is listening at the IP layer
            return True
        except (asyncio.TimeoutError, OSError):
            return False

        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        return True

    async def _echo_probe(self, ip: str) -> bool:
        cmd = ping_command(ip, timeout=self.echo_timeout)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            # missing binary or fd/memory exhaustion under load
            logger.debug("echo probe unavailable for %s: %s", ip, e)
            return False

        try:
            await asyncio.wait_for(proc.wait(), timeout=self.echo_timeout + 1.0)
        except asyncio.TimeoutError:
            try:
                proc.kill()
            except OSError as e:
                # ping exited between the timeout and the kill
                logger.debug("echo probe for %s already gone: %s", ip, e)
            await proc.wait()
            return False

        return proc.returncode == 0


class DeviceDiscovery:
    """
    Bounded-concurrency sweep of an address range

    The semaphore is acquired before each probe task is created, so the
    address iterator is consumed lazily and never more than
    ``max_concurrent`` probes are in flight. Finished probe tasks are dropped
    as they complete, so memory does not grow with the size of the range.
    """

    def __init__(self, prober: Optional[LivenessProber] = None, max_concurrent: int = 100):
        self.prober = prober or LivenessProber()
        self.max_concurrent = check_concurrency('max_concurrent', max_concurrent)

    async def discover(self, addresses: Iterable[IPAddress],
                       progress: Optional[Callable[[], None]] = None) -> List[Host]:
        """
        Probe every address and collect the live ones

        Args:
            addresses: Any iterable of addresses, typically an AddressRange
            progress: Called once per finished probe

        Returns:
            List of Host records (completion order, not address order)
        """
        devices: List[Host] = []
        lock = asyncio.Lock()
        semaphore = asyncio.Semaphore(self.max_concurrent)
        pending = set()
        errors: List[BaseException] = []

        def finished(task: asyncio.Task):
            pending.discard(task)
            if not task.cancelled() and task.exception() is not None:
                errors.append(task.exception())

        async def probe(ip: str):
            try:
                result = await self.prober.check(ip)
                if result.alive:
                    device = Host(
                        ip=ip,
                        ip_version=ip_version(ip),
                        latency_ms=result.latency_ms,
                    )
                    async with lock:
                        devices.append(device)
                    logger.info("[+] Found: %s (%s)", ip, device.latency)
                else:
                    logger.debug("no response from %s", ip)
            finally:
                semaphore.release()
                if progress is not None:
                    progress()

        for address in addresses:
            await semaphore.acquire()
            task = asyncio.ensure_future(probe(str(address)))
            pending.add(task)
            task.add_done_callback(finished)

        # wait for every probe before surfacing any unexpected failure
        if pending:
            await asyncio.wait(set(pending))
        if errors:
            raise errors[0]
        return devices
