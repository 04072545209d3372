#!/usr/bin/env python3
"""
Async TCP port scanner with banner grabbing
Features:
- asyncio connect scan, one semaphore per host to bound concurrency
- Service-specific probes for protocols that wait for the client
- Version extraction from captured banners
"""

import asyncio
import logging
from types import MappingProxyType
from typing import List, Optional, Sequence, Tuple

from .errors import check_concurrency
from .fingerprint import extract_version
from .models import OpenPort

logger = logging.getLogger(__name__)


# Well-known ports spanning remote access, mail, database and web services
COMMON_PORTS = [
    20, 21, 22, 23, 25, 53, 67, 68, 69, 80, 110, 111, 123, 135, 137, 138, 139,
    143, 161, 162, 389, 443, 445, 465, 514, 515, 587, 636, 993, 995, 1080,
    1194, 1433, 1521, 1723, 3306, 3389, 5060, 5061, 5432, 5900, 6379, 8000,
    8080, 8443, 8888, 9000, 9090, 27017, 50000,
]

# Exhaustive scan
ALL_PORTS = list(range(1, 65536))

SERVICE_MAP = MappingProxyType({
    20: 'FTP-Data',
    21: 'FTP',
    22: 'SSH',
    23: 'Telnet',
    25: 'SMTP',
    53: 'DNS',
    67: 'DHCP-Server',
    68: 'DHCP-Client',
    69: 'TFTP',
    80: 'HTTP',
    110: 'POP3',
    111: 'RPC',
    123: 'NTP',
    135: 'MSRPC',
    137: 'NetBIOS-NS',
    138: 'NetBIOS-DGM',
    139: 'NetBIOS-SSN',
    143: 'IMAP',
    161: 'SNMP',
    162: 'SNMP-Trap',
    389: 'LDAP',
    443: 'HTTPS',
    445: 'SMB',
    465: 'SMTPS',
    514: 'Syslog',
    515: 'LPD',
    587: 'SMTP-Submission',
    636: 'LDAPS',
    993: 'IMAPS',
    995: 'POP3S',
    1080: 'SOCKS',
    1194: 'OpenVPN',
    1433: 'MSSQL',
    1521: 'Oracle',
    1723: 'PPTP',
    3306: 'MySQL',
    3389: 'RDP',
    5060: 'SIP',
    5061: 'SIP-TLS',
    5432: 'PostgreSQL',
    5900: 'VNC',
    6379: 'Redis',
    8000: 'HTTP-Alt',
    8080: 'HTTP-Proxy',
    8443: 'HTTPS-Alt',
    8888: 'HTTP-Alt2',
    9000: 'HTTP-Alt3',
    9090: 'WebSM',
    27017: 'MongoDB',
    50000: 'DB2',
})

# Client-initiated protocols need a nudge; SSH and FTP talk first
PROBES = MappingProxyType({
    80: b'GET / HTTP/1.0\r\n\r\n',
    8080: b'GET / HTTP/1.0\r\n\r\n',
    8000: b'GET / HTTP/1.0\r\n\r\n',
    8888: b'GET / HTTP/1.0\r\n\r\n',
    25: b'EHLO scanner\r\n',
    587: b'EHLO scanner\r\n',
    110: b'USER test\r\n',
})

BANNER_READ_SIZE = 4096


def service_name(port: int) -> str:
    return SERVICE_MAP.get(port, 'unknown')


class AsyncPortScanner:
    """
    Async connect scanner for the ports of one host at a time
    Closed and filtered ports are dropped; open ones come back as OpenPort
    """

    def __init__(self, timeout: float = 2.0, banner_timeout: float = 3.0,
                 max_concurrent: int = 50):
        """
        Initialize async scanner

        Args:
            timeout: Connection timeout in seconds
            banner_timeout: Deadline for reading a banner after connecting
            max_concurrent: Maximum concurrent connections per host
        """
        self.timeout = timeout
        self.banner_timeout = banner_timeout
        self.max_concurrent = check_concurrency('max_concurrent', max_concurrent)

    async def _open(self, ip: str, port: int) -> Tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        conn = asyncio.open_connection(ip, port)
        return await asyncio.wait_for(conn, timeout=self.timeout)

    async def scan_port(self, ip: str, port: int, semaphore: asyncio.Semaphore,
                        grab_banner: bool = True) -> Optional[OpenPort]:
        """
        Async scan a single port with optional banner grabbing

        Args:
            ip: Target address
            port: Port to scan
            semaphore: Semaphore to limit concurrency
            grab_banner: If True, send the service probe and read a banner

        Returns:
            OpenPort if the port accepted the connection, None otherwise
        """
        async with semaphore:
            try:
                reader, writer = await self._open(ip, port)
            except (asyncio.TimeoutError, OSError) as e:
                logger.debug("%s:%d closed (%s)", ip, port, type(e).__name__)
                return None

            record = OpenPort(port=port, service=service_name(port))
            try:
                if grab_banner:
                    record.banner = await self._grab_banner(reader, writer, port)
            finally:
                writer.close()
                try:
                    await writer.wait_closed()
                except OSError:
                    pass

            return record

    async def _grab_banner(self, reader: asyncio.StreamReader,
                           writer: asyncio.StreamWriter, port: int) -> str:
        """
        Send the probe for this port (if any) and read what comes back

        A timeout, reset or zero-byte read all mean "no banner".
        """
        try:
            probe = PROBES.get(port)
            if probe:
                writer.write(probe)
                await writer.drain()
            data = await asyncio.wait_for(reader.read(BANNER_READ_SIZE), timeout=self.banner_timeout)
        except (asyncio.TimeoutError, OSError):
            return ''
        return data.decode('utf-8', errors='ignore').strip()

    async def scan_host_async(self, ip: str, ports: Sequence[int],
                              grab_banner: bool = True) -> List[OpenPort]:
        """
        Async scan multiple ports on a host

        Args:
            ip: Target address
            ports: Ports to scan
            grab_banner: Capture banners and extract versions

        Returns:
            OpenPort records for open ports, sorted by port
        """
        semaphore = asyncio.Semaphore(self.max_concurrent)
        open_ports: List[OpenPort] = []
        lock = asyncio.Lock()

        async def worker(port: int):
            record = await self.scan_port(ip, port, semaphore, grab_banner)
            if record is None:
                return
            if grab_banner:
                record.version = extract_version(record.banner, port)
            async with lock:
                open_ports.append(record)

        results = await asyncio.gather(*(worker(p) for p in ports), return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result

        open_ports.sort(key=lambda x: x.port)
        return open_ports
