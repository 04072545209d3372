import socket

from netsweep.models import Finding, Host, OpenPort, Severity
from netsweep.scanner import AsyncPortScanner


def free_port() -> int:
    """A localhost port with nothing listening on it"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(('127.0.0.1', 0))
        return sock.getsockname()[1]


class RedirectingScanner(AsyncPortScanner):
    """Connects logical ports to local test listeners; anything unmapped is closed"""

    def __init__(self, redirects, **kwargs):
        kwargs.setdefault('timeout', 1.0)
        kwargs.setdefault('banner_timeout', 0.3)
        super().__init__(**kwargs)
        self.redirects = redirects
        self.closed_port = free_port()

    async def _open(self, ip, port):
        return await super()._open('127.0.0.1', self.redirects.get(port, self.closed_port))


def make_host(ip='10.0.0.1', ports=(), findings=(), os_guess=''):
    host = Host(ip=ip, os_guess=os_guess)
    host.open_ports = [p if isinstance(p, OpenPort) else OpenPort(port=p) for p in ports]
    host.vulnerabilities = list(findings)
    return host


def finding(severity: Severity, type_: str = 'Test', port=None) -> Finding:
    return Finding(severity=severity, type=type_, description='test finding', port=port)
