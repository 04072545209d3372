#!/usr/bin/env python3
"""
Exception hierarchy for netsweep

Only configuration problems are errors. Unreachable hosts and closed ports are
ordinary scan outcomes and never raise.
"""


class NetsweepError(Exception):
    """Base class for all netsweep errors"""


class RangeError(NetsweepError, ValueError):
    """Address range specification could not be parsed"""


class PortSpecError(NetsweepError, ValueError):
    """Port list specification could not be parsed"""


class ConfigError(NetsweepError, ValueError):
    """Scan settings are out of range (e.g. a concurrency limit below 1)"""


def check_concurrency(name: str, value: int) -> int:
    """Reject limits that would stall (0) or break (negative) a semaphore"""
    if value < 1:
        raise ConfigError(f"{name} must be at least 1, got {value}")
    return value
