"""
Host probe — the only place that samples the running platform.

Everything downstream receives a PlatformDescriptor explicitly,
so the resolver can be tested without touching the environment.
"""

from __future__ import annotations

import logging
import platform

from nativebuild.core.models.platform import PlatformDescriptor

logger = logging.getLogger(__name__)


def detect_host(system: str | None = None, machine: str | None = None) -> PlatformDescriptor:
    """Build a descriptor for the host, or for the given overrides."""
    if system is None:
        system = platform.system()
    if machine is None:
        machine = platform.machine()

    host = PlatformDescriptor(os_family=system, arch=machine)
    logger.info("Detected platform: %s (system=%s, machine=%s)", host, system, machine)
    return host
