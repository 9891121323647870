"""
Visual Studio developer environment — Windows only.

Builds with MSVC need the variables VsDevCmd.bat sets up (INCLUDE,
LIB, PATH to cl.exe, ...). We run the batch file for the target
architecture, dump the resulting environment with ``set`` and hand
it to the build steps as overrides.

Nothing here is fatal: if VsDevCmd.bat is missing or fails, the build
proceeds and cmake reports the real problem.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from nativebuild.core.models.platform import ARM64

logger = logging.getLogger(__name__)

VSDEVCMD_CANDIDATES: tuple[str, ...] = (
    r"C:\Program Files\Microsoft Visual Studio\2022\Enterprise\Common7\Tools\VsDevCmd.bat",
    r"C:\Program Files\Microsoft Visual Studio\2022\Professional\Common7\Tools\VsDevCmd.bat",
    r"C:\Program Files\Microsoft Visual Studio\2022\Community\Common7\Tools\VsDevCmd.bat",
    r"C:\Program Files (x86)\Microsoft Visual Studio\2019\Enterprise\Common7\Tools\VsDevCmd.bat",
    r"C:\Program Files (x86)\Microsoft Visual Studio\2019\Professional\Common7\Tools\VsDevCmd.bat",
    r"C:\Program Files (x86)\Microsoft Visual Studio\2019\Community\Common7\Tools\VsDevCmd.bat",
)

DEFAULT_VCINSTALLDIR = "C:\\Program Files\\Microsoft Visual Studio\\2022\\Community\\VC\\"

VSDEVCMD_TIMEOUT = 30  # seconds


@dataclass
class DevEnvironment:
    """Result of preparing the developer environment."""

    status: str = "skipped"         # "ready" | "captured" | "fallback" | "failed" | "skipped"
    vsdevcmd: Path | None = None
    env: dict[str, str] = field(default_factory=dict)
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "vsdevcmd": str(self.vsdevcmd) if self.vsdevcmd else None,
            "variables": len(self.env),
            "message": self.message,
        }


def find_vsdevcmd(candidates: tuple[str, ...] | list[str] | None = None) -> Path | None:
    """First VsDevCmd.bat that exists among the standard install locations."""
    if candidates is None:
        candidates = VSDEVCMD_CANDIDATES
    for candidate in candidates:
        path = Path(candidate)
        if path.is_file():
            logger.info("Found VsDevCmd.bat: %s", path)
            return path
    return None


def parse_set_output(text: str) -> dict[str, str]:
    """Parse the ``KEY=VALUE`` lines printed by ``set``.

    Splits on the first ``=`` only; lines with an empty key or value
    are dropped.
    """
    env: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        if key and value:
            env[key] = value
    return env


def vsdevcmd_arch(arch: str) -> str:
    return "arm64" if arch == ARM64 else "amd64"


def capture_dev_environment(
    arch: str,
    environ: Mapping[str, str] | None = None,
    candidates: tuple[str, ...] | list[str] | None = None,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> DevEnvironment:
    """Prepare the MSVC environment for ``arch``.

    Args:
        arch: Target architecture (``arm64`` or ``x64``).
        environ: The current process environment (default: os.environ).
        candidates: VsDevCmd.bat locations to probe.
        runner: ``subprocess.run`` compatible callable.

    Returns:
        DevEnvironment whose ``env`` is overlaid on the build steps.
    """
    environ = os.environ if environ is None else environ
    if environ.get("VCINSTALLDIR") and environ.get("VSCMD_ARG_TGT_ARCH"):
        logger.info("Already running in a Visual Studio developer prompt")
        return DevEnvironment(status="ready", message="Developer environment already active")

    vsdevcmd = find_vsdevcmd(candidates)
    if vsdevcmd is None:
        logger.warning(
            "VsDevCmd.bat not found in standard Visual Studio locations; "
            "ensure Visual Studio 2019/2022 is installed with C++ tools"
        )
        for candidate in VSDEVCMD_CANDIDATES if candidates is None else candidates:
            logger.debug("  checked %s", candidate)
        return DevEnvironment(
            status="fallback",
            env={"VCINSTALLDIR": DEFAULT_VCINSTALLDIR, "VSCMD_ARG_TGT_ARCH": arch},
            message="VsDevCmd.bat not found",
        )

    arch_param = f"-arch={vsdevcmd_arch(arch)}"
    command = f'"{vsdevcmd}" {arch_param} && set'
    logger.info("Executing: VsDevCmd.bat %s", arch_param)

    try:
        result = runner(
            command,
            shell=True,
            capture_output=True,
            text=True,
            timeout=VSDEVCMD_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning("Failed to execute VsDevCmd.bat: %s", e)
        return DevEnvironment(status="failed", vsdevcmd=vsdevcmd, message=str(e))

    if result.returncode != 0:
        message = (result.stderr or "").strip() or f"exit code {result.returncode}"
        logger.warning("VsDevCmd.bat failed: %s", message)
        return DevEnvironment(status="failed", vsdevcmd=vsdevcmd, message=message)

    env = parse_set_output(result.stdout or "")
    if not env.get("VSCMD_ARG_TGT_ARCH"):
        env["VSCMD_ARG_TGT_ARCH"] = arch
        logger.warning("Manually set VSCMD_ARG_TGT_ARCH to %s", arch)

    logger.info("VsDevCmd.bat set %d environment variables", len(env))
    logger.debug("VCINSTALLDIR=%s WindowsSDKVersion=%s Platform=%s",
                 env.get("VCINSTALLDIR"), env.get("WindowsSDKVersion"), env.get("Platform"))
    return DevEnvironment(status="captured", vsdevcmd=vsdevcmd, env=env,
                          message=f"{len(env)} variables captured")
