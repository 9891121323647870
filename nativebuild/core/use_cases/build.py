"""
Build use case — resolve, clean, configure and build maplibre-native.

This is the top-level orchestrator behind ``nativebuild build``:
settings → host → resolution → (Windows) developer environment →
plan → execute. Failures before execution carry exit code 1; a failed
external step carries that tool's exit code.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from nativebuild.adapters.registry import AdapterRegistry, default_registry
from nativebuild.core.config.loader import load_settings
from nativebuild.core.engine.planner import BuildPlan, BuildReport, execute_plan, plan_build
from nativebuild.core.errors import ConfigError, UnsupportedGenerator, UnsupportedPlatform
from nativebuild.core.models.platform import WINDOWS, PlatformDescriptor
from nativebuild.core.models.preset import Resolution
from nativebuild.core.services.host import detect_host
from nativebuild.core.services.msvc_env import DevEnvironment, capture_dev_environment
from nativebuild.core.services.resolver import resolve

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Result of a build run."""

    resolution: Resolution | None = None
    plan: BuildPlan | None = None
    report: BuildReport | None = None
    dev_environment: DevEnvironment | None = None
    error: str | None = None

    @property
    def exit_code(self) -> int:
        if self.error:
            return 1
        if self.report is None:
            return 1
        return self.report.exit_code

    def to_dict(self) -> dict:
        result: dict = {"exit_code": self.exit_code}
        if self.error:
            result["error"] = self.error
        if self.resolution:
            result["resolution"] = self.resolution.to_dict()
        if self.dev_environment:
            result["dev_environment"] = self.dev_environment.to_dict()
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def run_build(
    config_path: Path | None = None,
    platform: PlatformDescriptor | None = None,
    dry_run: bool = False,
    mock_mode: bool = False,
    registry: AdapterRegistry | None = None,
    environ: Mapping[str, str] | None = None,
) -> BuildResult:
    """Build the native library for the host.

    Args:
        config_path: Optional explicit path to nativebuild.yml.
        platform: Override for the host platform (default: detected).
        dry_run: Plan and validate but don't execute.
        mock_mode: Use mock adapter responses.
        registry: Optional pre-configured adapter registry.
        environ: Process environment (default: os.environ).

    Returns:
        BuildResult with the resolution, plan and report.
    """
    result = BuildResult()
    environ = os.environ if environ is None else environ

    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    host = platform or detect_host()

    try:
        resolution = resolve(host, settings.source_path, settings.presets_path)
    except UnsupportedPlatform as e:
        logger.error("%s", e)
        result.error = str(e)
        return result
    result.resolution = resolution

    try:
        plan = plan_build(resolution)
    except UnsupportedGenerator as e:
        logger.error("%s", e)
        result.error = str(e)
        return result

    # ── Developer environment (Windows) ──────────────────────────
    env: dict[str, str] = {}
    if host.os_family == WINDOWS and settings.setup_msvc and not (dry_run or mock_mode):
        result.dev_environment = capture_dev_environment(host.arch, environ)
        env.update(result.dev_environment.env)
    env.update(settings.env)
    plan.env = env
    result.plan = plan

    if registry is None:
        registry = default_registry(mock_mode=mock_mode)

    logger.info("Building maplibre-native with preset %s", resolution.preset)
    report = execute_plan(plan, registry, dry_run=dry_run)
    result.report = report

    if report.all_ok:
        logger.info("maplibre-native build successful")
    else:
        logger.error("Error building maplibre-native (exit code %d)", report.exit_code)

    return result
