"""
Build engine — turns a Resolution into steps and runs them.

Flow:
    resolution → plan (clean, configure, build) → execute in order → report

Steps run strictly one after another. The first failed receipt stops
the run and its exit code becomes the process exit code.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from nativebuild.adapters.registry import AdapterRegistry
from nativebuild.core.errors import ExternalToolFailure, UnsupportedGenerator
from nativebuild.core.models.action import Action, Receipt
from nativebuild.core.models.preset import DEFAULT_BUILD_TYPE, Resolution

logger = logging.getLogger(__name__)


@dataclass
class BuildPlan:
    """Ordered steps for one build."""

    resolution: Resolution
    actions: list[Action] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)

    @property
    def total_actions(self) -> int:
        return len(self.actions)

    def get(self, action_id: str) -> Action | None:
        for action in self.actions:
            if action.id == action_id:
                return action
        return None


@dataclass
class BuildReport:
    """Receipts collected while executing a plan."""

    preset: str = ""
    receipts: list[Receipt] = field(default_factory=list)
    stopped_at: str | None = None

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.status == "skipped")

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        return "ok" if self.all_ok else "failed"

    @property
    def failed_receipt(self) -> Receipt | None:
        for receipt in self.receipts:
            if receipt.failed:
                return receipt
        return None

    @property
    def exit_code(self) -> int:
        """0 on success, else the failing tool's exit code (1 if it has none)."""
        failed = self.failed_receipt
        if failed is None:
            return 0
        return failed.return_code or 1

    def raise_for_status(self) -> None:
        """Raise ExternalToolFailure for the failed step, if any."""
        failed = self.failed_receipt
        if failed is None:
            return
        argv = failed.metadata.get("argv", [])
        raise ExternalToolFailure(failed.action_id, list(argv), self.exit_code)

    def to_dict(self) -> dict:
        return {
            "preset": self.preset,
            "status": self.status,
            "exit_code": self.exit_code,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "stopped_at": self.stopped_at,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


def configure_command(resolution: Resolution) -> list[str]:
    """``cmake -S <source> -B <build> --preset=<name> <extra args>``."""
    return [
        "cmake",
        "-S", str(resolution.source_dir),
        "-B", str(resolution.build_dir),
        f"--preset={resolution.preset}",
        *resolution.cmake_args,
    ]


def build_command(resolution: Resolution) -> list[str]:
    """The build-tool invocation implied by the generator.

    Raises:
        UnsupportedGenerator: For Xcode or any generator we cannot drive.
    """
    generator = resolution.generator.value.lower()
    build_dir = str(resolution.build_dir)

    if "ninja" in generator:
        return ["ninja", "-C", build_dir]
    if "xcode" in generator:
        raise UnsupportedGenerator(
            resolution.generator.value,
            "Xcode generator is not supported; node presets must use Ninja "
            "or a compatible generator.",
        )
    if "visual studio" in generator:
        # multi-config generators pick the configuration at build time
        build_type = resolution.build_type or DEFAULT_BUILD_TYPE
        return ["cmake", "--build", build_dir, "--config", build_type]
    if "makefiles" in generator:
        return ["make", "-C", build_dir]
    raise UnsupportedGenerator(resolution.generator.value)


def plan_build(resolution: Resolution, env: dict[str, str] | None = None) -> BuildPlan:
    """Build the clean → configure → build plan for a resolution.

    Raises:
        UnsupportedGenerator: Before anything is scheduled.
    """
    build_argv = build_command(resolution)
    source = str(resolution.source_dir)

    plan = BuildPlan(resolution=resolution, env=dict(env or {}))
    plan.actions = [
        Action(
            id="clean",
            name=f"Remove {resolution.build_dir}",
            adapter="filesystem",
            params={"operation": "remove_tree", "path": str(resolution.build_dir)},
        ),
        Action(
            id="configure",
            name=f"Configure preset {resolution.preset}",
            adapter="command",
            params={"argv": configure_command(resolution), "cwd": source},
        ),
        Action(
            id="build",
            name=f"Build with {resolution.generator.value}",
            adapter="command",
            params={"argv": build_argv, "cwd": source},
        ),
    ]
    return plan


def execute_plan(
    plan: BuildPlan,
    registry: AdapterRegistry,
    dry_run: bool = False,
) -> BuildReport:
    """Run the plan's actions in order, stopping at the first failure."""
    report = BuildReport(preset=plan.resolution.preset)
    working_dir = str(Path(plan.resolution.source_dir))

    for action in plan.actions:
        receipt = registry.execute_action(
            action=action,
            working_dir=working_dir,
            env=plan.env,
            dry_run=dry_run,
        )
        report.receipts.append(receipt)

        status_marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
        logger.info("%s %s → %s", status_marker, action.id, receipt.status)

        if receipt.failed:
            logger.error("Step '%s' failed: %s", action.id, receipt.error)
            report.stopped_at = action.id
            break

    return report
