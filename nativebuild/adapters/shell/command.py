"""
Command adapter — run an external tool from an argument vector.

Build tools stream a lot of output, so by default stdio is inherited
and only the exit status is recorded. ``capture=True`` collects
stdout/stderr instead (used for short probes and in tests).
There is no timeout: a build runs until the tool exits.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from pathlib import Path

from nativebuild.adapters.base import Adapter, ExecutionContext
from nativebuild.core.models.action import Receipt

logger = logging.getLogger(__name__)


class CommandAdapter(Adapter):
    """Execute a command and record its exit status.

    Action params:
        argv (list[str]): The command and its arguments.
        cwd (str): Override working directory (default: context.working_dir).
        capture (bool): Capture output instead of inheriting stdio.
    """

    @property
    def name(self) -> str:
        return "command"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        argv = context.params.get("argv")
        if not argv or not isinstance(argv, list):
            return False, "Missing required param: 'argv'"

        if shutil.which(argv[0]) is None and not Path(argv[0]).is_file():
            return False, f"Executable not found: {argv[0]}"

        cwd = context.params.get("cwd", context.working_dir)
        if cwd and not Path(cwd).is_dir():
            return False, f"Working directory does not exist: {cwd}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        argv = [str(a) for a in context.params["argv"]]
        cwd = context.params.get("cwd", context.working_dir)
        capture = bool(context.params.get("capture", False))

        env = os.environ.copy()
        env.update(context.env)

        logger.info("Executing: %s", " ".join(argv))
        logger.debug("cwd=%s, env overrides=%s", cwd, sorted(context.env))
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                cwd=cwd,
                env=env,
                capture_output=capture,
                text=True,
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Command execution error: {e}",
                metadata={"argv": argv},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = (result.stdout or "").strip()
        stderr = (result.stderr or "").strip()

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=context.action.id,
                output=output,
                duration_ms=elapsed_ms,
                return_code=0,
                metadata={"argv": argv, "stderr": stderr},
            )

        return Receipt.failure(
            adapter=self.name,
            action_id=context.action.id,
            error=stderr or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            return_code=result.returncode,
            output=output,
            metadata={"argv": argv},
        )
