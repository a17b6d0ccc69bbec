"""
Shell command adapter — runs install and verify commands.

The single place where devpack calls ``subprocess.run``. Commands go
through the system shell, so stack files may use pipes, ``&&`` and
``sudo`` exactly as a user would type them.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time

from devpack.adapters.base import Adapter, ExecutionContext
from devpack.core.models.action import Receipt

logger = logging.getLogger(__name__)

# Keep receipts small; installers can be chatty.
_OUTPUT_TAIL = 2000


class ShellCommandAdapter(Adapter):
    """Execute shell commands and report their exit status.

    By default output is streamed straight to the terminal (installers
    prompt and print progress). With ``capture_output`` the tail of
    stdout/stderr is kept on the receipt instead.
    """

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        if os.name == "nt":
            return shutil.which("cmd") is not None or bool(os.environ.get("COMSPEC"))
        return shutil.which("sh") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if not context.command.strip():
            return False, "Missing command"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        command = context.command
        action_id = context.action.id

        logger.debug("Executing: %s", command)
        start = time.monotonic()

        try:
            result = subprocess.run(
                command,
                shell=True,
                capture_output=context.capture_output,
                text=True,
                timeout=context.timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                action_id=action_id,
                error=f"Command timed out after {context.timeout}s",
                metadata={"command": command, "timeout": context.timeout},
            )
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=action_id,
                error=f"Command execution error: {e}",
                metadata={"command": command},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = (result.stdout or "").strip()[-_OUTPUT_TAIL:]
        stderr = (result.stderr or "").strip()[-_OUTPUT_TAIL:]

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=action_id,
                output=output,
                duration_ms=elapsed_ms,
                return_code=0,
                metadata={"command": command, "stderr": stderr},
            )

        return Receipt.failure(
            adapter=self.name,
            action_id=action_id,
            error=stderr or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            return_code=result.returncode,
            output=output,
            metadata={"command": command},
        )
