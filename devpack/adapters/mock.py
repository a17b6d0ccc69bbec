"""
Mock adapter — test double for the command runner.

Simulates command execution without touching the system. Returns
success by default; individual action ids can be scripted to fail or
to return a custom receipt.
"""

from __future__ import annotations

from devpack.adapters.base import Adapter, ExecutionContext
from devpack.core.models.action import Receipt


class MockAdapter(Adapter):
    """Universal mock adapter for testing.

    Action ids have the form ``<stack>:<package>:<phase>``.
    """

    def __init__(
        self,
        adapter_name: str = "shell",
        available: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    @property
    def executed_ids(self) -> list[str]:
        """Action ids in execution order."""
        return [ctx.action.id for ctx in self._call_log]

    @property
    def executed_commands(self) -> list[str]:
        """Commands in execution order."""
        return [ctx.command for ctx in self._call_log]

    def is_available(self) -> bool:
        return self._available

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        """Set a custom response for a specific action ID."""
        self._responses[action_id] = receipt

    def set_failure(self, action_id: str, error: str = "Mock failure", return_code: int = 1) -> None:
        """Configure a specific action to fail."""
        self._responses[action_id] = Receipt.failure(
            adapter=self._name,
            action_id=action_id,
            error=error,
            return_code=return_code,
        )

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._call_log.append(context)

        if context.action.id in self._responses:
            return self._responses[context.action.id]

        return Receipt.success(
            adapter=self._name,
            action_id=context.action.id,
            output=self._default_output,
            return_code=0,
            metadata={"mock": True, "command": context.command},
        )

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
