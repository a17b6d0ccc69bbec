"""
Action and Receipt models — the execution contract.

Actions represent commands the engine wants run. Receipts represent
results. The engine sends Actions to the adapter registry and always
gets a Receipt back, never an exception.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


Phase = Literal["install", "verify"]


class Action(BaseModel):
    """A single command to run for one package of one stack.

    The id is ``<stack>:<package>:<phase>`` so receipts can be traced
    back to the package that produced them.
    """

    id: str                         # unique action identifier
    name: str = ""                  # human-readable name (package display name)
    adapter: str = "shell"          # which adapter handles this
    phase: Phase = "install"
    command: str = ""
    stack_id: str = ""
    package_id: str = ""

    @classmethod
    def for_package(
        cls,
        stack_id: str,
        package_id: str,
        phase: Phase,
        command: str,
        name: str = "",
    ) -> Action:
        """Build the action for one package phase."""
        return cls(
            id=f"{stack_id}:{package_id}:{phase}",
            name=name or package_id,
            phase=phase,
            command=command,
            stack_id=stack_id,
            package_id=package_id,
        )


class Receipt(BaseModel):
    """Result of an adapter execution.

    Receipts capture the full outcome of an action. Adapters NEVER
    raise exceptions — failures are captured here.
    """

    adapter: str
    action_id: str
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None
    return_code: int | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the action succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the action failed."""
        return self.status == "failed"

    @property
    def dry_run(self) -> bool:
        """Whether this receipt is a simulation rather than a real run."""
        return bool(self.metadata.get("dry_run"))

    @classmethod
    def success(
        cls,
        adapter: str,
        action_id: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(
            adapter=adapter,
            action_id=action_id,
            status="ok",
            output=output,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        adapter: str,
        action_id: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            adapter=adapter,
            action_id=action_id,
            status="failed",
            error=error,
            **kwargs,
        )

    @classmethod
    def skip(
        cls,
        adapter: str,
        action_id: str,
        reason: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a skip receipt."""
        return cls(
            adapter=adapter,
            action_id=action_id,
            status="skipped",
            output=reason,
            **kwargs,
        )
