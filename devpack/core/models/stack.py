"""
Stack model — what a stack installs and what it builds on.

Stacks are declared in ``stacks/<id>.json`` and turned into these models
by the stack loader. A stack owns an ordered list of packages and an
ordered list of other stacks it depends on.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from devpack.core.models.command import CommandSpec

# Keys in a package record ending in this suffix are platform commands
# (windows_cmd, linux_cmd, macos_cmd ...). verify_cmd is not.
PLATFORM_CMD_SUFFIX = "_cmd"
VERIFY_KEY = "verify_cmd"


class Package(BaseModel):
    """One installable tool within a stack."""

    id: str
    display_name: str
    platform_commands: dict[str, CommandSpec] = Field(default_factory=dict)
    verify_command: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_record(cls, data: Any) -> Any:
        """Accept the on-disk ``<platform>_cmd`` layout."""
        if not isinstance(data, dict) or "platform_commands" in data:
            return data

        commands: dict[str, str] = {}
        rest: dict[str, Any] = {}
        for key, value in data.items():
            if not isinstance(key, str):
                raise ValueError(f"invalid key {key!r}")
            if key == VERIFY_KEY:
                rest["verify_command"] = value
            elif key.endswith(PLATFORM_CMD_SUFFIX):
                if value is None:
                    continue
                if not isinstance(value, str):
                    raise ValueError(f"{key} must be a string")
                commands[key[: -len(PLATFORM_CMD_SUFFIX)]] = value
            else:
                rest[key] = value
        rest["platform_commands"] = commands
        return rest

    @field_validator("platform_commands", mode="before")
    @classmethod
    def _parse_commands(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        parsed: dict[str, Any] = {}
        for platform, command in value.items():
            if isinstance(command, str):
                # empty strings mean "not installable here"
                if command.strip():
                    parsed[platform] = CommandSpec.parse(command)
            else:
                parsed[platform] = command
        return parsed

    @field_validator("verify_command", mode="before")
    @classmethod
    def _blank_verify_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def has_verify(self) -> bool:
        return self.verify_command is not None

    def command_for(self, platform: str) -> CommandSpec | None:
        """Look up the raw command spec declared for a platform key."""
        return self.platform_commands.get(platform)


class Stack(BaseModel):
    """A named collection of packages plus dependencies on other stacks.

    A stack listing itself in ``depends_on`` is still a valid record;
    the executor reports it as a failure when processing.
    """

    id: str
    name: str
    packages: list[Package]
    depends_on: list[str] = Field(default_factory=list)

    @field_validator("id", "name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("packages")
    @classmethod
    def _has_packages(cls, value: list[Package]) -> list[Package]:
        if not value:
            raise ValueError("stack has no packages")
        return value

    @property
    def package_ids(self) -> list[str]:
        return [p.id for p in self.packages]

    @property
    def has_self_dependency(self) -> bool:
        return self.id in self.depends_on

    def summary(self) -> dict:
        """Small dict for listings."""
        return {
            "id": self.id,
            "name": self.name,
            "packages": len(self.packages),
            "package_ids": self.package_ids,
            "depends_on": list(self.depends_on),
        }
