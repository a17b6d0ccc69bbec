"""
Tests for command resolution — platform selection and package-manager variants.
"""

import logging

from devpack.core.engine.command_resolver import (
    resolve,
    resolve_package_command,
    select_platform_spec,
)
from devpack.core.models.stack import Package

VARIANTS = "pacman: sudo pacman -S foo | apt: sudo apt install foo"


def _pkg(**commands) -> Package:
    return Package.model_validate({"id": "foo", "display_name": "Foo", **commands})


class TestResolve:
    def test_picks_variant_for_manager(self):
        assert resolve(VARIANTS, "linux", "apt") == "sudo apt install foo"
        assert resolve(VARIANTS, "linux", "pacman") == "sudo pacman -S foo"

    def test_plain_command_unchanged(self):
        assert resolve("plain install foo", "linux", "apt") == "plain install foo"

    def test_unmatched_manager_falls_back_to_raw(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert resolve(VARIANTS, "linux", "dnf") == VARIANTS
        assert "dnf" in caplog.text

    def test_no_manager_uses_raw(self):
        assert resolve(VARIANTS, "linux", None) == VARIANTS

    def test_windows_is_never_narrowed(self):
        assert resolve("apt: x | brew: y", "windows", "apt") == "apt: x | brew: y"


class TestSelectPlatformSpec:
    def test_windows_uses_windows_cmd(self):
        pkg = _pkg(windows_cmd="winget install foo", linux_cmd="apt install foo")
        assert select_platform_spec(pkg, "windows").raw == "winget install foo"

    def test_windows_does_not_fall_back_to_linux(self):
        pkg = _pkg(linux_cmd="apt install foo")
        assert select_platform_spec(pkg, "windows") is None

    def test_posix_prefers_own_key(self):
        pkg = _pkg(linux_cmd="apt install foo", macos_cmd="brew install foo")
        assert select_platform_spec(pkg, "macos").raw == "brew install foo"

    def test_posix_falls_back_to_linux(self):
        pkg = _pkg(linux_cmd="apt install foo")
        assert select_platform_spec(pkg, "macos").raw == "apt install foo"
        assert select_platform_spec(pkg, "freebsd").raw == "apt install foo"


class TestResolvePackageCommand:
    def test_linux_with_variants(self):
        pkg = _pkg(linux_cmd=VARIANTS)
        assert resolve_package_command(pkg, "linux", "apt") == "sudo apt install foo"

    def test_missing_platform_command_is_none(self):
        pkg = _pkg(windows_cmd="winget install foo")
        assert resolve_package_command(pkg, "linux", "apt") is None

    def test_empty_variant_is_none(self):
        pkg = _pkg(linux_cmd="apt: | brew: brew install foo")
        assert resolve_package_command(pkg, "linux", "apt") is None

    def test_macos_brew_variant_from_linux_cmd(self):
        pkg = _pkg(linux_cmd="apt: sudo apt install foo | brew: brew install foo")
        assert resolve_package_command(pkg, "macos", "brew") == "brew install foo"
