"""
Tests for host detection — platform names and package-manager probing.
"""

from devpack.core.services.detection import (
    KNOWN_PACKAGE_MANAGERS,
    detect_package_manager,
    detect_platform,
)


def _which_for(*installed: str):
    def which(name: str) -> str | None:
        return f"/usr/bin/{name}" if name in installed else None

    return which


class TestDetectPlatform:
    def test_known_systems(self):
        assert detect_platform("Linux") == "linux"
        assert detect_platform("Windows") == "windows"
        assert detect_platform("Darwin") == "macos"

    def test_other_system_lowercased(self):
        assert detect_platform("FreeBSD") == "freebsd"

    def test_empty_is_unknown(self):
        assert detect_platform("") == "unknown"

    def test_host(self):
        assert detect_platform()


class TestDetectPackageManager:
    def test_probe_order(self):
        assert KNOWN_PACKAGE_MANAGERS == ("pacman", "apt", "dnf", "yum", "zypper", "brew")

    def test_first_found_wins(self):
        assert detect_package_manager(which=_which_for("brew", "apt", "pacman")) == "pacman"
        assert detect_package_manager(which=_which_for("yum", "dnf")) == "dnf"

    def test_single(self):
        assert detect_package_manager(which=_which_for("zypper")) == "zypper"

    def test_none_found(self):
        assert detect_package_manager(which=_which_for()) is None

    def test_unknown_managers_ignored(self):
        assert detect_package_manager(which=_which_for("apk", "emerge")) is None
