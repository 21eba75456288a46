"""Operating system, distribution and package manager detection."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import Callable

OS_RELEASE_PATH = Path("/etc/os-release")

Which = Callable[[str], "str | None"]
FileReader = Callable[[Path], str]

# Ordered by preference where several managers can coexist on one host.
PACKAGE_MANAGERS: dict[str, tuple[str, ...]] = {
    "darwin": ("brew",),
    "linux": ("apt", "dnf", "yum", "pacman", "zypper", "apk"),
    "windows": ("choco", "winget", "scoop"),
}

_PLATFORM_FAMILIES: dict[str, str] = {
    "linux": "linux",
    "darwin": "darwin",
    "win32": "windows",
    "cygwin": "windows",
}


def read_text_file(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def detect_os(platform_id: str | None = None) -> str:
    raw = sys.platform if platform_id is None else platform_id
    for prefix, family in _PLATFORM_FAMILIES.items():
        if raw.startswith(prefix):
            return family
    return raw


def detect_distribution(os_family: str, *, reader: FileReader = read_text_file) -> str:
    """Return the lower-cased ``ID`` from os-release, or ``""`` when unknown."""
    if os_family != "linux":
        return ""
    try:
        data = reader(OS_RELEASE_PATH)
    except OSError:
        return ""
    for line in data.splitlines():
        if line.startswith("ID="):
            return line[len("ID=") :].strip().strip("\"'").lower()
    return ""


def detect_package_manager(os_family: str, *, which: Which = shutil.which) -> str:
    for candidate in PACKAGE_MANAGERS.get(os_family, ()):
        if which(candidate):
            return candidate
    return ""
