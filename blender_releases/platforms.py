"""Normalize free-text platform and architecture signals into closed vocabularies.

The builder and stable pages describe platforms differently and the results are
not reconciled: the builder page reports macOS as ``darwin`` while the stable
page reports ``mac``. Every rule is first-match-wins and falls back to
``unknown`` instead of rejecting the build.
"""

from __future__ import annotations

from typing import Sequence, Tuple

UNKNOWN = "unknown"
X86_64 = "x86_64"
ARM64 = "arm64"

BUILDER_OS_RULES: Sequence[Tuple[str, str]] = (
    ("windows", "windows"),
    ("darwin", "darwin"),
    ("linux", "linux"),
)

STABLE_OS_RULES: Sequence[Tuple[str, str]] = (
    ("windows", "windows"),
    ("linux", "linux"),
    ("mac", "mac"),
)

BUILD_LABEL_ARCHES = {
    "windows x64": X86_64,
    "macos intel": X86_64,
    "linux x64": X86_64,
    "macos apple silicon": ARM64,
}

GA_LABEL_ARCH_RULES: Sequence[Tuple[str, str]] = (
    ("arm64", ARM64),
    ("64bit", X86_64),
    ("32bit", UNKNOWN),
)

STABLE_ARM_TEXT = "Apple Silicon"

STABLE_INFO_PANELS = {
    ARM64: "macos-apple-silicon",
    "linux": "linux",
    "mac": "macos",
}
STABLE_DEFAULT_PANEL = "windows"


def _first_match(value: str, rules: Sequence[Tuple[str, str]]) -> str:
    for needle, result in rules:
        if needle in value:
            return result
    return UNKNOWN


def os_from_ga_label(ga_label: str) -> str:
    """Builder page: infer the OS from the lowercase analytics label."""
    return _first_match(ga_label.lower(), BUILDER_OS_RULES)


def os_from_classes(class_names: str) -> str:
    """Stable page: infer the OS from the CSS classes of a platform list item."""
    return _first_match(class_names.lower(), STABLE_OS_RULES)


def arch_from_build_label(label: str) -> str:
    """Builder page: map the ``build-architecture`` label by exact match."""
    return BUILD_LABEL_ARCHES.get(label.strip().lower(), UNKNOWN)


def arch_from_ga_label(ga_label: str) -> str:
    """Builder page without an architecture label: look for bitness in the analytics label."""
    return _first_match(ga_label.lower(), GA_LABEL_ARCH_RULES)


def arch_from_stable_text(text: str) -> str:
    # The stable page only distinguishes Apple Silicon; every other build is x86_64.
    if text.strip() == STABLE_ARM_TEXT:
        return ARM64
    return X86_64


def stable_info_panel_key(os_name: str, arch: str) -> str:
    """Return the suffix of the ``#menu-info-*`` panel holding date and checksum."""
    if arch == ARM64:
        return STABLE_INFO_PANELS[ARM64]
    return STABLE_INFO_PANELS.get(os_name, STABLE_DEFAULT_PANEL)
