#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2view/utils/packages.py
"""Installed distribution lookups for optional features."""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from importlib import metadata
from typing import Optional

from packaging import version
from packaging.specifiers import SpecifierSet


@dataclass(frozen=True)
class RequirementStatus:
    """Outcome of checking one optional dependency.

    Parameters
    ----------
    install_name : str
        Distribution name used with pip (e.g., "Pygments")
    version_spec : str
        Required version specifier, empty for any version
    importable : bool
        Whether the import name could be imported
    installed_version : str or None
        Version reported by the installed distribution metadata
    import_error : ImportError or None
        The failure raised while importing, if any

    """

    install_name: str
    version_spec: str
    importable: bool
    installed_version: Optional[str] = None
    import_error: Optional[ImportError] = field(default=None, compare=False)

    @property
    def satisfied(self) -> bool:
        """Whether the dependency is importable and meets ``version_spec``."""
        if not self.importable:
            return False
        if not self.version_spec:
            return True
        if self.installed_version is None:
            return False
        return version.parse(self.installed_version) in SpecifierSet(self.version_spec)


def get_package_version(install_name: str) -> Optional[str]:
    """Return the installed version of a distribution, or None."""
    try:
        return metadata.version(install_name)
    except metadata.PackageNotFoundError:
        return None


def check_requirement(install_name: str, import_name: str, version_spec: str = "") -> RequirementStatus:
    """Import ``import_name`` and look up the version of ``install_name``."""
    try:
        importlib.import_module(import_name)
    except ImportError as e:
        return RequirementStatus(install_name, version_spec, importable=False, import_error=e)
    return RequirementStatus(
        install_name, version_spec, importable=True, installed_version=get_package_version(install_name)
    )


__all__ = ["RequirementStatus", "get_package_version", "check_requirement"]
