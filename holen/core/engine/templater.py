"""
Arch/template resolver — fill image names and URLs for this machine.

Manifests write templates with Go-style placeholders:

    "https://example.com/tool-{{.Version}}-{{.MappedArch}}.tar.gz"

Four variables exist: ``Version``, ``OS``, ``Arch`` and ``MappedArch``.
``MappedArch`` is looked up in the strategy's arch map under
``"{os}_{arch}"``; a missing entry yields an empty string.
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, ConfigDict

from holen.adapters.base import System
from holen.core.errors import TemplateError

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{\{\s*\.([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")


class TemplateContext(BaseModel):
    """The substitution variables for one strategy run."""

    model_config = ConfigDict(frozen=True)

    version: str
    os: str
    arch: str
    mapped_arch: str = ""

    def variables(self) -> dict[str, str]:
        return {
            "Version": self.version,
            "OS": self.os,
            "Arch": self.arch,
            "MappedArch": self.mapped_arch,
        }


def arch_key(system: System) -> str:
    """The arch-map key for a system, e.g. ``linux_amd64``."""
    return f"{system.os()}_{system.arch()}"


def resolve(version: str, arch_map: dict[str, str], system: System) -> TemplateContext:
    """Build the template context for ``version`` on ``system``."""
    key = arch_key(system)
    logger.debug("Arch key: %s", key)
    return TemplateContext(
        version=version,
        os=system.os(),
        arch=system.arch(),
        mapped_arch=arch_map.get(key, ""),
    )


def expand(context: TemplateContext, template: str) -> str:
    """Substitute every ``{{.Name}}`` placeholder in ``template``.

    Raises:
        TemplateError: unknown variable, or a stray ``{{`` / ``}}``.
    """
    leftover = _PLACEHOLDER_RE.sub("", template)
    if "{{" in leftover or "}}" in leftover:
        raise TemplateError(f"malformed template: {template!r}")

    variables = context.variables()

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in variables:
            known = ", ".join(f".{v}" for v in variables)
            raise TemplateError(
                f"unknown template variable '.{name}' in {template!r} (known: {known})"
            )
        return variables[name]

    return _PLACEHOLDER_RE.sub(_substitute, template)
