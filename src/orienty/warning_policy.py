"""Coded diagnostics raised while loading scene descriptions.

Loader problems that still leave a usable scene graph (a dangling bone
reference, a drifting quaternion, bones that differ only in case) are
reported as ``OrientyWarning`` instances tagged with a W-code and the
offending node. A ``WarningPolicy`` lets callers silence codes or promote
them to ``SceneError``.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Literal

from orienty.errors import SceneError

WARNING_CODES: dict[str, str] = {
    "W01": "skinned mesh references an unknown bone",
    "W02": "rotation quaternion is not unit length",
    "W03": "bone names collide case-insensitively",
}
KNOWN_CODES: frozenset[str] = frozenset(WARNING_CODES)

Action = Literal["ignore", "error", "warn"]


class OrientyWarning(UserWarning):
    """Loader warning carrying its W-code and the node it concerns."""

    def __init__(self, code: str, message: str, *, node: str | None = None) -> None:
        self.code = code
        self.node = node
        super().__init__(f"[{code}] {message}")


@dataclass(frozen=True)
class WarningPolicy:
    """Per-code handling of loader warnings. Suppression beats promotion."""

    warn_as_error: frozenset[str] = frozenset()
    suppress: frozenset[str] = frozenset()

    @classmethod
    def from_options(
        cls, warn_as_error: str | None, suppress: str | None
    ) -> WarningPolicy | None:
        """Build a policy from comma-separated code lists; None when both are unset."""
        if warn_as_error is None and suppress is None:
            return None
        return cls(
            warn_as_error=parse_code_list(warn_as_error or ""),
            suppress=parse_code_list(suppress or ""),
        )

    def action(self, code: str) -> Action:
        if code in self.suppress:
            return "ignore"
        if code in self.warn_as_error:
            return "error"
        return "warn"


def emit_warning(
    code: str,
    message: str,
    *,
    node: str | None = None,
    policy: WarningPolicy | None = None,
) -> None:
    """Report a loader diagnostic according to ``policy``.

    Raises:
        ValueError: ``code`` is not one of ``WARNING_CODES``.
        SceneError: The policy promotes ``code`` to an error.
    """
    if code not in WARNING_CODES:
        raise ValueError(f"Unknown warning code: {code!r}")

    action = policy.action(code) if policy is not None else "warn"
    if action == "ignore":
        return
    if action == "error":
        raise SceneError(f"[{code}] {message}")
    warnings.warn(OrientyWarning(code, message, node=node), stacklevel=2)


def parse_code_list(raw: str) -> frozenset[str]:
    """Parse ``"W01, w03"`` style input into a set of known codes."""
    codes = {token.strip().upper() for token in raw.split(",") if token.strip()}
    unknown = sorted(codes - KNOWN_CODES)
    if unknown:
        known = ", ".join(f"{c} ({WARNING_CODES[c]})" for c in sorted(WARNING_CODES))
        raise ValueError(f"Unknown warning code: {', '.join(unknown)}. Known codes: {known}")
    return frozenset(codes)
