"""Custom exception hierarchy for Orienty."""


class OrientyError(Exception):
    """Base exception for all Orienty errors."""


class ParseError(OrientyError):
    """Raised when YAML parsing or scene schema deserialization fails."""


class SceneError(OrientyError):
    """Raised when a scene graph is structurally invalid."""
