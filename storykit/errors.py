"""
storykit — error taxonomy.

Extraction leniency is deliberately absent from this module: malformed query
values fall back to defaults and never raise.
"""

from __future__ import annotations


class StorybookError(Exception):
    """Base class for every error raised by storykit and storyhost."""


class ConfigurationError(StorybookError):
    """A required external program is not available on PATH."""

    def __init__(self, dependency: str, message: str):
        self.dependency = dependency
        super().__init__(message)


class BuildError(StorybookError):
    """A build pipeline stage failed."""

    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"build: {stage} stage failed: {message}")


class DispatchError(StorybookError):
    """A component constructor could not be invoked as registered."""


class ArityMismatch(DispatchError):
    def __init__(self, component: str, expected: int, actual: int):
        self.component = component
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"storybook: component {component} expects {expected} argument(s), but {actual} were provided"
        )


class InvalidComponentSignature(DispatchError):
    def __init__(self, component: str, function: str, reason: str):
        self.component = component
        self.function = function
        super().__init__(f"storybook: component {component} (function {function}) {reason}")
