"""Error taxonomy for topology validation and code generation."""

from __future__ import annotations

from enum import Enum


class AgentBuilderError(Exception):
    """Base class for every error raised by agent-builder."""


class ValidationCode(str, Enum):
    EMPTY_NAME = "empty_name"
    INVALID_NAME = "invalid_name"
    MISSING_INSTRUCTION = "missing_instruction"
    NO_CHILDREN = "no_children"
    MISSING_ORCHESTRATOR = "missing_orchestrator"
    DUPLICATE_NAME = "duplicate_name"


class ValidationError(AgentBuilderError):
    """A user-fixable problem with the topology.

    Subclasses carry a fixed ``code``. Nested entities re-raise their
    children's errors through :meth:`wrap`, which keeps the class (and code)
    but prefixes the message with the failing level.
    """

    code: ValidationCode

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def wrap(self, context: str) -> "ValidationError":
        wrapped = type(self)(f"{context}: {self.message}")
        wrapped.__cause__ = self
        return wrapped


class EmptyNameError(ValidationError):
    code = ValidationCode.EMPTY_NAME


class InvalidNameError(ValidationError):
    code = ValidationCode.INVALID_NAME


class MissingInstructionError(ValidationError):
    code = ValidationCode.MISSING_INSTRUCTION


class NoChildrenError(ValidationError):
    code = ValidationCode.NO_CHILDREN


class MissingOrchestratorError(ValidationError):
    code = ValidationCode.MISSING_ORCHESTRATOR


class DuplicateNameError(ValidationError):
    code = ValidationCode.DUPLICATE_NAME


class TemplateError(AgentBuilderError):
    """A packaged template is missing or malformed."""


class LoaderError(AgentBuilderError):
    """A topology file could not be read or parsed."""


class GcloudError(AgentBuilderError):
    """The gcloud CLI returned an error."""
