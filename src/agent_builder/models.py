"""Pydantic models for an orchestration topology."""

from __future__ import annotations

import re
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, model_validator

from .catalog import Capability
from .config import DEFAULT_MODEL
from .errors import (
    EmptyNameError,
    InvalidNameError,
    MissingInstructionError,
    MissingOrchestratorError,
    NoChildrenError,
    ValidationError,
)

NAME_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


# ============================================================================
# Enums
# ============================================================================

class AgentKind(str, Enum):
    LLM = "llm"
    CUSTOM = "custom"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if value.strip().lower() in (member.value, member.label.lower()):
                    return member
        return None

    @property
    def label(self) -> str:
        return "LLM Agent" if self is AgentKind.LLM else "Custom Agent"


class OrchestrationPattern(str, Enum):
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"
    LLM_COORDINATED = "llm-coordinated"
    LOOP = "loop"

    @classmethod
    def _missing_(cls, value):
        # Accept display labels and loose spellings ("LLMCoordinated", "Loop").
        if isinstance(value, str):
            wanted = re.sub(r"[^a-z]", "", value.lower())
            for member in cls:
                if wanted in (re.sub(r"[^a-z]", "", member.value), re.sub(r"[^a-z]", "", member.label.lower())):
                    return member
        return None

    @property
    def label(self) -> str:
        return PATTERN_INFO[self][0]

    @property
    def description(self) -> str:
        return PATTERN_INFO[self][1]


PATTERN_INFO: Dict[OrchestrationPattern, Tuple[str, str]] = {
    OrchestrationPattern.SEQUENTIAL: ("Sequential", "Sub-agents run one after another"),
    OrchestrationPattern.PARALLEL: ("Parallel", "Sub-agents run simultaneously"),
    OrchestrationPattern.LLM_COORDINATED: ("LLM-Coordinated", "Orchestrator decides which sub-agent to call"),
    OrchestrationPattern.LOOP: ("Loop", "Repeat sub-agents until condition met"),
}


def list_patterns() -> List[OrchestrationPattern]:
    return list(OrchestrationPattern)


def is_valid_name(value: str) -> bool:
    return bool(value) and NAME_PATTERN.fullmatch(value) is not None


def validate_name(value: str, subject: str = "agent") -> None:
    """Raise if ``value`` is not a usable project/agent name."""
    if not value:
        raise EmptyNameError(f"{subject} name cannot be empty")
    if not is_valid_name(value):
        raise InvalidNameError(
            f"{subject} name must contain only letters, numbers, hyphens, and underscores"
        )


# ============================================================================
# Topology
# ============================================================================

class Agent(BaseModel):
    """A single sub-agent. Immutable once built."""

    name: str
    kind: AgentKind = AgentKind.LLM
    instruction: str = ""
    output_key: str = ""
    model: str = DEFAULT_MODEL
    capabilities: List[Capability] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def is_llm(self) -> bool:
        return self.kind is AgentKind.LLM

    def validate(self) -> None:
        if not self.name:
            raise InvalidNameError("name cannot be empty")
        if not is_valid_name(self.name):
            raise InvalidNameError(
                "name must contain only letters, numbers, hyphens, and underscores"
            )
        if self.is_llm and not self.instruction:
            raise MissingInstructionError("instruction is required for LLM agents")


class Orchestrator(BaseModel):
    """Root agent that composes its children with one pattern."""

    name: str
    pattern: OrchestrationPattern = OrchestrationPattern.SEQUENTIAL
    description: str = ""
    model: str = DEFAULT_MODEL
    max_iterations: Optional[int] = Field(default=None, ge=1)
    children: List[Agent] = Field(default_factory=list)

    def add_child(self, agent: Agent) -> None:
        self.children.append(agent)

    def validate(self) -> None:
        if not self.children:
            raise NoChildrenError("orchestrator must have at least one sub-agent")
        if not self.name:
            raise EmptyNameError("orchestrator name cannot be empty")
        if not is_valid_name(self.name):
            raise EmptyNameError(
                "orchestrator name must contain only letters, numbers, hyphens, and underscores"
            )
        for agent in self.children:
            try:
                agent.validate()
            except ValidationError as e:
                raise e.wrap("sub-agent validation failed") from e


class DeploymentConfig(BaseModel):
    """Defaults baked into the generated deploy.py."""

    project_id: str = ""
    region: str = ""
    staging_bucket: str = ""


class Project(BaseModel):
    """Root aggregate: one orchestrator plus generation toggles."""

    name: str
    orchestrator: Optional[Orchestrator] = None
    output_directory: str = ""
    include_example_entrypoint: bool = True
    include_readme: bool = True
    include_docker: bool = False
    include_deploy_script: bool = True
    deployment: DeploymentConfig = Field(default_factory=DeploymentConfig)

    @model_validator(mode="after")
    def _default_output_directory(self) -> "Project":
        if not self.output_directory:
            self.output_directory = f"./{self.name}"
        return self

    def validate(self) -> None:
        if not self.name:
            raise EmptyNameError("project name cannot be empty")
        if not is_valid_name(self.name):
            raise InvalidNameError(
                "project name must contain only letters, numbers, hyphens, and underscores"
            )
        if self.orchestrator is None:
            raise MissingOrchestratorError("orchestrator is required")
        try:
            self.orchestrator.validate()
        except ValidationError as e:
            raise e.wrap("orchestrator validation failed") from e
