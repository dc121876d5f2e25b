"""agent-builder: scaffold Google ADK multi-agent projects."""

__version__ = "0.1.0"

from .assembler import GeneratedFile, Layout, ProjectAssembler
from .catalog import Capability, describe, list_all
from .code_generator import CodeGenerator, fold_name, get_code_generator
from .errors import AgentBuilderError, ValidationError
from .loader import load_project, save_project
from .models import Agent, AgentKind, OrchestrationPattern, Orchestrator, Project
from .writer import write_files

__all__ = [
    "__version__",
    "Agent",
    "AgentBuilderError",
    "AgentKind",
    "Capability",
    "CodeGenerator",
    "GeneratedFile",
    "Layout",
    "OrchestrationPattern",
    "Orchestrator",
    "Project",
    "ProjectAssembler",
    "ValidationError",
    "describe",
    "fold_name",
    "get_code_generator",
    "list_all",
    "load_project",
    "save_project",
    "write_files",
]
