"""Turns a validated topology into an ordered set of output files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .code_generator import CodeGenerator, fold_name, get_code_generator
from .errors import DuplicateNameError
from .models import Agent, Orchestrator, Project

logger = logging.getLogger(__name__)

AGENT_MODULE = "agent.py"
AGENT_INIT = "__init__.py"


class Layout(str, Enum):
    MULTI = "multi"  # one folder per agent
    FLAT = "flat"  # every agent in the orchestrator's module


@dataclass(frozen=True)
class GeneratedFile:
    """One rendered artifact, relative to the project output directory."""

    path: str
    content: str


def check_unique_identifiers(orchestrator: Orchestrator) -> None:
    """Raise if two agents fold to the same identifier (and so the same folder)."""
    seen = {}
    for name in [orchestrator.name] + [child.name for child in orchestrator.children]:
        folded = fold_name(name)
        if folded in seen:
            raise DuplicateNameError(
                f"agents '{seen[folded]}' and '{name}' both become '{folded}'"
            )
        seen[folded] = name


class ProjectAssembler:
    """Renders every file of a project without touching the filesystem."""

    def __init__(self, generator: Optional[CodeGenerator] = None):
        self.generator = generator or get_code_generator()

    def assemble(self, project: Project, layout: Layout = Layout.MULTI) -> List[GeneratedFile]:
        """Validate ``project`` and render its files, orchestrator first.

        Stops at the first rendering error; nothing is written here, so a
        failure leaves no partial output behind until the writer runs.
        """
        project.validate()
        orchestrator = project.orchestrator
        check_unique_identifiers(orchestrator)
        gen = self.generator
        files: List[GeneratedFile] = []

        def add(path: str, render: Callable[[], str]) -> None:
            files.append(GeneratedFile(path, render()))
            logger.debug("Assembled %s", path)

        root_dir = fold_name(orchestrator.name)
        packages = [root_dir]

        add(f"{root_dir}/{AGENT_INIT}", gen.generate_agent_init_py)
        if layout is Layout.FLAT:
            add(f"{root_dir}/{AGENT_MODULE}", lambda: gen.generate_agent_py(project))
        else:
            add(f"{root_dir}/{AGENT_MODULE}", lambda: gen.generate_orchestrator_py(orchestrator))
            for child in orchestrator.children:
                child_dir = fold_name(child.name)
                packages.append(child_dir)
                add(f"{child_dir}/{AGENT_MODULE}", lambda child=child: gen.generate_sub_agent_py(child))

        if project.include_example_entrypoint:
            add("main.py", lambda: gen.generate_main_py(project))
        add("requirements.txt", lambda: gen.generate_requirements_txt(project))
        if project.include_readme:
            add("README.md", lambda: gen.generate_readme(project))
        if project.include_docker:
            add("Dockerfile", lambda: gen.generate_dockerfile(project))
            add(".dockerignore", gen.generate_dockerignore)
        if project.include_deploy_script:
            add("deploy.py", lambda: gen.generate_deploy_py(project, packages=packages))

        logger.info("Assembled %d files for project %s", len(files), project.name)
        return files

    def assemble_agent(self, agent: Agent) -> List[GeneratedFile]:
        """Single-agent layout: one module to drop into an existing project."""
        agent.validate()
        path = f"{fold_name(agent.name)}/{AGENT_MODULE}"
        return [GeneratedFile(path, self.generator.generate_sub_agent_py(agent))]
