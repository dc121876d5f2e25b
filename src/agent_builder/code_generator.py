"""
Code Generator - Renders ADK source files from a topology.

The templates live in ``agent_builder/templates`` and are loaded once per
process. Everything a template needs beyond the model objects (identifier
folding, class selection, import lists, string escaping) is registered on the
Jinja2 environment as a filter or global.
"""

from __future__ import annotations

import keyword
import logging
from functools import lru_cache
from typing import Any, Iterable, List, Optional, Union

from jinja2 import Environment, PackageLoader, StrictUndefined
from jinja2 import TemplateError as JinjaTemplateError

from .catalog import describe
from .errors import TemplateError
from .models import Agent, AgentKind, OrchestrationPattern, Orchestrator, Project

logger = logging.getLogger(__name__)

CORE_DEPENDENCY = "google-adk"
DEPLOY_DEPENDENCY = "google-cloud-aiplatform[adk,agent_engines]"

BASE_AGENT_CLASS = "LlmAgent"

# Classes imported by the templates; a custom agent class must not shadow them.
ADK_AGENT_CLASSES = frozenset(
    ["BaseAgent", "LlmAgent", "SequentialAgent", "ParallelAgent", "LoopAgent"]
)

AGENT_CLASSES = {
    OrchestrationPattern.SEQUENTIAL: "SequentialAgent",
    OrchestrationPattern.PARALLEL: "ParallelAgent",
    OrchestrationPattern.LLM_COORDINATED: "LlmAgent",
    OrchestrationPattern.LOOP: "LoopAgent",
}


# ============================================================================
# Helpers
# ============================================================================

def escape_triple_quoted(s: str) -> str:
    """Escape a string for use in Python triple-quoted strings (triple double-quotes).

    Handles: backslashes, triple-quote sequences, and trailing quotes
    """
    if not s:
        return ""
    s = s.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    # A trailing quote would merge with the closing delimiter
    if s.endswith('"'):
        s = s + " "
    return s


def escape_double_quoted(s: str) -> str:
    """Escape a string for use in Python double-quoted strings.

    Handles: backslashes, double-quotes, newlines, tabs, carriage returns
    """
    if not s:
        return ""
    s = s.replace("\\", "\\\\")
    s = s.replace('"', '\\"')
    s = s.replace("\n", "\\n")
    s = s.replace("\r", "\\r")
    s = s.replace("\t", "\\t")
    return s


def fold_name(name: str) -> str:
    """Fold a human-entered name into a snake_case Python identifier.

    Hyphens become underscores and an underscore is inserted where a new word
    starts: an upper-case letter after a lower-case letter or digit, or the
    last capital of an acronym when a lower-case letter follows it.

        APICoordinator -> api_coordinator
        data-processor -> data_processor

    Results that would not be usable identifiers get an extra underscore:
    a leading digit is prefixed (``2fast -> _2fast``) and a Python keyword
    is suffixed (``class -> class_``).
    """
    s = name.replace("-", "_")
    out = []
    for i, ch in enumerate(s):
        if i > 0 and ch.isupper():
            prev = s[i - 1]
            nxt = s[i + 1] if i + 1 < len(s) else ""
            if prev.islower() or prev.isdigit() or (prev.isupper() and nxt.islower()):
                out.append("_")
        out.append(ch)
    folded = "".join(out).lower()
    if folded and folded[0].isdigit():
        folded = "_" + folded
    if keyword.iskeyword(folded):
        folded += "_"
    return folded


def class_name(name: str) -> str:
    """PascalCase class name for a custom agent, always ending in ``Agent``."""
    parts = [p for p in fold_name(name).split("_") if p]
    base = "".join(p[:1].upper() + p[1:] for p in parts) or "Custom"
    if base[0].isdigit():
        base = "_" + base
    if not base.endswith("Agent"):
        base += "Agent"
    if base in ADK_AGENT_CLASSES:
        base = "Custom" + base
    return base


def agent_class(pattern: Union[OrchestrationPattern, str]) -> str:
    """ADK composition class for a pattern; unknown values get SequentialAgent."""
    try:
        return AGENT_CLASSES[OrchestrationPattern(pattern)]
    except (ValueError, KeyError):
        return "SequentialAgent"


def composition_imports(pattern: Union[OrchestrationPattern, str]) -> List[str]:
    imports = [BASE_AGENT_CLASS]
    root_class = agent_class(pattern)
    if root_class != BASE_AGENT_CLASS:
        imports.append(root_class)
    return imports


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def capability_listing(agent: Agent) -> List[str]:
    """Capabilities in entry order, duplicates kept (for people to read)."""
    return [c.value for c in agent.capabilities]


def capability_imports(agent: Agent) -> List[str]:
    """Capabilities to import: duplicates dropped, first occurrence wins."""
    return _unique(capability_listing(agent))


def has_capabilities(agent: Agent) -> bool:
    return agent.is_llm and len(agent.capabilities) > 0


def project_capability_imports(orchestrator: Orchestrator) -> List[str]:
    return _unique(
        name
        for child in orchestrator.children
        if has_capabilities(child)
        for name in capability_imports(child)
    )


def has_custom_children(orchestrator: Orchestrator) -> bool:
    return any(child.kind is AgentKind.CUSTOM for child in orchestrator.children)


def coordinator_instruction(orchestrator: Orchestrator) -> str:
    """Default routing instruction for an LLM-coordinated orchestrator."""
    lines = [f"You are {fold_name(orchestrator.name)}."]
    if orchestrator.description:
        lines.append(orchestrator.description)
    lines.append("Delegate each request to the most suitable sub-agent:")
    for child in orchestrator.children:
        line = f"- {fold_name(child.name)}"
        if child.output_key:
            line += f" (stores its result in '{child.output_key}')"
        lines.append(line)
    return "\n".join(lines)


def dependencies(project: Optional[Project] = None) -> List[str]:
    deps = [CORE_DEPENDENCY]
    if project is not None and project.include_deploy_script:
        deps.append(DEPLOY_DEPENDENCY)
    return deps


def build_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("agent_builder", "templates"),
        autoescape=False,  # Python and Markdown, not HTML
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["fold"] = fold_name
    env.filters["class_name"] = class_name
    env.filters["py_str"] = escape_double_quoted
    env.filters["py_doc"] = escape_triple_quoted
    env.globals.update(
        agent_class=agent_class,
        composition_imports=composition_imports,
        capability_imports=capability_imports,
        capability_listing=capability_listing,
        has_capabilities=has_capabilities,
        project_capability_imports=project_capability_imports,
        has_custom_children=has_custom_children,
        coordinator_instruction=coordinator_instruction,
        describe_capability=describe,
        dependencies=dependencies,
        AgentKind=AgentKind,
        OrchestrationPattern=OrchestrationPattern,
    )
    return env


# ============================================================================
# Renderer
# ============================================================================

class CodeGenerator:
    """Renders each artifact kind from its template."""

    def __init__(self, env: Optional[Environment] = None):
        self.env = env or build_environment()

    def render(self, template_name: str, artifact: Optional[str] = None, **context: Any) -> str:
        """Render one template; any Jinja2 failure becomes a TemplateError."""
        try:
            template = self.env.get_template(template_name)
            content = template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"failed to generate {artifact or template_name}: {e}") from e
        logger.debug("Rendered %s (%d chars)", template_name, len(content))
        return content

    def generate_orchestrator_py(self, orchestrator: Orchestrator) -> str:
        return self.render(
            "orchestrator_agent.py.j2", "orchestrator agent.py", orchestrator=orchestrator
        )

    def generate_sub_agent_py(self, agent: Agent) -> str:
        return self.render("agent_single.py.j2", "sub-agent agent.py", agent=agent)

    def generate_agent_py(self, project: Project) -> str:
        """All agents of the project in one module."""
        return self.render(
            "agent.py.j2", "agent.py", project=project, orchestrator=project.orchestrator
        )

    def generate_agent_init_py(self) -> str:
        return self.render("agent_init.py.j2", "__init__.py")

    def generate_main_py(self, project: Project) -> str:
        return self.render(
            "main.py.j2", "main.py", project=project, orchestrator=project.orchestrator
        )

    def generate_requirements_txt(self, project: Optional[Project] = None) -> str:
        return self.render("requirements.txt.j2", "requirements.txt", project=project)

    def generate_readme(self, project: Project) -> str:
        return self.render(
            "README.md.j2", "README.md", project=project, orchestrator=project.orchestrator
        )

    def generate_dockerfile(self, project: Project) -> str:
        return self.render(
            "Dockerfile.j2", "Dockerfile", project=project, orchestrator=project.orchestrator
        )

    def generate_dockerignore(self) -> str:
        return self.render("dockerignore.j2", ".dockerignore")

    def generate_deploy_py(self, project: Project, packages: Optional[List[str]] = None) -> str:
        """``packages`` are the agent folders shipped with the deployment."""
        if packages is None:
            orchestrator = project.orchestrator
            packages = [fold_name(orchestrator.name)] + [
                fold_name(child.name) for child in orchestrator.children
            ]
        return self.render(
            "deploy.py.j2",
            "deploy.py",
            project=project,
            orchestrator=project.orchestrator,
            packages=packages,
        )


@lru_cache(maxsize=1)
def get_code_generator() -> CodeGenerator:
    """Process-wide generator; the template environment is built once."""
    return CodeGenerator()
