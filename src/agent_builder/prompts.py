"""Interactive question flow that collects a topology from the terminal.

Every answer is checked with the same rules the models use, and the question
is asked again until the answer passes. The collected values are handed to the
models already valid.
"""

from __future__ import annotations

import sys
from typing import Callable, List, Optional, TextIO

from .catalog import CAPABILITY_DESCRIPTIONS, Capability, list_all
from .config import Settings, get_settings
from .display import format_section
from .errors import ValidationError
from .models import (
    Agent,
    AgentKind,
    OrchestrationPattern,
    Orchestrator,
    Project,
    list_patterns,
    validate_name,
)

Validator = Callable[[str], None]


def validate_project_name(value: str) -> None:
    validate_name(value, "project")


def validate_agent_name(value: str) -> None:
    validate_name(value, "agent")


def validate_required(value: str) -> None:
    if not value.strip():
        raise ValueError("a value is required")


class Interactive:
    """Asks one question at a time on ``output`` and reads answers with ``input_fn``."""

    def __init__(
        self,
        input_fn: Optional[Callable[[str], str]] = None,
        output: Optional[TextIO] = None,
        settings: Optional[Settings] = None,
    ):
        self.input_fn = input_fn or input
        self.output = output or sys.stdout
        self.settings = settings or get_settings()

    def say(self, text: str = "") -> None:
        print(text, file=self.output)

    # ------------------------------------------------------------------
    # Primitive questions
    # ------------------------------------------------------------------

    def ask(self, message: str, default: str = "", validator: Optional[Validator] = None) -> str:
        suffix = f" ({default})" if default else ""
        while True:
            value = self.input_fn(f"? {message}{suffix} ").strip() or default
            if validator is None:
                return value
            try:
                validator(value)
            except (ValidationError, ValueError) as e:
                self.say(f"✗ {e}")
                continue
            return value

    def confirm(self, message: str, default: bool) -> bool:
        hint = "Y/n" if default else "y/N"
        while True:
            answer = self.input_fn(f"? {message} ({hint}) ").strip().lower()
            if not answer:
                return default
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            self.say("✗ please answer y or n")

    def select(self, message: str, options: List[str]) -> int:
        """Return the index of the chosen option."""
        self.say(f"? {message}")
        for i, option in enumerate(options, 1):
            self.say(f"  {i}) {option}")
        while True:
            answer = self.input_fn("  > ").strip()
            if answer.isdigit() and 1 <= int(answer) <= len(options):
                return int(answer) - 1
            self.say(f"✗ enter a number between 1 and {len(options)}")

    def multi_select(self, message: str, options: List[str]) -> List[int]:
        """Return chosen indexes in the order they were typed (comma separated)."""
        self.say(f"? {message}")
        for i, option in enumerate(options, 1):
            self.say(f"  {i:>2}) {option}")
        while True:
            answer = self.input_fn("  > ").strip()
            parts = [p.strip() for p in answer.split(",") if p.strip()]
            if parts and all(p.isdigit() and 1 <= int(p) <= len(options) for p in parts):
                return [int(p) - 1 for p in parts]
            self.say(f"✗ enter numbers between 1 and {len(options)}, separated by commas")

    # ------------------------------------------------------------------
    # Topology questions
    # ------------------------------------------------------------------

    def prompt_project_type(self) -> str:
        choice = self.select(
            "What do you want to create?",
            ["Full multi-agent project", "Single agent (add to an existing project)"],
        )
        return "full" if choice == 0 else "single"

    def prompt_project_name(self) -> str:
        return self.ask("Project name?", validator=validate_project_name)

    def prompt_orchestration_pattern(self) -> OrchestrationPattern:
        patterns = list_patterns()
        options = [f"{p.label} ({p.description})" for p in patterns]
        return patterns[self.select("Choose orchestration pattern:", options)]

    def prompt_orchestrator_name(self) -> str:
        return self.ask("Orchestrator name?", validator=validate_agent_name)

    def prompt_orchestrator_description(self) -> str:
        return self.ask("Orchestrator description?")

    def prompt_model(self, default_model: Optional[str] = None) -> str:
        return self.ask("Model?", default=default_model or self.settings.default_model)

    def prompt_agent_name(self, agent_number: int) -> str:
        return self.ask(f"Sub-agent #{agent_number} name?", validator=validate_agent_name)

    def prompt_agent_kind(self) -> AgentKind:
        options = [
            "LLM Agent (powered by language model)",
            "Custom Agent (your own Python class)",
        ]
        return [AgentKind.LLM, AgentKind.CUSTOM][self.select("Agent type:", options)]

    def prompt_agent_instruction(self, agent_name: str) -> str:
        return self.ask(f"Instruction for {agent_name}?", validator=validate_required)

    def prompt_output_key(self) -> str:
        return self.ask("Output key? (where to store result)")

    def prompt_add_capabilities(self) -> bool:
        return self.confirm("Add ADK tools to this agent?", default=False)

    def prompt_capabilities(self) -> List[Capability]:
        capabilities = list_all()
        options = [f"{c.value} - {CAPABILITY_DESCRIPTIONS[c]}" for c in capabilities]
        return [capabilities[i] for i in self.multi_select("Select ADK tools:", options)]

    def prompt_add_another_agent(self) -> bool:
        return self.confirm("Add another sub-agent?", default=True)

    def prompt_output_directory(self, default_dir: str) -> str:
        return self.ask("Output directory?", default=default_dir)

    def prompt_add_example(self) -> bool:
        return self.confirm("Generate example usage?", default=True)

    def prompt_add_docker(self) -> bool:
        return self.confirm("Add Docker support?", default=False)

    def prompt_use_gcloud_value(self, label: str, value: str) -> bool:
        return self.confirm(f"Use {label} '{value}' from gcloud config?", default=True)


# ============================================================================
# Flows
# ============================================================================

def collect_agent(interactive: Interactive, agent_number: int = 1) -> Agent:
    name = interactive.prompt_agent_name(agent_number)
    kind = interactive.prompt_agent_kind()
    instruction = ""
    if kind is AgentKind.LLM:
        instruction = interactive.prompt_agent_instruction(name)
    output_key = interactive.prompt_output_key()
    model = interactive.prompt_model()
    capabilities: List[Capability] = []
    if kind is AgentKind.LLM and interactive.prompt_add_capabilities():
        capabilities = interactive.prompt_capabilities()
    return Agent(
        name=name,
        kind=kind,
        instruction=instruction,
        output_key=output_key,
        model=model,
        capabilities=capabilities,
    )


def collect_project(interactive: Interactive) -> Project:
    """Run the full interview and return an unvalidated project."""
    interactive.say("Let's create your multi-agent system.")
    project_name = interactive.prompt_project_name()
    pattern = interactive.prompt_orchestration_pattern()

    interactive.say(format_section("ORCHESTRATOR CONFIGURATION"))
    orchestrator = Orchestrator(
        name=interactive.prompt_orchestrator_name(),
        pattern=pattern,
        description=interactive.prompt_orchestrator_description(),
        model=interactive.prompt_model(),
    )

    interactive.say(format_section("SUB-AGENTS CONFIGURATION"))
    agent_number = 1
    while True:
        agent = collect_agent(interactive, agent_number)
        orchestrator.add_child(agent)
        interactive.say(f'\n✓ Sub-agent "{agent.name}" added to {orchestrator.name}\n')
        if not interactive.prompt_add_another_agent():
            break
        agent_number += 1

    interactive.say(format_section("PROJECT SETUP"))
    project = Project(name=project_name, orchestrator=orchestrator)
    project.output_directory = interactive.prompt_output_directory(project.output_directory)
    project.include_example_entrypoint = interactive.prompt_add_example()
    project.include_docker = interactive.prompt_add_docker()
    return project
