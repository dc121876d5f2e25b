import sys
from typing import List

from .assembler import GeneratedFile
from .catalog import CAPABILITY_DESCRIPTIONS, list_all
from .code_generator import fold_name
from .models import Agent, Project, list_patterns

# ANSI color codes
_RESET = "\033[0m"
_GREEN = "\033[32m"
_CYAN = "\033[36m"
_DIM = "\033[2m"

RULE = "━" * 46


def _use_color() -> bool:
    return sys.stdout.isatty()


def _colorize(text: str, code: str) -> str:
    if _use_color():
        return f"{code}{text}{_RESET}"
    return text


def format_section(title: str) -> str:
    return f"\n{RULE}\n{title}\n{RULE}"


def format_patterns() -> str:
    lines = ["Available Orchestration Patterns:"]
    for pattern in list_patterns():
        lines.append(f"• {_colorize(pattern.label, _CYAN)}")
        lines.append(f"  {pattern.description}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def format_capabilities() -> str:
    capabilities = list_all()
    width = max(len(c.value) for c in capabilities)
    lines = ["Available ADK Tools:"]
    for capability in capabilities:
        desc = _colorize(CAPABILITY_DESCRIPTIONS[capability], _DIM)
        lines.append(f"  {capability.value:<{width}}  {desc}")
    return "\n".join(lines) + "\n"


def format_architecture(project: Project) -> str:
    orchestrator = project.orchestrator
    lines = ["System Architecture:", f"   {orchestrator.name} ({orchestrator.pattern.label})"]
    for i, agent in enumerate(orchestrator.children):
        branch = "└──" if i == len(orchestrator.children) - 1 else "├──"
        lines.append(f"   {branch} {agent.name} ({agent.kind.value})")
    return "\n".join(lines)


def format_file_tree(root: str, files: List[GeneratedFile]) -> str:
    lines = [_colorize(f"✓ {root.rstrip('/')}/", _GREEN)]
    for i, generated in enumerate(files):
        branch = "└──" if i == len(files) - 1 else "├──"
        lines.append(f"  {branch} {generated.path}")
    return "\n".join(lines)


def format_next_steps(project: Project) -> str:
    lines = [
        "Next steps:",
        f"  cd {project.output_directory}",
        "  pip install -r requirements.txt",
    ]
    if project.include_example_entrypoint:
        lines.append('  python main.py "Your prompt here"')
    lines.append("")
    lines.append("  # Or use the ADK web interface, then open http://localhost:8000")
    lines.append("  adk web")
    if project.include_deploy_script:
        lines.append("")
        lines.append("  # Deploy to Vertex AI Agent Engine")
        lines.append("  python deploy.py --help")
    return "\n".join(lines)


def format_agent_usage(agent: Agent) -> str:
    folder = fold_name(agent.name)
    return "\n".join(
        [
            "To use this agent in your project:",
            "   1. Import it in your orchestrator's agent.py:",
            f"      from {folder}.agent import agent as {folder}",
            "",
            "   2. Add it to your orchestrator's sub_agents list:",
            f"      sub_agents=[..., {folder}]",
            "",
            "Learn more: https://google.github.io/adk-docs/",
        ]
    )
