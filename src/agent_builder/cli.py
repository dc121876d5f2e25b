import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .assembler import GeneratedFile, Layout, ProjectAssembler
from .config import get_settings
from .display import (
    format_agent_usage,
    format_architecture,
    format_capabilities,
    format_file_tree,
    format_next_steps,
    format_patterns,
    format_section,
)
from .errors import AgentBuilderError, GcloudError
from .gcloud import GcloudService
from .loader import load_project, save_project
from .models import Agent, Project
from .prompts import Interactive, collect_agent, collect_project
from .writer import write_files

logger = logging.getLogger("agent_builder")


def _configure_logging(verbose: bool) -> None:
    settings = get_settings()
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, (settings.log_level or "WARNING").upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _apply_gcloud_defaults(project: Project, interactive: Optional[Interactive] = None) -> None:
    """Fill blank deployment fields from the local gcloud configuration."""
    if not project.include_deploy_script:
        return
    service = GcloudService()
    if not service.is_available():
        logger.debug("gcloud not available; leaving deployment defaults blank")
        return

    deployment = project.deployment
    try:
        found = {"project_id": service.get_project_id(), "region": service.get_region()}
    except GcloudError as e:
        logger.warning("Could not read gcloud config: %s", e)
        return

    labels = {"project_id": "project", "region": "region"}
    for field, value in found.items():
        if not value or getattr(deployment, field):
            continue
        if interactive is not None and not interactive.prompt_use_gcloud_value(labels[field], value):
            continue
        setattr(deployment, field, value)
        logger.info("Using gcloud %s %s", labels[field], value)


def _emit(output_dir: str, files: List[GeneratedFile], dry_run: bool) -> None:
    if dry_run:
        for generated in files:
            print(f"==> {generated.path} <==")
            print(generated.content)
        return
    write_files(output_dir, files)
    print(format_file_tree(output_dir, files))


def _create_single_agent(interactive: Interactive, args) -> int:
    agent: Agent = collect_agent(interactive)
    output_dir = args.output or interactive.prompt_output_directory(".")
    files = ProjectAssembler().assemble_agent(agent)
    _emit(output_dir, files, args.dry_run)
    if not args.dry_run:
        print()
        print(format_agent_usage(agent))
    return 0


def cmd_version(args):
    print(f"agent-builder {__version__}")
    return 0


def cmd_patterns(args):
    print(format_patterns(), end="")
    return 0


def cmd_capabilities(args):
    print(format_capabilities(), end="")
    return 0


def cmd_create(args):
    interactive = None
    if args.config:
        project = load_project(args.config)
    else:
        interactive = Interactive()
        if interactive.prompt_project_type() == "single":
            return _create_single_agent(interactive, args)
        project = collect_project(interactive)

    if args.output:
        project.output_directory = args.output
    project.validate()
    if not args.no_gcloud:
        _apply_gcloud_defaults(project, interactive)

    files = ProjectAssembler().assemble(project, layout=Layout(args.layout))
    if args.save_config and not args.dry_run:
        save_project(project, args.save_config)

    _emit(project.output_directory, files, args.dry_run)
    if not args.dry_run:
        print(format_section("✓ Multi-agent system created!"))
        print(format_architecture(project))
        print()
        print(format_next_steps(project))
    return 0


def cmd_add_agent(args):
    interactive = Interactive()
    return _create_single_agent(interactive, args)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent-builder",
        description="Scaffold Google ADK multi-agent projects",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    # version
    sub.add_parser("version", help="Show the tool version")

    # patterns
    sub.add_parser("patterns", help="List orchestration patterns")

    # capabilities
    sub.add_parser("capabilities", help="List built-in ADK tools")

    # create
    p_create = sub.add_parser("create", help="Create a multi-agent project")
    p_create.add_argument("--config", "-c", default=None, help="Topology YAML file (skips the prompts)")
    p_create.add_argument("--output", "-o", default=None, help="Output directory")
    p_create.add_argument(
        "--layout",
        choices=[layout.value for layout in Layout],
        default=Layout.MULTI.value,
        help="One folder per agent (multi) or a single agent module (flat)",
    )
    p_create.add_argument("--dry-run", action="store_true", help="Print files instead of writing them")
    p_create.add_argument("--save-config", default=None, help="Also save the topology as YAML")
    p_create.add_argument("--no-gcloud", action="store_true", help="Do not read defaults from gcloud")

    # add-agent
    p_agent = sub.add_parser("add-agent", help="Create a single agent module")
    p_agent.add_argument("--output", "-o", default=None, help="Output directory")
    p_agent.add_argument("--dry-run", action="store_true", help="Print the file instead of writing it")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 2

    _configure_logging(args.verbose)

    commands = {
        "version": cmd_version,
        "patterns": cmd_patterns,
        "capabilities": cmd_capabilities,
        "create": cmd_create,
        "add-agent": cmd_add_agent,
    }

    try:
        return commands[args.command](args)
    except AgentBuilderError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        print("\nAborted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
