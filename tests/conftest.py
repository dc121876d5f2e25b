import pytest

from agent_builder.assembler import ProjectAssembler
from agent_builder.code_generator import CodeGenerator
from agent_builder.models import Agent, AgentKind, OrchestrationPattern, Orchestrator, Project


def _researcher() -> Agent:
    return Agent(
        name="Researcher",
        instruction="Research the topic",
        output_key="research_data",
    )


def _writer() -> Agent:
    return Agent(
        name="Writer",
        instruction="Write based on {research_data}",
        output_key="draft",
    )


def make_project(pattern=OrchestrationPattern.SEQUENTIAL, **overrides) -> Project:
    """The research/write pipeline used across the suite."""
    orchestrator = Orchestrator(
        name="ResearchCoordinator",
        pattern=pattern,
        children=[_researcher(), _writer()],
    )
    return Project(name="test-project", orchestrator=orchestrator, **overrides)


@pytest.fixture
def researcher():
    return _researcher()


@pytest.fixture
def writer():
    return _writer()


@pytest.fixture
def custom_agent():
    return Agent(name="data-processor", kind=AgentKind.CUSTOM, output_key="processed")


@pytest.fixture
def project():
    return make_project()


@pytest.fixture
def generator():
    return CodeGenerator()


@pytest.fixture
def assembler(generator):
    return ProjectAssembler(generator)
