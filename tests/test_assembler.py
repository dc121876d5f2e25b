import ast

import pytest

from agent_builder.assembler import GeneratedFile, Layout
from agent_builder.catalog import Capability
from agent_builder.errors import DuplicateNameError, MissingInstructionError, NoChildrenError
from agent_builder.models import Agent, AgentKind, Orchestrator, Project
from agent_builder.writer import write_files

from conftest import make_project


def _paths(files):
    return [f.path for f in files]


class TestAssemble:
    def test_default_file_set_in_order(self, assembler, project):
        assert _paths(assembler.assemble(project)) == [
            "research_coordinator/__init__.py",
            "research_coordinator/agent.py",
            "researcher/agent.py",
            "writer/agent.py",
            "main.py",
            "requirements.txt",
            "README.md",
            "deploy.py",
        ]

    def test_without_example(self, assembler):
        paths = _paths(assembler.assemble(make_project(include_example_entrypoint=False)))
        assert "main.py" not in paths
        assert "requirements.txt" in paths

    def test_all_toggles_off(self, assembler):
        project = make_project(
            include_example_entrypoint=False,
            include_readme=False,
            include_deploy_script=False,
        )
        assert _paths(assembler.assemble(project)) == [
            "research_coordinator/__init__.py",
            "research_coordinator/agent.py",
            "researcher/agent.py",
            "writer/agent.py",
            "requirements.txt",
        ]

    def test_docker(self, assembler):
        paths = _paths(assembler.assemble(make_project(include_docker=True)))
        assert paths.index("Dockerfile") + 1 == paths.index(".dockerignore")

    def test_flat_layout(self, assembler, project):
        files = assembler.assemble(project, layout=Layout.FLAT)
        assert _paths(files)[:2] == ["research_coordinator/__init__.py", "research_coordinator/agent.py"]
        assert "researcher/agent.py" not in _paths(files)
        assert "researcher = LlmAgent(" in files[1].content

    def test_flat_deploy_ships_only_orchestrator(self, assembler, project):
        deploy = next(f for f in assembler.assemble(project, layout=Layout.FLAT) if f.path == "deploy.py")
        assert '"./research_coordinator",' in deploy.content
        assert '"./researcher",' not in deploy.content

    def test_children_follow_insertion_order(self, assembler, researcher, writer):
        project = make_project()
        project.orchestrator.children = [writer, researcher]
        paths = _paths(assembler.assemble(project))
        assert paths.index("writer/agent.py") < paths.index("researcher/agent.py")

    def test_invalid_project_is_rejected(self, assembler):
        project = Project(name="p", orchestrator=Orchestrator(name="root"))
        with pytest.raises(NoChildrenError):
            assembler.assemble(project)

    def test_children_with_same_identifier_are_rejected(self, assembler):
        project = make_project()
        project.orchestrator.children = [
            Agent(name="Writer", instruction="first"),
            Agent(name="writer", instruction="second"),
        ]
        with pytest.raises(DuplicateNameError) as exc:
            assembler.assemble(project)
        assert str(exc.value) == "agents 'Writer' and 'writer' both become 'writer'"

    @pytest.mark.parametrize("layout", list(Layout))
    def test_child_matching_orchestrator_is_rejected(self, assembler, layout):
        project = Project(
            name="p",
            orchestrator=Orchestrator(
                name="Writer", children=[Agent(name="writer", instruction="x")]
            ),
        )
        with pytest.raises(DuplicateNameError):
            assembler.assemble(project, layout=layout)


def _module_bindings(source):
    names = set()
    for node in ast.parse(source).body:
        if isinstance(node, ast.Assign):
            names.update(t.id for t in node.targets if isinstance(t, ast.Name))
        elif isinstance(node, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
            names.add(node.name)
        elif isinstance(node, (ast.Import, ast.ImportFrom)):
            names.update(alias.asname or alias.name for alias in node.names)
    return names


def _agent_imports(source):
    """(module, name) pairs for every ``from <pkg>.agent import <name>``."""
    return [
        (node.module, alias.name)
        for node in ast.parse(source).body
        if isinstance(node, ast.ImportFrom) and (node.module or "").endswith(".agent")
        for alias in node.names
    ]


class TestGeneratedPython:
    @pytest.mark.parametrize("layout", list(Layout))
    def test_entrypoint_imports_are_bound(self, assembler, layout):
        files = {f.path: f.content for f in assembler.assemble(make_project(), layout=layout)}
        for path, content in files.items():
            if not path.endswith(".py"):
                continue
            for module, name in _agent_imports(content):
                target = module.replace(".", "/") + ".py"
                assert target in files, f"{path} imports missing module {module}"
                assert name in _module_bindings(files[target]), f"{path} imports {module}.{name}"

    @pytest.mark.parametrize("layout", list(Layout))
    def test_every_module_parses(self, assembler, layout):
        project = make_project(include_docker=True)
        project.orchestrator.children = [
            Agent(name="class", instruction="Say \"hi\"\nthen stop", output_key="greeting"),
            Agent(name="for", kind=AgentKind.CUSTOM, output_key="looped"),
            Agent(name="sequential", kind=AgentKind.CUSTOM),
            Agent(name="lambda", instruction="x", capabilities=[Capability.GOOGLE_SEARCH]),
        ]
        project.orchestrator.description = 'Ends with a quote "'
        for generated in assembler.assemble(project, layout=layout):
            if generated.path.endswith(".py"):
                ast.parse(generated.content, filename=generated.path)

    def test_keyword_child_gets_safe_folder(self, assembler):
        project = make_project()
        project.orchestrator.children = [Agent(name="class", instruction="x")]
        files = {f.path: f.content for f in assembler.assemble(project)}
        assert "class_/agent.py" in files
        assert "from class_.agent import agent as class_" in files["research_coordinator/agent.py"]


class TestAssembleAgent:
    def test_single_agent_is_one_file(self, assembler, custom_agent):
        files = assembler.assemble_agent(custom_agent)
        assert _paths(files) == ["data_processor/agent.py"]
        assert "class DataProcessorAgent(BaseAgent):" in files[0].content

    def test_single_agent_is_validated(self, assembler):
        with pytest.raises(MissingInstructionError):
            assembler.assemble_agent(Agent(name="mute"))


class TestWriter:
    def test_writes_nested_files(self, tmp_path, assembler, project):
        written = write_files(tmp_path / "out", assembler.assemble(project))
        assert (tmp_path / "out" / "research_coordinator" / "agent.py").exists()
        assert (tmp_path / "out" / "writer" / "agent.py").read_text().startswith('"""Writer (LLM Agent).')
        assert len(written) == 8

    def test_overwrites_existing(self, tmp_path):
        target = tmp_path / "main.py"
        target.write_text("old")
        write_files(tmp_path, [GeneratedFile("main.py", "new")])
        assert target.read_text() == "new"

    def test_nothing_to_write(self, tmp_path):
        assert write_files(tmp_path / "empty", []) == []
        assert not (tmp_path / "empty").exists()
