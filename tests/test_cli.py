import textwrap

import pytest

from agent_builder import __version__
from agent_builder import cli
from agent_builder.cli import _apply_gcloud_defaults, main

from conftest import make_project

TOPOLOGY = textwrap.dedent(
    """\
    name: test-project
    orchestrator:
      name: ResearchCoordinator
      children:
        - name: Researcher
          instruction: Research the topic
          output_key: research_data
        - name: Writer
          instruction: Write based on {research_data}
    """
)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "topology.yaml"
    path.write_text(TOPOLOGY)
    return path


def feed_input(monkeypatch, *answers):
    remaining = iter(answers)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(remaining))


class TestInfoCommands:
    def test_no_command(self, capsys):
        assert main([]) == 2

    def test_version(self, capsys):
        assert main(["version"]) == 0
        assert capsys.readouterr().out.strip() == f"agent-builder {__version__}"

    def test_patterns(self, capsys):
        assert main(["patterns"]) == 0
        out = capsys.readouterr().out
        assert "• LLM-Coordinated" in out
        assert "Sub-agents run simultaneously" in out

    def test_capabilities(self, capsys):
        assert main(["capabilities"]) == 0
        out = capsys.readouterr().out
        assert "google_search" in out
        assert "gke_code_executor" in out


class TestCreateFromConfig:
    def test_writes_project(self, tmp_path, config_file, capsys):
        out_dir = tmp_path / "out"
        assert main(["create", "--config", str(config_file), "--output", str(out_dir), "--no-gcloud"]) == 0
        assert (out_dir / "research_coordinator" / "agent.py").exists()
        assert (out_dir / "researcher" / "agent.py").exists()
        assert (out_dir / "requirements.txt").read_text().startswith("google-adk\n")
        out = capsys.readouterr().out
        assert "System Architecture:" in out
        assert "└── Writer (llm)" in out
        assert f"cd {out_dir}" in out

    def test_dry_run_writes_nothing(self, tmp_path, config_file, capsys):
        out_dir = tmp_path / "out"
        args = ["create", "-c", str(config_file), "-o", str(out_dir), "--dry-run", "--no-gcloud"]
        assert main(args) == 0
        assert not out_dir.exists()
        out = capsys.readouterr().out
        assert "==> research_coordinator/agent.py <==" in out
        assert "sub_agents=[researcher, writer]" in out

    def test_flat_layout(self, tmp_path, config_file):
        out_dir = tmp_path / "out"
        args = ["create", "-c", str(config_file), "-o", str(out_dir), "--layout", "flat", "--no-gcloud"]
        assert main(args) == 0
        assert not (out_dir / "researcher").exists()
        assert "researcher = LlmAgent(" in (out_dir / "research_coordinator" / "agent.py").read_text()

    def test_save_config(self, tmp_path, config_file):
        saved = tmp_path / "saved.yaml"
        args = ["create", "-c", str(config_file), "-o", str(tmp_path / "out"), "--no-gcloud",
                "--save-config", str(saved)]
        assert main(args) == 0
        assert "name: test-project" in saved.read_text()

    def test_invalid_topology(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("name: p\norchestrator:\n  name: root\n")
        assert main(["create", "-c", str(path), "--no-gcloud"]) == 1
        err = capsys.readouterr().err
        assert "Error: orchestrator validation failed: orchestrator must have at least one sub-agent" in err

    def test_missing_config(self, tmp_path, capsys):
        assert main(["create", "-c", str(tmp_path / "nope.yaml")]) == 1
        assert "cannot read" in capsys.readouterr().err


class TestInteractive:
    def test_add_agent(self, tmp_path, monkeypatch, capsys):
        feed_input(monkeypatch, "helper", "2", "", "")
        assert main(["add-agent", "--output", str(tmp_path)]) == 0
        assert "class HelperAgent(BaseAgent):" in (tmp_path / "helper" / "agent.py").read_text()
        assert "from helper.agent import agent as helper" in capsys.readouterr().out

    def test_create_single_agent(self, tmp_path, monkeypatch):
        feed_input(monkeypatch, "2", "solo", "1", "Do it", "", "", "n")
        assert main(["create", "--output", str(tmp_path)]) == 0
        assert (tmp_path / "solo" / "agent.py").exists()

    def test_create_full_project(self, tmp_path, monkeypatch):
        out_dir = tmp_path / "proj"
        feed_input(
            monkeypatch,
            "1",  # full project
            "proj", "2", "fan_out", "", "",
            "a", "1", "Do a", "", "", "n",
            "n",
            "", "n", "",
        )
        assert main(["create", "--output", str(out_dir), "--no-gcloud"]) == 0
        assert "ParallelAgent" in (out_dir / "fan_out" / "agent.py").read_text()
        assert not (out_dir / "main.py").exists()

    def test_aborted(self, monkeypatch, capsys):
        def closed(prompt=""):
            raise EOFError

        monkeypatch.setattr("builtins.input", closed)
        assert main(["add-agent"]) == 130
        assert "Aborted." in capsys.readouterr().err


class FakeGcloud:
    available = True
    project_id = "gcp-project"

    def is_available(self):
        return self.available

    def get_project_id(self):
        return self.project_id

    def get_region(self):
        return ""


class TestGcloudDefaults:
    def test_fills_blank_fields(self, monkeypatch):
        monkeypatch.setattr(cli, "GcloudService", FakeGcloud)
        project = make_project()
        _apply_gcloud_defaults(project)
        assert project.deployment.project_id == "gcp-project"
        assert project.deployment.region == ""

    def test_keeps_configured_values(self, monkeypatch):
        monkeypatch.setattr(cli, "GcloudService", FakeGcloud)
        project = make_project()
        project.deployment.project_id = "mine"
        _apply_gcloud_defaults(project)
        assert project.deployment.project_id == "mine"

    def test_skipped_without_deploy_script(self, monkeypatch):
        monkeypatch.setattr(cli, "GcloudService", FakeGcloud)
        project = make_project(include_deploy_script=False)
        _apply_gcloud_defaults(project)
        assert project.deployment.project_id == ""
