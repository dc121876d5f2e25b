"""Load and save topologies as YAML files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError as SchemaError

from .config import Settings, get_settings
from .errors import LoaderError
from .models import Project

logger = logging.getLogger(__name__)


def load_project(path: Union[str, Path], settings: Optional[Settings] = None) -> Project:
    """Read a topology file. The result still has to pass ``Project.validate()``."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LoaderError(f"cannot read {path}: {e}") from e
    logger.debug("Loading topology from %s", path)
    return parse_project(text, settings=settings, source=str(path))


def parse_project(text: str, settings: Optional[Settings] = None, source: str = "<string>") -> Project:
    settings = settings or get_settings()
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise LoaderError(f"{source}: invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise LoaderError(f"{source}: expected a mapping at the top level")

    _fill_default_models(data, settings.default_model)
    try:
        return Project.model_validate(data)
    except SchemaError as e:
        raise LoaderError(f"{source}: {e}") from e


def dump_project(project: Project) -> str:
    """Serialize a project so it can be reloaded with ``parse_project``."""
    data = project.model_dump(mode="json")
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def save_project(project: Project, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_project(project), encoding="utf-8")
    logger.info("Saved topology to %s", path)
    return path


def _fill_default_models(data: Dict[str, Any], default_model: str) -> None:
    orchestrator = data.get("orchestrator")
    if not isinstance(orchestrator, dict):
        return
    orchestrator.setdefault("model", default_model)
    for child in orchestrator.get("children") or []:
        if isinstance(child, dict):
            child.setdefault("model", default_model)
