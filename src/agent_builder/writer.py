"""Persists assembled files under an output directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Union

from .assembler import GeneratedFile

logger = logging.getLogger(__name__)


def write_files(output_dir: Union[str, Path], files: Iterable[GeneratedFile]) -> List[Path]:
    """Write each file, creating parent folders and overwriting what is there.

    Files are written in order; an error stops the loop and leaves the files
    already written in place.
    """
    root = Path(output_dir)
    written: List[Path] = []
    for generated in files:
        target = root / generated.path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(generated.content, encoding="utf-8")
        written.append(target)
        logger.info("Wrote %s", target)
    return written
