"""Bruno collection loader.

Finds every ``.bru`` file under a collection root and parses it,
tagging each request with the folder it lives in.
"""

import logging
from pathlib import Path

from .base import Request
from .bru import parse_bru_file

logger = logging.getLogger(__name__)

BRU_SUFFIX = ".bru"


def collect_bru_files(root: Path) -> list[Path]:
    """Return all ``.bru`` files below ``root`` in lexical walk order."""
    if not root.exists():
        raise FileNotFoundError(f"Collection directory not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")
    return sorted(p for p in root.rglob(f"*{BRU_SUFFIX}") if p.is_file())


def tag_for(root: Path, file_path: Path) -> str:
    """Folder of ``file_path`` relative to ``root``; empty at the top level."""
    rel = file_path.parent.relative_to(root).as_posix()
    return "" if rel == "." else rel


def load_collection(root: Path) -> list[Request]:
    """Parse every request file in a collection, in discovery order."""
    requests = []
    for file_path in collect_bru_files(root):
        request = parse_bru_file(file_path)
        tag = tag_for(root, file_path)
        if tag:
            request = request.model_copy(update={"tag": tag})
        logger.debug("Parsed %s -> %s %s", file_path, request.method.upper(), request.url)
        requests.append(request)
    return requests
