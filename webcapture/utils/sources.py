"""Capture source preparation.

Sources are URLs, literal HTML, or local files. HTML files become ``file://``
URLs and ``.txt`` files expand into one source per non-empty line. Lines read
from a list file are taken literally and are not resolved again.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .validators import is_existing_file, is_valid_html, is_valid_path, is_valid_url

logger = logging.getLogger(__name__)


def _expand_source(source: str, base_dir: Path) -> List[str]:
    if is_valid_url(source) or is_valid_html(source):
        return [source]

    if is_valid_path(source):
        path = Path(source).expanduser()
        if not path.is_absolute():
            path = base_dir / path

        if source.endswith(".html"):
            if not path.is_file():
                raise FileNotFoundError(f"HTML source file not found: {path}")
            return [path.resolve().as_uri()]

        if source.endswith(".txt"):
            # Missing list files raise FileNotFoundError here, before any capture
            content = path.read_text(encoding="utf-8")
            lines = [line.strip() for line in content.strip().splitlines()]
            entries = [line for line in lines if line]
            logger.debug(f"Expanded {path} into {len(entries)} sources")
            return entries

    return [source]


def prepare_sources(
    sources: Iterable[str],
    base_dir: Optional[Union[str, Path]] = None
) -> List[str]:
    """Normalize capture sources into a flat, de-duplicated list.

    Args:
        sources: Raw sources as supplied by the caller
        base_dir: Directory relative paths are resolved against (defaults to cwd)

    Returns:
        Sources in first-seen order with duplicates removed

    Raises:
        FileNotFoundError: If a referenced .html or .txt file does not exist
    """
    base = Path(base_dir) if base_dir else Path.cwd()

    prepared: List[str] = []
    for source in sources:
        prepared.extend(_expand_source(source, base))

    return list(dict.fromkeys(prepared))


def prepare_resource_options(resource: str) -> Dict[str, str]:
    """Classify a script or style resource for tag injection.

    Returns:
        ``{"url": ...}`` for URLs, ``{"path": ...}`` for existing files and
        ``{"content": ...}`` for inline code
    """
    if is_valid_url(resource):
        return {"url": resource}

    if is_existing_file(resource):
        return {"path": str(Path(resource).expanduser())}

    return {"content": resource}
