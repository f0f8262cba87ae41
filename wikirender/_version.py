"""Package version: installed distribution metadata, else pyproject.toml."""
from __future__ import annotations

import re
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

_PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def _from_pyproject() -> str:
    try:
        text = _PYPROJECT.read_text()
    except OSError:
        return "0.0.0"
    match = re.search(r'^version\s*=\s*"([^"]+)"', text, re.MULTILINE)
    return match.group(1) if match else "0.0.0"


try:
    __version__: str = version("wikirender")
except PackageNotFoundError:
    # source checkout, never installed
    __version__ = _from_pyproject()
