"""
Prompt documents served by the MCP server.

The markdown files ship as package data next to this module, so they are
found the same way from a source checkout and from an installed wheel.
"""

from importlib import resources
from typing import Optional

USAGE_GUIDE_FILE = "USAGE_GUIDE.md"


def load_prompt(filename: str) -> Optional[str]:
    """Read a prompt document, or None when it is not shipped"""
    resource = resources.files(__name__).joinpath(filename)
    if not resource.is_file():
        return None
    return resource.read_text(encoding="utf-8")


__all__ = ['USAGE_GUIDE_FILE', 'load_prompt']
