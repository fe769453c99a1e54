"""
Generated file model — used by the artifact generators.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class GeneratedFile(BaseModel):
    """A file produced for the new project.

    Attributes:
        path:    Relative path from the project root.
        content: Full file content.
        reason:  Why this file was generated.
    """

    path: str
    content: str
    reason: str = ""

    def target(self, project_path: Path) -> Path:
        """Absolute destination inside *project_path*."""
        return project_path / self.path
