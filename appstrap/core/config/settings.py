"""
Installer settings — how this installer reaches its external tools.

Distinct from the user's ``Configuration``: these describe the template
package and the commands used to materialise it, not the answers given
for one project. Defaults target the PocketFrame application skeleton.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from appstrap.adapters.shell.command import MANDATORY_TIMEOUT, QUICK_TIMEOUT

STABILITY_LEVELS = ("dev", "alpha", "beta", "RC", "stable")


class InstallerSettings(BaseModel):
    """Template source, tool commands and timeouts."""

    template_package: str = "pocketframe/application"
    framework_name: str = "PocketFrame"

    required_tools: list[str] = Field(default_factory=lambda: ["composer", "php"])
    optional_tools: list[str] = Field(default_factory=lambda: ["node"])

    # ``{package}``, ``{name}`` and ``{stability}`` are substituted per run.
    create_command: list[str] = Field(
        default_factory=lambda: [
            "composer",
            "create-project",
            "{package}",
            "{name}",
            "--stability={stability}",
            "--no-interaction",
            "--remove-vcs",
        ]
    )
    key_command: list[str] = Field(default_factory=lambda: ["php", "pocket", "add:key"])
    node_install_command: list[str] = Field(default_factory=lambda: ["npm", "install"])
    serve_command: str = "php pocket serve"

    env_example_file: str = ".env.example"
    env_file: str = ".env"
    commit_message: str = "Initial commit by appstrap"

    quick_timeout: int = QUICK_TIMEOUT
    mandatory_timeout: int = MANDATORY_TIMEOUT

    telemetry_url: str = "https://telemetry.pocketframe.github.io/collect"
    docs_url: str = "https://pocketframe.github.io/docs"

    def render_create_command(self, name: str, stability: str) -> list[str]:
        """Substitute run values into ``create_command``."""
        return [
            part.format(package=self.template_package, name=name, stability=stability)
            for part in self.create_command
        ]
