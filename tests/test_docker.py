"""
Tests for Docker artifact generation.
"""

from pathlib import Path

import yaml

from appstrap.core.engine.rollback import RollbackManager
from appstrap.core.models.config import Configuration
from appstrap.core.services.docker_manifest import docker_files, write_docker_files
from appstrap.core.services.generators.compose import build_compose_manifest, generate_compose
from appstrap.core.services.generators.dockerfile import generate_dockerfile


def _config(driver: str) -> Configuration:
    return Configuration.from_flat(
        {"db_driver": driver, "db_name": "blog", "db_user": "u", "with_docker": True}
    )


class TestComposeManifest:
    def test_mysql(self):
        manifest = build_compose_manifest(_config("mysql"))
        services = manifest["services"]
        assert list(services) == ["app", "db", "phpmyadmin"]
        assert services["db"]["image"] == "mysql:8.0"
        assert services["db"]["volumes"] == ["db_data:/var/lib/mysql"]
        assert services["app"]["environment"] == {"DB_HOST": "db", "DB_PORT": "3306"}
        assert services["phpmyadmin"]["ports"] == ["8080:80"]
        assert manifest["volumes"] == {"db_data": {}}

    def test_pgsql(self):
        services = build_compose_manifest(_config("pgsql"))["services"]
        assert services["db"]["image"] == "postgres:15"
        assert services["app"]["environment"]["DB_PORT"] == "5432"

    def test_sqlite_is_app_only(self):
        manifest = build_compose_manifest(Configuration(with_docker=True))
        assert list(manifest["services"]) == ["app"]
        assert "depends_on" not in manifest["services"]["app"]
        assert "volumes" not in manifest

    def test_rendered_yaml_round_trips(self):
        generated = generate_compose(_config("mysql"))
        assert generated.path == "compose.yml"
        assert yaml.safe_load(generated.content) == build_compose_manifest(_config("mysql"))

    def test_deterministic(self):
        assert generate_compose(_config("pgsql")).content == generate_compose(_config("pgsql")).content


class TestDockerfile:
    def test_static_content(self):
        generated = generate_dockerfile()
        assert generated.path == "Dockerfile"
        assert generated.content.startswith("# ")
        assert "FROM php:8.2-apache" in generated.content
        assert "pdo_mysql" in generated.content


class TestWriteDockerFiles:
    def test_writes_both_files(self, tmp_path: Path):
        written = write_docker_files(tmp_path, _config("mysql"))
        assert [p.name for p in written] == ["Dockerfile", "compose.yml"]
        assert (tmp_path / "compose.yml").read_text() == generate_compose(_config("mysql")).content

    def test_registers_removal_for_each_file(self, tmp_path: Path):
        rollback = RollbackManager()
        write_docker_files(tmp_path, _config("pgsql"), rollback)
        assert [a.name for a in rollback.actions] == ["remove Dockerfile", "remove compose.yml"]
        rollback.execute_all()
        assert not (tmp_path / "Dockerfile").exists()
        assert not (tmp_path / "compose.yml").exists()

    def test_docker_files(self):
        assert [f.path for f in docker_files(_config("mysql"))] == ["Dockerfile", "compose.yml"]
