"""Tests for build descriptor detection."""
import pytest

from dockship.exceptions import DescriptorNotFoundError
from dockship.models.deployment import DeploymentType
from dockship.services.detector import compose_services, detect_deployment_type


class TestDetectDeploymentType:

    def test_dockerfile(self, tmp_path):
        (tmp_path / "Dockerfile").write_text("FROM alpine\n")
        assert detect_deployment_type(tmp_path) is DeploymentType.SINGLE_CONTAINER

    @pytest.mark.parametrize("name", ["docker-compose.yml", "docker-compose.yaml"])
    def test_compose_spellings(self, tmp_path, name):
        (tmp_path / name).write_text("services: {}\n")
        assert detect_deployment_type(tmp_path) is DeploymentType.MULTI_CONTAINER

    def test_dockerfile_wins(self, tmp_path):
        (tmp_path / "Dockerfile").write_text("FROM alpine\n")
        (tmp_path / "docker-compose.yml").write_text("services: {}\n")
        assert detect_deployment_type(tmp_path) is DeploymentType.SINGLE_CONTAINER

    def test_neither_present(self, tmp_path):
        (tmp_path / "README.md").write_text("hello\n")
        with pytest.raises(DescriptorNotFoundError) as exc_info:
            detect_deployment_type(tmp_path)

        assert "docker-compose.yaml" in str(exc_info.value)

    def test_directory_named_dockerfile_is_ignored(self, tmp_path):
        (tmp_path / "Dockerfile").mkdir()
        with pytest.raises(DescriptorNotFoundError):
            detect_deployment_type(tmp_path)


class TestComposeServices:

    def test_lists_services(self, tmp_path):
        (tmp_path / "docker-compose.yml").write_text(
            "services:\n  web:\n    build: .\n  db:\n    image: postgres\n"
        )
        assert compose_services(tmp_path) == ["db", "web"]

    def test_unparseable_file(self, tmp_path):
        (tmp_path / "docker-compose.yml").write_text("services: [unclosed\n")
        assert compose_services(tmp_path) == []

    def test_no_compose_file(self, tmp_path):
        assert compose_services(tmp_path) == []
