"""Tests for the config.yaml project registry."""

import pytest

from guild_hall.services.projects import ProjectConfigError, load_projects, load_registry


class TestLoadProjects:
    """Tests for load_projects / load_registry."""

    def test_missing_file_has_no_projects(self, tmp_path):
        assert load_projects(tmp_path / "config.yaml") == []

    def test_empty_file_has_no_projects(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_projects(path) == []

    def test_reads_projects_and_settings(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "projects:\n"
            "  - name: atlas\n"
            "    path: /work/atlas\n"
            "    description: Mapping tools\n"
            "    meetingCap: 3\n"
            "  - name: borealis\n"
            "    path: /work/borealis\n"
            "settings:\n"
            "  theme: dark\n"
        )

        registry = load_registry(path)

        assert [p.name for p in registry.projects] == ["atlas", "borealis"]
        assert registry.projects[0].meetingCap == 3
        assert registry.projects[1].description is None
        assert registry.settings == {"theme": "dark"}

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("projects: [unclosed\n")

        with pytest.raises(ProjectConfigError) as exc_info:
            load_projects(path)
        assert exc_info.value.path == path

    def test_schema_failure_names_the_field(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("projects:\n  - name: atlas\n")

        with pytest.raises(ProjectConfigError) as exc_info:
            load_projects(path)
        assert "projects.0.path" in exc_info.value.issues
