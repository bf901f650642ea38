"""Tests for Vagrant project scaffolding."""
import os
import shutil

import pytest

from vmscaffold.core.config import ScaffoldConfig
from vmscaffold.core.errors import (
    ErrorKind,
    InvalidNameError,
    NoMachinesError,
    ProjectExistsError,
    TemplateMissingError,
)
from vmscaffold.scaffold import ScaffoldManager
from vmscaffold.scaffold.core import normalize_machines, validate_name


class TestScaffoldProject:
    """Test end-to-end project scaffolding."""

    def test_scaffold_basic_project(self, manager, tmp_path, git_calls):
        """Scaffolding creates the base tree and initializes git."""
        repo_path = manager.scaffold_project("myproject", ["web", "db"])

        assert repo_path == tmp_path / "myproject"
        assert (repo_path / ".git").is_dir()
        assert (repo_path / "images" / ".gitkeep").is_file()
        assert (repo_path / "machines" / "common" / "provision" / "provision-common.sh").is_file()

        assert git_calls == [(("git", "init", "--quiet"), repo_path)]

    def test_per_machine_tree(self, manager):
        """Every requested machine gets files/, provision/ and a Vagrantfile."""
        repo_path = manager.scaffold_project("myproject", ["web", "db"])

        for machine in ("web", "db"):
            machine_path = repo_path / "machines" / f"myproject-{machine}"
            assert (machine_path / "files" / ".gitkeep").is_file()
            assert (machine_path / "provision" / f"provision-{machine}.sh").is_file()
            assert (machine_path / "Vagrantfile").is_file()

    def test_top_level_files(self, manager):
        """Project root gets docs, license and host scripts."""
        repo_path = manager.scaffold_project("myproject", ["web"])

        for name in (".gitignore", "LICENSE", "README.md"):
            assert (repo_path / name).is_file()
        for script in ("add-vbox-guest-additions", "start-vms", "stop-vms"):
            assert (repo_path / f"{script}.sh").is_file()
            assert (repo_path / f"{script}.bat").is_file()
            assert (repo_path / f"{script}.sh").stat().st_mode & 0o111

    def test_provision_scripts_executable(self, manager):
        repo_path = manager.scaffold_project("myproject", ["web"])

        common = repo_path / "machines" / "common" / "provision" / "provision-common.sh"
        web = repo_path / "machines" / "myproject-web" / "provision" / "provision-web.sh"
        assert common.stat().st_mode & 0o111
        assert web.stat().st_mode & 0o111

    def test_common_scaffolded_once(self, manager):
        """'common' is always created first and never duplicated."""
        repo_path = manager.scaffold_project("proj", ["common", "web", "common"])

        machines = sorted(p.name for p in (repo_path / "machines").iterdir())
        assert machines == ["common", "proj-web"]

    def test_common_without_being_listed(self, manager):
        repo_path = manager.scaffold_project("proj", ["web"])
        assert (repo_path / "machines" / "common").is_dir()

    def test_templates_receive_names(self, manager):
        """Template placeholders are filled with project and machine names."""
        repo_path = manager.scaffold_project("shop", ["web"])

        common = (repo_path / "machines" / "common" / "provision" / "provision-common.sh").read_text()
        assert "{{" not in common
        assert "shop" in common
        assert "mkdir -p /opt/shop" in common
        assert "cp -r /vagrant/files/. /opt/shop/" in common
        assert "|| true" not in common

        vagrantfile = (repo_path / "machines" / "shop-web" / "Vagrantfile").read_text()
        assert 'config.vm.hostname = "shop-web"' in vagrantfile
        assert 'config.vm.box = "ubuntu/jammy64"' in vagrantfile
        assert "../common/provision/provision-common.sh" in vagrantfile
        assert "provision/provision-web.sh" in vagrantfile

    def test_config_values_in_vagrantfile(self, tmp_path, git_calls):
        config = ScaffoldConfig(box="debian/bookworm64", memory=2048, cpus=2)
        manager = ScaffoldManager(config=config, output_dir=tmp_path)

        repo_path = manager.scaffold_project("lab", ["db"])

        vagrantfile = (repo_path / "machines" / "lab-db" / "Vagrantfile").read_text()
        assert 'config.vm.box = "debian/bookworm64"' in vagrantfile
        assert "vb.memory = 2048" in vagrantfile
        assert "vb.cpus = 2" in vagrantfile

    def test_readme_lists_machines_and_aliases(self, manager):
        repo_path = manager.scaffold_project("lab", ["web", "db"])

        readme = (repo_path / "README.md").read_text()
        assert readme.startswith("# lab")
        assert "`lab-web`" in readme
        assert "`lab-db`" in readme
        assert "alias lab-up=" in readme

    def test_license_holder_defaults_to_project(self, manager):
        repo_path = manager.scaffold_project("lab", ["web"])
        assert "lab" in (repo_path / "LICENSE").read_text()

    def test_no_git(self, tmp_path, git_calls):
        manager = ScaffoldManager(config=ScaffoldConfig(init_git=False), output_dir=tmp_path)

        repo_path = manager.scaffold_project("lab", ["web"])

        assert git_calls == []
        assert not (repo_path / ".git").exists()

    def test_working_directory_untouched(self, manager, tmp_path, monkeypatch):
        """Scaffolding never changes the process working directory."""
        monkeypatch.chdir(tmp_path)
        before = os.getcwd()

        manager.scaffold_project("lab", ["web"])

        assert os.getcwd() == before


class TestProjectDirectoryGuard:
    """Test the project directory existence check."""

    def test_returns_candidate_path(self, manager, tmp_path):
        assert manager.check_project_dir("fresh") == tmp_path / "fresh"
        assert not (tmp_path / "fresh").exists()

    def test_existing_directory_rejected(self, manager, tmp_path):
        (tmp_path / "taken").mkdir()

        with pytest.raises(ProjectExistsError) as exc_info:
            manager.check_project_dir("taken")

        assert exc_info.value.kind is ErrorKind.PROJECT_EXISTS
        assert exc_info.value.path == tmp_path / "taken"

    def test_existing_file_rejected(self, manager, tmp_path):
        (tmp_path / "taken").write_text("not a directory")

        with pytest.raises(ProjectExistsError):
            manager.check_project_dir("taken")

    def test_existing_project_left_untouched(self, manager, tmp_path):
        project = tmp_path / "taken"
        project.mkdir()
        (project / "notes.txt").write_text("keep me")

        with pytest.raises(ProjectExistsError):
            manager.scaffold_project("taken", ["web"])

        assert [p.name for p in project.iterdir()] == ["notes.txt"]
        assert (project / "notes.txt").read_text() == "keep me"

    def test_existing_project_checked_before_machine_names(self, manager, tmp_path):
        (tmp_path / "taken").mkdir()

        with pytest.raises(ProjectExistsError):
            manager.scaffold_project("taken", ["../escape"])

    def test_second_run_fails(self, manager):
        """Re-running with the same name fails rather than overwriting."""
        manager.scaffold_project("lab", ["web"])

        with pytest.raises(ProjectExistsError):
            manager.scaffold_project("lab", ["web"])


class TestScaffoldErrors:
    """Test error reporting for failed steps."""

    def test_no_machines(self, manager, tmp_path):
        with pytest.raises(NoMachinesError) as exc_info:
            manager.scaffold_project("lab", [])

        assert "lab" in str(exc_info.value)
        assert not (tmp_path / "lab").exists()

    def test_no_machines_checks_existing_dir_first(self, manager, tmp_path):
        (tmp_path / "lab").mkdir()

        with pytest.raises(ProjectExistsError):
            manager.scaffold_project("lab", [])

    def test_missing_template(self, tmp_path, git_calls):
        templates = tmp_path / "templates"
        templates.mkdir()
        manager = ScaffoldManager(
            config=ScaffoldConfig(templates_dir=templates), output_dir=tmp_path
        )

        with pytest.raises(TemplateMissingError) as exc_info:
            manager.scaffold_project("lab", ["web"])

        assert exc_info.value.kind is ErrorKind.TEMPLATE_MISSING
        assert exc_info.value.path == templates / "template-common-provision-sh"
        # partial tree stays behind
        assert (tmp_path / "lab" / "machines").is_dir()

    def test_missing_machine_template(self, tmp_path, git_calls):
        """Only the common template present: fails on the first real machine."""
        from vmscaffold.core.config import DEFAULT_TEMPLATES_DIR

        templates = tmp_path / "templates"
        templates.mkdir()
        shutil.copy(DEFAULT_TEMPLATES_DIR / "template-common-provision-sh", templates)
        manager = ScaffoldManager(
            config=ScaffoldConfig(templates_dir=templates), output_dir=tmp_path
        )

        with pytest.raises(TemplateMissingError):
            manager.scaffold_project("lab", ["web"])

        assert (tmp_path / "lab" / "machines" / "common" / "provision" / "provision-common.sh").is_file()

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b", "..\\up"])
    def test_invalid_project_name(self, manager, tmp_path, name):
        with pytest.raises(InvalidNameError):
            manager.scaffold_project(name, ["web"])

        assert list(tmp_path.iterdir()) == []

    def test_invalid_machine_name(self, manager, tmp_path):
        with pytest.raises(InvalidNameError):
            manager.scaffold_project("lab", ["web", "../escape"])

        assert not (tmp_path / "lab").exists()


class TestMachineNames:
    """Test machine name helpers."""

    def test_order_preserved(self):
        assert normalize_machines(["web", "db", "cache"]) == ["web", "db", "cache"]

    def test_common_and_duplicates_removed(self):
        assert normalize_machines(["db", "common", "web", "db"]) == ["db", "web"]

    def test_validate_name_returns_name(self):
        assert validate_name("web-1", "machine") == "web-1"


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_scaffold_with_real_git(tmp_path):
    """Real git init produces a repository."""
    manager = ScaffoldManager(output_dir=tmp_path)

    repo_path = manager.scaffold_project("real", ["web"])

    assert (repo_path / ".git").is_dir()
    assert (repo_path / ".git" / "HEAD").is_file()
