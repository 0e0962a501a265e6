"""Tests for the local host: files, directory listing, terminal and execution."""

import os
import shutil
import sys
from unittest.mock import AsyncMock

import pytest

from pseudoide.config import WorkbenchConfig
from pseudoide.host.base import ExecutionError, HostError, ProjectData
from pseudoide.host.local import LocalHost, format_output

posix_only = pytest.mark.skipif(os.name == "nt", reason="uses sh")
needs_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


@pytest.fixture
def host(tmp_path):
    config = WorkbenchConfig(workspace=str(tmp_path), python_command=sys.executable, command_timeout=30)
    return LocalHost(config)


class TestFiles:
    @pytest.mark.asyncio
    async def test_write_then_read_relative(self, host, tmp_path):
        await host.write_file("main.pseudo", "PRINT 1")
        assert (tmp_path / "main.pseudo").read_text() == "PRINT 1"
        assert await host.read_file("main.pseudo") == "PRINT 1"

    @pytest.mark.asyncio
    async def test_absolute_path(self, host, tmp_path):
        target = tmp_path / "abs.py"
        target.write_text("x = 1")
        assert await host.read_file(str(target)) == "x = 1"

    @pytest.mark.asyncio
    async def test_read_missing(self, host):
        with pytest.raises(HostError, match="Failed to read file"):
            await host.read_file("missing.py")

    @pytest.mark.asyncio
    async def test_listing_order(self, host, tmp_path):
        (tmp_path / "b_dir").mkdir()
        (tmp_path / "a_dir").mkdir()
        (tmp_path / "z.txt").write_text("")
        (tmp_path / "a.py").write_text("")

        entries = await host.list_directory()
        assert [e.name for e in entries] == ["a_dir", "b_dir", "a.py", "z.txt"]
        assert [e.is_dir for e in entries] == [True, True, False, False]
        assert entries[0].to_dict() == {"name": "a_dir", "path": str(tmp_path / "a_dir"), "is_dir": True}

    @pytest.mark.asyncio
    async def test_listing_missing_dir(self, host):
        with pytest.raises(HostError, match="Failed to read dir"):
            await host.list_directory("does-not-exist")


class TestWorkingDirectory:
    def test_change_directory(self, host, tmp_path):
        sub = tmp_path / "proj"
        sub.mkdir()
        assert host.change_directory(str(sub)) == sub
        assert host.cwd == sub

    def test_change_directory_missing(self, host, tmp_path):
        with pytest.raises(HostError, match="does not exist"):
            host.change_directory(str(tmp_path / "nope"))

    def test_change_directory_to_file(self, host, tmp_path):
        f = tmp_path / "f.txt"
        f.write_text("")
        with pytest.raises(HostError, match="not a directory"):
            host.change_directory(str(f))

    def test_testing_grounds(self, host, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("USERPROFILE", str(tmp_path))
        path = host.ensure_testing_grounds()
        assert path == tmp_path / "PseudoIDE_Testing_Grounds"
        assert path.is_dir()
        assert host.cwd == path

    def test_open_workspace_creates_missing_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("USERPROFILE", str(tmp_path))
        workspace = tmp_path / "nested" / "myproj"
        host = LocalHost(WorkbenchConfig(workspace=str(workspace)))

        assert host.open_workspace() == workspace
        assert workspace.is_dir()
        assert host.cwd == workspace
        assert not (tmp_path / "PseudoIDE_Testing_Grounds").exists()

    def test_open_workspace_unset_uses_testing_grounds(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("USERPROFILE", str(tmp_path))
        host = LocalHost(WorkbenchConfig(workspace=""))
        assert host.open_workspace() == tmp_path / "PseudoIDE_Testing_Grounds"

    def test_open_workspace_on_file(self, tmp_path):
        f = tmp_path / "f.txt"
        f.write_text("")
        with pytest.raises(HostError):
            LocalHost(WorkbenchConfig(workspace=str(f))).open_workspace()


class TestRunCommand:
    @pytest.mark.asyncio
    async def test_cd_into_subdir(self, host, tmp_path):
        (tmp_path / "sub").mkdir()
        assert await host.run_command("cd sub") == ""
        assert host.cwd == (tmp_path / "sub").resolve()

    @pytest.mark.asyncio
    async def test_cd_missing_reports_error(self, host, tmp_path):
        output = await host.run_command("cd missing")
        assert output.startswith("cd: missing: ")
        assert host.cwd == tmp_path

    @pytest.mark.asyncio
    async def test_cd_to_file_reports_error(self, host, tmp_path):
        (tmp_path / "f.txt").write_text("")
        assert await host.run_command("cd f.txt") == "cd: f.txt: Not a directory"
        assert host.cwd == tmp_path

    @posix_only
    @pytest.mark.asyncio
    async def test_shell_command_runs_in_cwd(self, host, tmp_path):
        (tmp_path / "marker.txt").write_text("")
        assert await host.run_command("ls") == "marker.txt\n"

    @posix_only
    @pytest.mark.asyncio
    async def test_stderr_is_appended(self, host):
        assert await host.run_command("echo out; echo err 1>&2") == "out\n\nerr\n"


class TestExecute:
    @pytest.mark.asyncio
    async def test_python(self, host, tmp_path):
        output = await host.execute("Python", "print('hi')\n")
        assert output == "hi\n"
        assert (tmp_path / "main.py").read_text() == "print('hi')\n"

    @pytest.mark.asyncio
    async def test_unsupported_language(self, host, tmp_path):
        with pytest.raises(ExecutionError, match="Unsupported language for execution: Haskell"):
            await host.execute("Haskell", "main = pure ()")
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_missing_toolchain(self, tmp_path):
        config = WorkbenchConfig(workspace=str(tmp_path), node_command="pseudoide-no-such-node")
        with pytest.raises(ExecutionError, match="Failed to execute command"):
            await LocalHost(config).execute("JavaScript", "console.log(1)")
        assert (tmp_path / "main.js").exists()


def test_format_output():
    assert format_output(b"out\n", b"") == "out\n"
    assert format_output(b"out\n", b"err\n") == "out\n\nerr\n"


class TestInitProject:
    @needs_git
    @pytest.mark.asyncio
    async def test_creates_repo_and_readme(self, host, tmp_path):
        data = ProjectData(name="demo", description="Sorts things", intent="Learn", requirements="None")
        project = await host.init_project(data, str(tmp_path / "projects"))

        assert project == tmp_path / "projects" / "demo"
        assert (project / ".git").is_dir()
        assert (project / "README.md").read_text(encoding="utf-8") == (
            "# demo\n\nSorts things\n\n## Intent\nLearn\n\n## Requirements\nNone"
        )
        assert host.cwd == tmp_path

    @needs_git
    @pytest.mark.asyncio
    async def test_uses_configured_projects_dir(self, tmp_path):
        host = LocalHost(WorkbenchConfig(workspace=str(tmp_path), projects_dir=str(tmp_path / "p")))
        assert await host.init_project(ProjectData(name="demo")) == tmp_path / "p" / "demo"

    @pytest.mark.asyncio
    async def test_existing_directory_refused(self, host, tmp_path):
        (tmp_path / "demo").mkdir()
        with pytest.raises(HostError, match="already exists"):
            await host.init_project(ProjectData(name="demo"), str(tmp_path))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "a/b", ".."])
    async def test_invalid_name(self, host, tmp_path, name):
        with pytest.raises(HostError):
            await host.init_project(ProjectData(name=name), str(tmp_path))

    @pytest.mark.asyncio
    async def test_git_failure(self, host, tmp_path, monkeypatch):
        monkeypatch.setattr(host, "_run", AsyncMock(return_value=(128, b"", b"fatal: boom")))
        with pytest.raises(HostError, match="Git init failed: fatal: boom"):
            await host.init_project(ProjectData(name="demo"), str(tmp_path))
        assert not (tmp_path / "demo" / "README.md").exists()

    @pytest.mark.asyncio
    async def test_git_missing(self, host, tmp_path, monkeypatch):
        monkeypatch.setattr(host, "_run", AsyncMock(side_effect=ExecutionError("git: not found")))
        with pytest.raises(HostError, match="Failed to execute git init"):
            await host.init_project(ProjectData(name="demo"), str(tmp_path))
