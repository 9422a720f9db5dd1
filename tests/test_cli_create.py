"""Tests for the rw create command."""
from unittest.mock import Mock

import pytest
from typer.testing import CliRunner

from rwcli import __version__
from rwcli.cli import app
from rwcli.scaffold.core import ScaffoldPipeline
from rwcli.scaffold.errors import ToolchainMissing
from rwcli.services.toolchain import InstallResult, ToolInfo

runner = CliRunner()


@pytest.fixture
def git():
    return Mock(initialize=Mock(return_value=True))


@pytest.fixture
def installer():
    return Mock(return_value=InstallResult(("yarn", "install"), 0, 2.0))


@pytest.fixture(autouse=True)
def offline(monkeypatch, rw_home, fake_resolver, git, installer):
    """Fake the toolchain check and the network for every CLI test."""
    monkeypatch.setattr(
        "rwcli.cli_create_commands.check_toolchain",
        lambda: [
            ToolInfo("node", ["/usr/bin/node"], "v20.11.0"),
            ToolInfo("yarn", ["/usr/bin/yarn"], "4.1.0"),
        ],
    )
    monkeypatch.setattr(
        "rwcli.cli_create_commands.build_pipeline",
        lambda config: ScaffoldPipeline(
            config, resolver=fake_resolver, git=git, installer=installer
        ),
    )


def test_create_with_defaults(tmp_path, rw_home, fake_resolver, git):
    target = tmp_path / "my-app"

    result = runner.invoke(app, ["create", str(target), "--yes"])

    assert result.exit_code == 0, result.output
    assert "Latest version: v3.2.0" in result.output
    assert "Use TypeScript: True" in result.output
    assert (target / "package.json").exists()
    assert (target / ".gitignore").exists()
    assert (rw_home / "templates" / "v3.2.0_arapaho_ts.zip").exists()
    git.initialize.assert_called_once_with(target, "initial commit")


def test_create_reuses_cached_template(tmp_path, fake_resolver):
    runner.invoke(app, ["create", str(tmp_path / "one"), "-y"])
    result = runner.invoke(app, ["create", str(tmp_path / "two"), "-y"])

    assert result.exit_code == 0, result.output
    assert "Cached template: True" in result.output
    assert fake_resolver.downloads == [12]


def test_create_javascript(tmp_path, fake_resolver):
    result = runner.invoke(app, ["create", str(tmp_path / "app"), "-y", "--javascript"])

    assert result.exit_code == 0, result.output
    assert "Use TypeScript: False" in result.output
    assert fake_resolver.downloads == [11]


def test_create_non_empty_target_fails(tmp_path, fake_resolver):
    target = tmp_path / "busy"
    target.mkdir()
    (target / "file.txt").write_text("x")

    result = runner.invoke(app, ["create", str(target), "-y"])

    assert result.exit_code == 1
    assert "not empty" in result.output
    assert fake_resolver.downloads == []


def test_create_overwrite(tmp_path):
    target = tmp_path / "busy"
    target.mkdir()
    (target / "file.txt").write_text("x")

    result = runner.invoke(app, ["create", str(target), "-y", "--overwrite"])

    assert result.exit_code == 0, result.output
    assert (target / "package.json").exists()


def test_create_without_git(tmp_path, git):
    result = runner.invoke(app, ["create", str(tmp_path / "app"), "-y", "--no-git-init"])

    assert result.exit_code == 0, result.output
    git.initialize.assert_not_called()


def test_create_custom_commit_message(tmp_path, git):
    target = tmp_path / "app"
    result = runner.invoke(app, ["create", str(target), "-y", "-m", "hello redwood"])

    assert result.exit_code == 0, result.output
    git.initialize.assert_called_once_with(target, "hello redwood")


def test_commit_message_printed_verbatim(tmp_path, git):
    result = runner.invoke(app, ["create", str(tmp_path / "app"), "-y", "-m", "[wip] scaffold"])

    assert result.exit_code == 0, result.output
    assert "([wip] scaffold)" in result.output


def test_create_prompts_without_yes(tmp_path, git, installer, fake_resolver):
    target = tmp_path / "app"

    # TypeScript? no / git? yes / commit message / install? no
    result = runner.invoke(app, ["create", str(target)], input="n\ny\nfirst!\nn\n")

    assert result.exit_code == 0, result.output
    assert fake_resolver.downloads == [11]
    git.initialize.assert_called_once_with(target, "first!")
    installer.assert_not_called()


def test_git_failure_still_succeeds(tmp_path, git):
    from rwcli.scaffold.errors import VersionControlInitFailed

    git.initialize.side_effect = VersionControlInitFailed("Please tell me who you are")

    result = runner.invoke(app, ["create", str(tmp_path / "app"), "-y"])

    assert result.exit_code == 0, result.output
    assert "Git setup failed" in result.output


def test_install_failure_exits_non_zero(tmp_path, installer):
    installer.return_value = InstallResult(("yarn", "install"), 1, 0.5)

    result = runner.invoke(app, ["create", str(tmp_path / "app"), "-y", "--install"])

    assert result.exit_code == 1
    assert "exit code 1" in result.output


def test_install_success(tmp_path, installer):
    target = tmp_path / "app"
    result = runner.invoke(app, ["create", str(target), "-y", "--install"])

    assert result.exit_code == 0, result.output
    installer.assert_called_once_with(target)
    assert "Dependencies installed" in result.output


def test_missing_toolchain_fails(tmp_path, monkeypatch, fake_resolver):
    def missing():
        raise ToolchainMissing("node not found. Please install node first.")

    monkeypatch.setattr("rwcli.cli_create_commands.check_toolchain", missing)

    result = runner.invoke(app, ["create", str(tmp_path / "app"), "-y"])

    assert result.exit_code == 1
    assert "node not found" in result.output
    assert fake_resolver.release_calls == 0


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_debug_log_written(tmp_path, rw_home):
    result = runner.invoke(app, ["create", str(tmp_path / "app"), "-y"])

    assert result.exit_code == 0, result.output
    assert (rw_home / "debug.log").exists()
