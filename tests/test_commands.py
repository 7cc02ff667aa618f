"""Tests for the deploy and cleanup commands and the CLI entry point."""
from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner

from dockship import __version__
from dockship.commands.cleanup import CleanupCommand
from dockship.commands.deploy import DeployCommand, DeployOptions
from dockship.exceptions import ParameterError
from dockship.main import cli
from dockship.models.deployment import DeploymentSettings
from dockship.models.parameters import CleanupTarget
from dockship.prompts import ParameterCollector


def only_log(workdir, operation):
    logs = list(workdir.glob(f"{operation}_*.log"))
    assert len(logs) == 1
    return logs[0].read_text()


@pytest.fixture
def deploy(params, workdir, console):
    collector = Mock(spec=ParameterCollector)
    collector.collect.return_value = params
    options = DeployOptions(settings=DeploymentSettings(connect_timeout=5, settle_delay=0))
    return DeployCommand(options=options, workdir=workdir, console=console, collector=collector)


class TestDeployCommand:

    def test_successful_deployment(self, deploy, workdir, console, make_runner):
        runner = make_runner()

        with patch("subprocess.run", side_effect=runner):
            deploy.run()

        output = console.file.getvalue()
        assert "http://203.0.113.10" in output
        assert "dockship --cleanup" in output
        assert "docker logs app" in output

        log_text = only_log(workdir, "deploy")
        assert "Status: SUCCESS" in log_text
        assert "s3cr3t-token" not in log_text

    def test_fatal_step_exits_1(self, deploy, workdir, make_runner):
        runner = make_runner(failures={"docker build": 1})

        with patch("subprocess.run", side_effect=runner):
            with pytest.raises(SystemExit) as exc:
                deploy.run()

        assert exc.value.code == 1
        log_text = only_log(workdir, "deploy")
        assert "Status: FAILED" in log_text
        assert "Failed to build or run container app" in log_text

    def test_parameter_error_exits_before_any_command(self, deploy, workdir):
        deploy.collector.collect.side_effect = ParameterError("Server IP cannot be empty")

        with patch("subprocess.run") as run:
            with pytest.raises(SystemExit) as exc:
                deploy.run()

        assert exc.value.code == 1
        run.assert_not_called()
        assert list(workdir.iterdir()) == [next(workdir.glob("deploy_*.log"))]

    def test_unexpected_error_reports_location(self, deploy, workdir):
        deploy.collector.collect.side_effect = RuntimeError("boom")

        with pytest.raises(SystemExit) as exc:
            deploy.run()

        assert exc.value.code == 1
        log_text = only_log(workdir, "deploy")
        assert "RuntimeError: boom" in log_text
        assert "Failed at" in log_text

    def test_interrupt_exits_130(self, deploy):
        deploy.collector.collect.side_effect = KeyboardInterrupt

        with pytest.raises(SystemExit) as exc:
            deploy.run()

        assert exc.value.code == 130

    def test_warnings_are_counted(self, deploy, console, make_runner):
        runner = make_runner(failures={"curl -fsS": 7})

        with patch("subprocess.run", side_effect=runner):
            deploy.run()

        assert "Completed with 1 warning(s)" in console.file.getvalue()


@pytest.fixture
def clone(workdir):
    path = workdir / "app"
    path.mkdir()
    (path / "Dockerfile").write_text("FROM scratch\n")
    return path


class TestCleanupCommand:

    def answers(self, *values):
        return patch("dockship.prompts.Prompt.ask", side_effect=list(values))

    def test_prompts_only_for_unknown_values(self, workdir, console, ssh_key, clone, make_runner):
        runner = make_runner()
        command = CleanupCommand(workdir=workdir, console=console, known={"app_name": "app"})

        with self.answers("203.0.113.10", "ubuntu", str(ssh_key)) as ask:
            with patch("subprocess.run", side_effect=runner):
                command.run()

        assert ask.call_count == 3
        assert not clone.exists()
        assert len(runner.ssh_calls) == 1

        script = runner.ssh_scripts[0]
        assert "docker stop app" in script
        assert "docker rmi app:latest" in script
        assert "rm -rf ~/deployments/app" in script
        assert "/etc/nginx/sites-enabled/app" in script
        assert "sites-enabled/default" in script

    def test_remote_failure_is_only_a_warning(self, workdir, console, ssh_key, clone, make_runner):
        runner = make_runner(failures={"docker system prune": 255})
        collector = Mock(spec=ParameterCollector)
        collector.collect_cleanup_target.return_value = CleanupTarget(
            server="203.0.113.10", ssh_user="ubuntu", ssh_key=ssh_key, app_name="app"
        )
        command = CleanupCommand(workdir=workdir, console=console, collector=collector)

        with patch("subprocess.run", side_effect=runner):
            command.run()

        assert not clone.exists()
        log_text = only_log(workdir, "cleanup")
        assert "exited with status 255" in log_text

    def test_missing_ssh_binary_is_only_a_warning(self, workdir, console, ssh_key):
        collector = Mock(spec=ParameterCollector)
        collector.collect_cleanup_target.return_value = CleanupTarget(
            server="203.0.113.10", ssh_user="ubuntu", ssh_key=ssh_key, app_name="app"
        )
        command = CleanupCommand(workdir=workdir, console=console, collector=collector)

        with patch("subprocess.run", side_effect=FileNotFoundError("ssh")):
            command.run()

        assert "Remote cleanup did not run" in only_log(workdir, "cleanup")

    def test_absent_local_clone_is_fine(self, workdir, console, ssh_key, make_runner):
        collector = Mock(spec=ParameterCollector)
        collector.collect_cleanup_target.return_value = CleanupTarget(
            server="203.0.113.10", ssh_user="ubuntu", ssh_key=ssh_key, app_name="app"
        )
        command = CleanupCommand(workdir=workdir, console=console, collector=collector)

        with patch("subprocess.run", side_effect=make_runner()):
            command.run()

        assert "No local clone at" in only_log(workdir, "cleanup")


class TestCli:

    def test_help_lists_flags(self):
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "--cleanup" in result.output
        assert "--verbose" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_cleanup_flag_never_deploys(self):
        with patch("dockship.main.CleanupCommand") as cleanup, patch(
            "dockship.main.DeployCommand"
        ) as deploy:
            result = CliRunner().invoke(cli, ["--cleanup"])

        assert result.exit_code == 0
        cleanup.assert_called_once_with(verbose=False)
        cleanup.return_value.run.assert_called_once_with()
        deploy.assert_not_called()

    def test_default_deploys(self):
        with patch("dockship.main.CleanupCommand") as cleanup, patch(
            "dockship.main.DeployCommand"
        ) as deploy:
            result = CliRunner().invoke(cli, ["-v"])

        assert result.exit_code == 0
        deploy.assert_called_once_with(verbose=True)
        cleanup.assert_not_called()
