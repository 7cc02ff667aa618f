"""Tests for the SSH service."""
import shlex
import subprocess
from unittest.mock import Mock, patch

import pytest

from dockship.exceptions import SSHError
from dockship.models.ssh import SSHConfig, SSHConnection
from dockship.services.ssh_service import SSHService


@pytest.fixture
def connection(ssh_key):
    return SSHConnection(
        host="203.0.113.10",
        config=SSHConfig(key_path=str(ssh_key), user="ubuntu"),
        connect_timeout=7,
    )


class TestExecuteCommand:

    @patch("subprocess.run")
    def test_builds_non_interactive_ssh_command(self, mock_run, connection, ssh_key):
        mock_run.return_value = Mock(returncode=0, stdout="hi\n", stderr="")

        result = SSHService(connection).execute_command("echo hi")

        assert result.is_success
        assert result.stdout == "hi\n"
        cmd = mock_run.call_args[0][0]
        assert cmd == [
            "ssh",
            "-i",
            str(ssh_key),
            "-o",
            "StrictHostKeyChecking=no",
            "-o",
            "ConnectTimeout=7",
            "ubuntu@203.0.113.10",
            "echo hi",
        ]
        assert mock_run.call_args.kwargs["stdin"] is subprocess.DEVNULL

    @patch("subprocess.run")
    def test_failure_is_reported_not_raised(self, mock_run, connection):
        mock_run.return_value = Mock(returncode=255, stdout="", stderr="Connection refused")

        result = SSHService(connection).execute_command("true")

        assert result.is_failure
        assert "Connection refused" in result.output

    @patch("subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="ssh", timeout=3))
    def test_timeout_raises_ssh_error(self, mock_run, connection):
        with pytest.raises(SSHError) as exc_info:
            SSHService(connection).execute_command("sleep 10", timeout=3)

        assert "timed out after 3s" in str(exc_info.value)

    @patch("subprocess.run", side_effect=FileNotFoundError("ssh"))
    def test_missing_ssh_binary(self, mock_run, connection):
        with pytest.raises(SSHError):
            SSHService(connection).execute_command("true")


class TestRunScript:

    @patch("subprocess.run")
    def test_script_passed_to_bash_c(self, mock_run, connection, logger):
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")
        script = "set -e\necho 'it works'\n"

        SSHService(connection, logger).run_script(script, label="demo")

        remote_command = mock_run.call_args[0][0][-1]
        assert remote_command == f"bash -c {shlex.quote(script)}"
        assert shlex.split(remote_command) == ["bash", "-c", script]

    @patch("subprocess.run")
    def test_script_and_output_logged(self, mock_run, connection, logger):
        mock_run.return_value = Mock(returncode=0, stdout="done\n", stderr="")

        SSHService(connection, logger).run_script("echo done", label="demo")

        log_text = logger.log_path.read_text()
        assert "ssh ubuntu@203.0.113.10 demo" in log_text
        assert "[script] echo done" in log_text
        assert "[stdout] done" in log_text


class TestSyncDirectory:

    @patch("subprocess.run")
    def test_rsync_mirror_excludes_git(self, mock_run, connection, ssh_key, tmp_path):
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")

        result = SSHService(connection).sync_directory(tmp_path / "app", "~/deployments/app")

        assert result.is_success
        cmd = mock_run.call_args[0][0]
        assert cmd[:2] == ["rsync", "-avz"]
        assert cmd[cmd.index("--exclude") + 1] == ".git"
        assert cmd[-2] == f"{tmp_path / 'app'}/"
        assert cmd[-1] == "ubuntu@203.0.113.10:~/deployments/app/"

        remote_shell = shlex.split(cmd[cmd.index("-e") + 1])
        assert remote_shell[:3] == ["ssh", "-i", str(ssh_key)]
        assert "StrictHostKeyChecking=no" in remote_shell

    @patch("subprocess.run")
    def test_rsync_failure(self, mock_run, connection, logger, tmp_path):
        mock_run.return_value = Mock(returncode=23, stdout="", stderr="rsync error")

        result = SSHService(connection, logger).sync_directory(tmp_path, "~/deployments/app")

        assert result.is_failure
        assert "rsync error" in logger.log_path.read_text()
