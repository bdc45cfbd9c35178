import json

import pytest
from unittest.mock import patch

from gigalixir_deploy.cli import main
from gigalixir_deploy.failure import CommandError
from gigalixir_deploy.models import DeploymentResult, RolloutAttempt


class TestCLIArgumentParsing:
    """Test CLI argument parsing without executing commands."""

    @pytest.mark.parametrize("argv", [
        ["--help"],
        ["deploy", "--help"],
        ["current-release", "--help"],
        ["wait", "--help"],
    ])
    def test_help_displays_correctly(self, argv):
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        assert exc_info.value.code == 0

    @pytest.mark.parametrize("argv", [
        [],
        ["current-release"],
        ["wait", "--app", "my-app"],
        ["wait", "--app", "my-app", "--previous-release", "seven"],
        ["--log-level", "LOUD", "current-release", "--app", "my-app"],
    ])
    def test_bad_arguments_fail(self, argv):
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        assert exc_info.value.code != 0


class TestCLICommands:
    def test_deploy_missing_configuration(self, monkeypatch, capsys):
        for key in ("INPUT_GIGALIXIR_USERNAME", "INPUT_GIGALIXIR_PASSWORD", "INPUT_GIGALIXIR_APP"):
            monkeypatch.delenv(key, raising=False)
        with pytest.raises(SystemExit) as exc_info:
            main(["deploy"])
        assert exc_info.value.code == 1
        assert "::error::Invalid configuration" in capsys.readouterr().out

    @pytest.mark.parametrize("success, code", [(True, 0), (False, 1)])
    def test_deploy_exit_status(self, monkeypatch, capsys, success, code):
        monkeypatch.setenv("INPUT_GIGALIXIR_USERNAME", "dev@example.com")
        monkeypatch.setenv("INPUT_GIGALIXIR_PASSWORD", "hunter2")
        monkeypatch.setenv("INPUT_GIGALIXIR_APP", "my-app")
        monkeypatch.setenv("INPUT_SSH_PRIVATE_KEY", "KEY")
        result = DeploymentResult(success=success, app="my-app", message="Deployed my-app" if success else "boom")

        async def fake_deploy(self, config):
            assert config.install_client is False
            assert config.migrations is True
            return result

        with patch("gigalixir_deploy.cli.DeploymentEngine.deploy", fake_deploy):
            with pytest.raises(SystemExit) as exc_info:
                main(["deploy", "--skip-install", "--migrations"])

        out = capsys.readouterr().out
        assert exc_info.value.code == code
        assert ('"success": true' in out) is success
        assert ("::error::boom" in out) is not success

    def test_current_release(self, capsys):
        async def fake_release(self, app):
            assert app == "my-app"
            return 17

        with patch("gigalixir_deploy.inspector.ReleaseInspector.get_current_release", fake_release):
            main(["current-release", "--app", "my-app"])
        assert capsys.readouterr().out.strip() == "17"

    def test_wait_prints_attempt(self, capsys):
        async def fake_wait(self, previous_release, app):
            return RolloutAttempt(target_release=previous_release + 1, attempt_index=2, elapsed_backoff_seconds=2)

        with patch("gigalixir_deploy.monitor.RolloutMonitor.wait_for_healthy_release", fake_wait):
            main(["wait", "--app", "my-app", "--previous-release", "4"])
        assert json.loads(capsys.readouterr().out)["target_release"] == 5

    def test_command_error_exits_nonzero(self, capsys):
        async def fake_release(self, app):
            raise CommandError("gigalixir releases -a my-app", 1, "not logged in")

        with patch("gigalixir_deploy.inspector.ReleaseInspector.get_current_release", fake_release):
            with pytest.raises(SystemExit) as exc_info:
                main(["current-release", "--app", "my-app"])
        assert exc_info.value.code == 1
        assert "::error::" in capsys.readouterr().out
