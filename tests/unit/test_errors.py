"""Tests for the core error hierarchy."""

from clearcase_mcp.core.errors import (
    ClearCaseError,
    CommandError,
    CommandFailedError,
    CommandLaunchError,
    CommandTimeoutError,
    ConfigError,
    OperationInputError,
    ShutdownError,
)


class TestHierarchy:
    """All errors inherit from ClearCaseError."""

    def test_command_subclasses(self):
        errors = [
            CommandFailedError(1, "boom"),
            CommandLaunchError("cleartool", "not found"),
            CommandTimeoutError(3.0),
        ]
        for err in errors:
            assert isinstance(err, CommandError)
            assert isinstance(err, ClearCaseError)

    def test_local_errors_are_not_command_errors(self):
        assert not isinstance(OperationInputError("bad"), CommandError)
        assert isinstance(OperationInputError("bad"), ClearCaseError)

    def test_config_error(self):
        assert isinstance(ConfigError("bad config"), ClearCaseError)

    def test_shutdown_error(self):
        assert isinstance(ShutdownError("closing"), ClearCaseError)


class TestCommandFailedError:
    def test_message_is_stderr(self):
        err = CommandFailedError(2, "cleartool: Error: Unable to access")
        assert str(err) == "cleartool: Error: Unable to access"
        assert err.returncode == 2
        assert err.stderr == "cleartool: Error: Unable to access"

    def test_empty_stderr_reports_exit_code(self):
        err = CommandFailedError(3)
        assert str(err) == "Process exited with code 3"


class TestOtherCommandErrors:
    def test_launch_error_names_executable(self):
        err = CommandLaunchError("/opt/rational/bin/cleartool", "No such file")
        assert err.executable == "/opt/rational/bin/cleartool"
        assert "Failed to start /opt/rational/bin/cleartool" in str(err)
        assert "No such file" in str(err)

    def test_timeout_error(self):
        err = CommandTimeoutError(2.5)
        assert err.timeout == 2.5
        assert str(err) == "Command timed out after 2.5 seconds"
