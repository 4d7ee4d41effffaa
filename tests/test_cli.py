import json
from unittest.mock import AsyncMock, MagicMock, patch

from typer.testing import CliRunner

from proctable.cli import app
from proctable.errors import KillTimeoutError, SourceInvocationError
from proctable.types import ProcessRecord, Query, SignalSpec

runner = CliRunner()

NGINX = ProcessRecord(
    pid="1234",
    ppid="1",
    command="nginx",
    arguments=["-g", "daemon off;"],
    extras={"stat": "S"},
)


class TestListCommand:
    """Tests for the 'list' command."""

    @patch("proctable.cli.lookup", new_callable=AsyncMock)
    def test_list_renders_table(self, mock_lookup: AsyncMock):
        mock_lookup.return_value = [NGINX]

        result = runner.invoke(app, ["list", "--command", "nginx", "-k", "stat"])

        assert result.exit_code == 0
        assert "1234" in result.stdout
        assert "nginx -g daemon off;" in result.stdout

        query = mock_lookup.call_args.args[0]
        assert query == Query(command="nginx", keywords=["stat"])

    @patch("proctable.cli.lookup", new_callable=AsyncMock)
    def test_list_builds_full_query(self, mock_lookup: AsyncMock):
        mock_lookup.return_value = [NGINX]

        runner.invoke(
            app,
            [
                "list",
                "--pid",
                "1234",
                "--pid",
                "99",
                "--arguments",
                "daemon",
                "--ppid",
                "^1$",
                "--psargs",
                "aux",
            ],
        )

        query = mock_lookup.call_args.args[0]
        assert query.pid == ["1234", "99"]
        assert query.arguments == "daemon"
        assert query.ppid == "^1$"
        assert query.psargs == "aux"

    @patch("proctable.cli.lookup", new_callable=AsyncMock)
    def test_list_json(self, mock_lookup: AsyncMock):
        mock_lookup.return_value = [NGINX]

        result = runner.invoke(app, ["list", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == [
            {
                "stat": "S",
                "pid": "1234",
                "command": "nginx",
                "arguments": ["-g", "daemon off;"],
                "ppid": "1",
            }
        ]

    @patch("proctable.cli.lookup", new_callable=AsyncMock)
    def test_list_no_matches(self, mock_lookup: AsyncMock):
        mock_lookup.return_value = []

        result = runner.invoke(app, ["list", "--command", "nothing"])

        assert result.exit_code == 1
        assert "No matching processes found" in result.stderr

    @patch("proctable.cli.lookup", new_callable=AsyncMock)
    def test_list_source_error(self, mock_lookup: AsyncMock):
        mock_lookup.side_effect = SourceInvocationError("ps: not found")

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 1
        assert "ps: not found" in result.stderr

    def test_list_invalid_pattern(self):
        """Bad patterns fail before the listing command is run."""
        with patch("proctable.source.PsSource.list", new_callable=AsyncMock) as mock_list:
            result = runner.invoke(app, ["list", "--command", "(oops"])

        assert result.exit_code == 1
        assert "Invalid command pattern" in result.stderr
        mock_list.assert_not_called()


class TestKillCommand:
    """Tests for the 'kill' command."""

    @patch("proctable.cli.Terminator")
    def test_kill_confirmed(self, mock_terminator_cls: MagicMock):
        terminator = mock_terminator_cls.return_value
        terminator.run = AsyncMock()
        terminator.polls = 6

        result = runner.invoke(app, ["kill", "1234", "--signal", "SIGINT", "--timeout", "5"])

        assert result.exit_code == 0
        assert "terminated" in result.stdout
        args = mock_terminator_cls.call_args.args
        assert args[0] == 1234
        assert args[1] == SignalSpec(signal="SIGINT", timeout=5.0)
        terminator.run.assert_awaited_once()

    @patch("proctable.cli.Terminator")
    def test_kill_timeout(self, mock_terminator_cls: MagicMock):
        terminator = mock_terminator_cls.return_value
        terminator.run = AsyncMock(side_effect=KillTimeoutError("timed out"))

        result = runner.invoke(app, ["kill", "1234"])

        assert result.exit_code == 1
        assert "timed out" in result.stderr

    @patch("proctable.cli.Terminator")
    @patch("proctable.cli.send_signal")
    def test_kill_no_wait(self, mock_send: MagicMock, mock_terminator_cls: MagicMock):
        mock_send.return_value = True

        result = runner.invoke(app, ["kill", "1234", "--no-wait"])

        assert result.exit_code == 0
        assert "Sent SIGTERM to process 1234" in result.stdout
        mock_send.assert_called_once_with(1234, "SIGTERM")
        mock_terminator_cls.assert_not_called()

    @patch("proctable.cli.send_signal")
    def test_kill_no_wait_failure(self, mock_send: MagicMock):
        mock_send.return_value = False

        result = runner.invoke(app, ["kill", "1234", "--no-wait"])

        assert result.exit_code == 1
        assert "Failed to send SIGTERM" in result.stderr
