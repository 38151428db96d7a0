"""Tests for the command line entry point."""

import sys
from unittest.mock import Mock, patch

sys.path.append("src")
import main


class TestParseArgs:
    def test_defaults(self):
        args = main.parse_args([])

        assert args.once is False
        assert args.no_api is False

    def test_flags(self):
        args = main.parse_args(["--once", "--no-api"])

        assert args.once is True
        assert args.no_api is True


class TestMain:
    @patch("main.start_scheduler")
    @patch("main.build_alert_monitoring_job")
    @patch("main.validate_environment", return_value=True)
    @patch("main.initialize_application")
    def test_once_runs_single_pass(
        self, mock_init, mock_validate, mock_build, mock_start
    ):
        job = Mock()
        calls = []

        async def run():
            calls.append("run")

        job.run = run
        mock_build.return_value = job

        main.main(["--once"])

        mock_init.assert_called_once()
        assert calls == ["run"]
        mock_start.assert_not_called()

    @patch("main.uvicorn.run")
    @patch("main.shutdown_scheduler")
    @patch("main.list_scheduled_jobs")
    @patch("main.add_alert_monitoring_job")
    @patch("main.start_scheduler")
    @patch("main.validate_environment", return_value=True)
    @patch("main.initialize_application")
    def test_serves_api_with_scheduler(
        self,
        mock_init,
        mock_validate,
        mock_start,
        mock_add_job,
        mock_list,
        mock_shutdown,
        mock_uvicorn,
    ):
        main.main([])

        mock_start.assert_called_once()
        mock_add_job.assert_called_once()
        mock_uvicorn.assert_called_once()
        assert mock_uvicorn.call_args[0][0] == "pricewatch.webapi.app:app"
        mock_shutdown.assert_called_once()

    @patch("builtins.print")
    @patch("main.build_alert_monitoring_job")
    @patch("main.validate_environment", return_value=False)
    @patch("main.initialize_application")
    def test_reports_missing_configuration(
        self, mock_init, mock_validate, mock_build, mock_print
    ):
        async def run():
            return None

        mock_build.return_value.run = run

        with patch("main.get_missing_settings", return_value=["SENDGRID_API_KEY"]):
            main.main(["--once"])

        printed = " ".join(str(call.args[0]) for call in mock_print.call_args_list)
        assert "SENDGRID_API_KEY" in printed
