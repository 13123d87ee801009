"""Tests for the server launcher."""

from unittest.mock import patch

from api.server import APP_IMPORT_PATH, run_server


class TestRunServer:
    """Test launcher argument resolution."""

    def test_explicit_arguments(self):
        with patch("api.server.load_dotenv"), patch("api.server.uvicorn.run") as mock_run:
            run_server(host="127.0.0.1", port=9001, reload=True)

        args, kwargs = mock_run.call_args
        assert args == (APP_IMPORT_PATH,)
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9001
        assert kwargs["reload"] is True
        assert kwargs["access_log"] is False

    def test_environment_defaults(self, monkeypatch):
        monkeypatch.setenv("HOST", "localhost")
        monkeypatch.setenv("PORT", "8123")
        monkeypatch.setenv("RELOAD", "true")

        with patch("api.server.load_dotenv") as mock_dotenv, patch(
            "api.server.uvicorn.run"
        ) as mock_run:
            run_server()

        mock_dotenv.assert_called_once()
        kwargs = mock_run.call_args.kwargs
        assert (kwargs["host"], kwargs["port"], kwargs["reload"]) == ("localhost", 8123, True)

    def test_reload_off_by_default(self, monkeypatch):
        monkeypatch.delenv("RELOAD", raising=False)

        with patch("api.server.load_dotenv"), patch("api.server.uvicorn.run") as mock_run:
            run_server(host="h", port=1)

        assert mock_run.call_args.kwargs["reload"] is False
