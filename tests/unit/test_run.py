#  Place Search - Entry Point Tests
#
#  Tests that run.main() configures logging and starts uvicorn from config.
#
#  Depends on: run.py
#  Used by:    pytest

import logging
from unittest.mock import patch

import run


class TestMain:
    def test_starts_uvicorn_with_config_defaults(self):
        with patch("run.uvicorn.run") as mock_run, \
             patch("run.setup_logging") as mock_setup, \
             patch("placesearch.config._config", {}):
            run.main()

        mock_setup.assert_called_once_with(level="INFO", fmt="json")
        mock_run.assert_called_once_with(
            "placesearch.app:app", host="0.0.0.0", port=8787, reload=False,
        )

    def test_uses_configured_server_settings(self):
        server = {"host": "127.0.0.1", "port": 9000, "log_level": "DEBUG", "log_format": "text"}
        with patch("run.uvicorn.run") as mock_run, \
             patch("placesearch.config._config", {"server": server}):
            run.main()

        mock_run.assert_called_once_with(
            "placesearch.app:app", host="127.0.0.1", port=9000, reload=False,
        )
        assert logging.getLogger("placesearch").level == logging.DEBUG
        logging.getLogger("placesearch").handlers.clear()
        logging.getLogger("placesearch").setLevel(logging.NOTSET)
