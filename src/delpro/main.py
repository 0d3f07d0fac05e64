"""Application entry point for Delpro backend server."""

from delpro.app import App
from delpro.config import Config
from delpro.logging import setup_logging
from delpro.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
