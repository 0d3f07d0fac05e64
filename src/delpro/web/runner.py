"""Uvicorn server runner with custom configuration."""

from typing import Any

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from delpro.app import App
from delpro.config import Config
from delpro.web.server import create_fastapi_app


def build_log_config() -> dict[str, Any]:
    """Uvicorn's default logging config with shorter access and error lines."""
    log_config = LOGGING_CONFIG.copy()
    log_config["formatters"] = {name: dict(fmt) for name, fmt in LOGGING_CONFIG["formatters"].items()}
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"
    return log_config


def run_server(app: App, config: Config) -> None:
    fastapi_app = create_fastapi_app(app, config)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=build_log_config(),
        access_log=True,
        proxy_headers=True,
    )
