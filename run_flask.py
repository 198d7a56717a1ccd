"""Direct Flask server runner using environment variables.

Webhooks are skipped in this mode because no asyncio loop is registered.
"""

from __future__ import annotations

import logging

from config import load_config
from core import setup_logger
from web import create_app

if __name__ == "__main__":
    config = load_config()
    setup_logger(name="", level=logging.DEBUG if config.debug else logging.INFO)

    app = create_app(config)
    app.run(host=config.web_host, port=config.web_port, debug=config.debug)
