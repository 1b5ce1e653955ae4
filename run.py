#!/usr/bin/env python3
"""
Run the Property Appraisal Engine web server.
"""

import uvicorn

from utils.config import Config
from utils.logging_config import setup_logging


def main():
    """Start the web server."""
    config = Config.load()
    setup_logging(config.log_level)

    print(f"Starting Property Appraisal Engine on http://{config.host}:{config.port}")
    print("Press Ctrl+C to stop")

    uvicorn.run(
        "web.app:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
    )


if __name__ == "__main__":
    main()
