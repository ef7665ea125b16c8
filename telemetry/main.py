#!/usr/bin/env python3
"""
sophos-telemetry server

Entry point: loads configuration, builds the FastAPI app and runs it
with uvicorn.
"""

import argparse
import uvicorn

# Support running as script or as package
try:
    from .core.config import load_config_from
    from .core.server import create_app, setup_logging
except ImportError:
    from core.config import load_config_from
    from core.server import create_app, setup_logging


def main():
    """Main entry point for the telemetry server."""
    parser = argparse.ArgumentParser(description="sophos-telemetry server")
    parser.add_argument("-c", "--config", help="Path to YAML config", default="config.yaml")
    args = parser.parse_args()

    # Load configuration
    config = load_config_from(args.config)
    setup_logging(config.log_level)

    # Create FastAPI app
    app = create_app(config)

    # Run the server
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        reload=False,
        access_log=False
    )


if __name__ == "__main__":
    main()
