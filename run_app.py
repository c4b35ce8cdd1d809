#!/usr/bin/env python3
"""
Simple runner script for the Flask application.
This script ensures the correct Python path is set and runs the app.
"""

import argparse
import sys
from pathlib import Path

# Add the current directory to Python path
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

from config_manager import ConfigManager
from content_service.logging_config import setup_logging, stop_logging
from app.main import create_app


def main():
    parser = argparse.ArgumentParser(description="Content aggregator API server")
    parser.add_argument("--port", type=int, help="Port to run the server on")
    parser.add_argument("--host", type=str, help="Host to bind the server to")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    args = parser.parse_args()

    config_manager = ConfigManager()
    app_config = config_manager.get_app_config()
    storage_config = config_manager.get_storage_config()

    # Override configuration with command line arguments
    if args.port:
        app_config.port = args.port
    if args.host:
        app_config.host = args.host
    if args.debug:
        app_config.debug = args.debug

    setup_logging(debug=app_config.debug)

    try:
        app = create_app(config_manager)
        print("🚀 Starting content aggregator...")
        print(f"📋 Configuration loaded:")
        print(f"   - Storage backend: {storage_config.backend}")
        print(f"   - Server: http://{app_config.host}:{app_config.port}")
        app.run(
            host=app_config.host,
            port=app_config.port,
            debug=app_config.debug
        )
    finally:
        stop_logging()


if __name__ == "__main__":
    main()
