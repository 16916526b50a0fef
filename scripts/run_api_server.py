#!/usr/bin/env python3
"""Start the snapshot discovery HTTP API."""

import sys
import argparse
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import uvicorn

from snapshot_discovery.api import create_app
from snapshot_discovery.config import DiscoveryConfig
from snapshot_discovery.utils.logging_config import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Run the snapshot discovery API server")
    parser.add_argument('--host', default='0.0.0.0', help='Bind address (default: 0.0.0.0)')
    parser.add_argument('--port', type=int, default=3001, help='Port (default: 3001)')
    args = parser.parse_args()

    config = DiscoveryConfig.from_env()
    setup_logging(config.log_level, config.log_file)

    app = create_app(config)
    print(f"Snapshot discovery API running at http://{args.host}:{args.port}")
    print(f"Snapshots endpoint: http://{args.host}:{args.port}/api/snapshots/{{url}}")
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
