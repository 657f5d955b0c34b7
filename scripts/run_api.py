#!/usr/bin/env python3
"""Serve the governance HTTP API with uvicorn.

Usage:
    python scripts/run_api.py [--host HOST] [--port PORT] [--reload]

Environment:
    GOVPROOF_* variables configure the engine (see governance_config.py).
    ENVIRONMENT selects console (development) or JSON log rendering.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

import uvicorn


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Serve the Governance Consensus & Proof Engine API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    parser.add_argument("--port", type=int, default=8000, help="Bind port")
    parser.add_argument(
        "--reload", action="store_true", help="Reload on source changes (development)"
    )
    args = parser.parse_args()

    print(f"\n{'=' * 60}")
    print("GOVERNANCE API")
    print(f"{'=' * 60}")
    print(f"Listening on http://{args.host}:{args.port}")
    print(f"{'=' * 60}\n")

    uvicorn.run(
        "govproof.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
