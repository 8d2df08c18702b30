#!/usr/bin/env python3
"""Start the tour planner API, honouring the PORT environment variable used by hosting platforms."""

import os
import sys

import uvicorn


def _port() -> int:
    port = os.environ.get("PORT", "8000")
    try:
        return int(port)
    except ValueError:
        print(f"Warning: Invalid PORT value '{port}', using default 8000", file=sys.stderr)
        return 8000


def main() -> None:
    port = _port()
    print(f"Starting server on port {port}...", file=sys.stderr)
    uvicorn.run(
        "clozer.main:app",
        host="0.0.0.0",
        port=port,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


if __name__ == "__main__":
    main()
