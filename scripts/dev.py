#!/usr/bin/env python3
"""
Dev runner for the Wordbook API.
Usage: python scripts/dev.py
"""

import os
import socket
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
BACKEND_PORT = int(os.environ.get("BACKEND_PORT", "8000"))

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def port_in_use(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        return s.connect_ex(("127.0.0.1", port)) == 0


def main():
    import uvicorn

    os.chdir(ROOT)
    if port_in_use(BACKEND_PORT):
        print(f"Port {BACKEND_PORT} is in use. Stop the process or set BACKEND_PORT=<port>")
        sys.exit(1)

    print()
    print(f"  Backend:  http://localhost:{BACKEND_PORT}/docs")
    print()

    uvicorn.run(
        "server.app:app",
        host="0.0.0.0",
        port=BACKEND_PORT,
        reload=True,
        log_level=os.environ.get("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
