#!/usr/bin/env python
"""
Start the comparison API with uvicorn.
Usage: python run.py  (PORT, HOST and RELOAD are read from the environment)
"""
import os
import socket
import sys


def is_port_in_use(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind(("", port))
            return False
        except OSError:
            return True


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    host = os.getenv("HOST", "0.0.0.0")
    reload = os.getenv("RELOAD", "false").lower() == "true"

    if is_port_in_use(port):
        print(f"Port {port} is already in use. Use a different port: PORT=8001 python {__file__}")
        sys.exit(1)

    print(f"Server: http://{host}:{port}")
    print(f"API Docs: http://localhost:{port}/docs")

    try:
        uvicorn.run(
            "codechecker.main:app",
            host=host,
            port=port,
            reload=reload,
            log_level="info"
        )
    except KeyboardInterrupt:
        print("\nServer stopped")
