#!/usr/bin/env python3
"""
Server entry point: runs the registry API under uvicorn.

A single worker process; requests inside it are serialized by the hub lock.
"""
import os
import sys


def main() -> None:
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    print(f"[subscription-hub] Server: http://{host}:{port}")
    print("[subscription-hub] Press CTRL+C to stop")
    try:
        uvicorn.run(
            "subscription_hub.main:app",
            host=host,
            port=port,
            workers=1,
            reload=False,
            log_level="info",
            access_log=True,
        )
    except KeyboardInterrupt:
        print("\n[subscription-hub] Shutting down...")
        sys.exit(0)


if __name__ == "__main__":
    main()
