import argparse

import uvicorn

from .app import app

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="podbrief HTTP API")
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host for HTTP server (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for HTTP server (default: 8000).",
    )
    args = parser.parse_args()

    uvicorn.run(app, host=args.host, port=args.port)
