import argparse
import socket

import uvicorn

from medterm import app


def find_free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("", 0))
        return s.getsockname()[1]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the medical terminology API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=0, help="0 picks a free port")
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    port = args.port or find_free_port()
    print(f"PORT={port}", flush=True)
    uvicorn.run(app, host=args.host, port=port, log_level="warning")
