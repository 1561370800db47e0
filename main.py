"""Ordo Manager dev launcher. Starts the API server in watch mode."""

import argparse
import logging
import os
import signal
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "127.0.0.1")
PORT = os.getenv("PORT", "13013")


def main():
    parser = argparse.ArgumentParser(description="Ordo Manager dev launcher")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Data storage directory (default: ./data)")
    parser.add_argument("--demo", action="store_true",
                        help="Replace stored data with demo users, characters and a session")
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"))
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.demo:
        from backend.config import data_dir_from_env
        from backend.demo import create_demo_data
        from ordo_manager.storage import Storage
        from ordo_manager.store import Store
        create_demo_data(Store(Storage(args.data_dir or data_dir_from_env())))

    # Build env for the subprocess so the server picks up the same data dir
    env = os.environ.copy()
    if args.data_dir:
        env["DATA_DIR"] = str(args.data_dir.resolve())

    proc: subprocess.Popen | None = None

    def shutdown(*_):
        print("\nShutting down...")
        if proc is not None:
            proc.terminate()
            proc.wait()
        sys.exit(0)

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    print(f"Starting API on http://{HOST}:{PORT} ...")
    proc = subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "backend.app:app", "--reload",
         "--host", HOST, "--port", PORT, "--log-level", args.log_level.lower()],
        cwd=ROOT, env=env,
    )
    proc.wait()


if __name__ == "__main__":
    main()
