"""Run the Hermie API server: python -m hermie."""

import logging

import uvicorn

from hermie.config import get_host, get_port

logging.basicConfig(level=logging.INFO)


def main() -> None:
    uvicorn.run("hermie.app:app", host=get_host(), port=get_port())


if __name__ == "__main__":
    main()
