"""Run the relay server: ``python -m chat_relay``."""

import os

import uvicorn

from chat_relay.config import env_int


def main() -> None:
    port = env_int("PORT", 3000, minimum=1)
    host = os.getenv("HOST", "0.0.0.0")
    uvicorn.run("chat_relay.main:app", host=host, port=port)


if __name__ == "__main__":
    main()
