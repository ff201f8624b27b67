"""Run the API Explorer with uvicorn."""

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "api_explorer.main:app",
        host=os.getenv("API_EXPLORER_HOST", "127.0.0.1"),
        port=int(os.getenv("API_EXPLORER_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
