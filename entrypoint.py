"""Server entrypoint: starts uvicorn with host/port from the environment."""
import os
import uvicorn

# Import the app object directly rather than passing uvicorn an import string,
# so the entrypoint also works from a frozen bundle.
from fundledger.main import app


def main() -> None:
    host = os.environ.get("FUNDLEDGER_HOST", "127.0.0.1")
    port = int(os.environ.get("FUNDLEDGER_PORT", "8001"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
