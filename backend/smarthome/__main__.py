"""Run the API with uvicorn: ``python -m smarthome``."""

import uvicorn

from smarthome.config import settings


def main() -> None:
    uvicorn.run(
        "smarthome.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
