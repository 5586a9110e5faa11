import uvicorn

from aibridge.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("aibridge.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
