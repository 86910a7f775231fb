import uvicorn

from scrapeproxy.config import get_settings
from scrapeproxy.main import create_app
from scrapeproxy.utils.logging import setup_logging


def main() -> None:
    settings = get_settings()
    setup_logging(level=settings.log_level, json_format=settings.log_json, log_file=settings.log_file)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
