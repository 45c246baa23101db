import uvicorn

from ratecalc.core.config import get_settings
from ratecalc.main import create_app


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host="127.0.0.1", port=8000, log_config=None)


if __name__ == "__main__":
    main()
