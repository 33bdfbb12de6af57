import uvicorn

from aba_finder.core.config import settings


def main() -> None:
    uvicorn.run("aba_finder.main:app", host="0.0.0.0", port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
