import uvicorn

from tasktrack.config import settings


def main() -> None:
    uvicorn.run("tasktrack.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
