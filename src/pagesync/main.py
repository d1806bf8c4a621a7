import uvicorn

from pagesync.settings import settings


def run() -> None:
    uvicorn.run("pagesync.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
