# contactbook/__main__.py
import uvicorn

from contactbook.config import settings


def main() -> None:
    uvicorn.run("contactbook.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
