# 啟動方式: python -m gigflow
import uvicorn

from gigflow.core.config import settings


def main():
    uvicorn.run("gigflow.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
