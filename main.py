import uvicorn

from kanadrill.app import create_app
from kanadrill.config import settings

app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
