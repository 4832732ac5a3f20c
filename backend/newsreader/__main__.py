# newsreader/__main__.py
import uvicorn

from newsreader.config import settings

if __name__ == "__main__":
    uvicorn.run("newsreader.main:app", host=settings.host, port=settings.port)
