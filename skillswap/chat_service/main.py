from fastapi import FastAPI

from skillswap.config import setup_logging
from skillswap.core.lifespan import lifespan
from .api import routes_chat

setup_logging()

app = FastAPI(title="Chat Service", lifespan=lifespan)

app.include_router(routes_chat.router, prefix="/api/chat")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8005)
