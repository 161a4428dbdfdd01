from fastapi import FastAPI

from skillswap.config import setup_logging
from skillswap.core.lifespan import lifespan
from .api import routes_progress

setup_logging()

app = FastAPI(title="Progress Service", lifespan=lifespan)

app.include_router(routes_progress.router, prefix="/api/progress")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8003)
