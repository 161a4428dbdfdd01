from fastapi import FastAPI

from skillswap.config import setup_logging
from skillswap.core.lifespan import lifespan
from .api import routes_match

setup_logging()

app = FastAPI(title="Match Service", lifespan=lifespan)

app.include_router(routes_match.match_router, prefix="/api/matches")
app.include_router(routes_match.notifications_router, prefix="/api/notifications")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8004)
