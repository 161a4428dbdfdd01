from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skillswap.config import setup_logging, get_cors_settings
from skillswap.core.lifespan import lifespan
from .api import routes_auth

setup_logging()

app = FastAPI(title="User Service", lifespan=lifespan)

app.add_middleware(CORSMiddleware, **get_cors_settings())

app.include_router(routes_auth.router, prefix="/api/auth")
app.include_router(routes_auth.users_router, prefix="/api/users")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
