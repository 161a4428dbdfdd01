from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skillswap.config import setup_logging, get_cors_settings
from .api import routes_gateway

setup_logging()

app = FastAPI(title="API Gateway")

app.add_middleware(CORSMiddleware, **get_cors_settings())

app.include_router(routes_gateway.router, prefix="/api")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
