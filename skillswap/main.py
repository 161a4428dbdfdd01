from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skillswap.config import setup_logging, get_cors_settings
from skillswap.core.lifespan import lifespan
from skillswap.chat_service.api import routes_chat
from skillswap.course_service.api import routes_course
from skillswap.match_service.api import routes_match
from skillswap.progress_service.api import routes_progress
from skillswap.user_service.api import routes_auth


setup_logging()


def create_app(lifespan_handler=lifespan) -> FastAPI:
    app = FastAPI(title="SkillSwap", lifespan=lifespan_handler)

    # CORS
    app.add_middleware(CORSMiddleware, **get_cors_settings())

    # Роуты
    app.include_router(routes_auth.router, prefix="/api/auth")
    app.include_router(routes_auth.users_router, prefix="/api/users")
    app.include_router(routes_course.course_router, prefix="/api/courses")
    app.include_router(routes_progress.router, prefix="/api/progress")
    app.include_router(routes_match.match_router, prefix="/api/matches")
    app.include_router(routes_match.notifications_router, prefix="/api/notifications")
    app.include_router(routes_chat.router, prefix="/api/chat")

    @app.get("/api/health")
    async def health():
        return {"status": "healthy"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
