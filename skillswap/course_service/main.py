from fastapi import FastAPI

from skillswap.config import setup_logging
from skillswap.core.lifespan import lifespan
from .api import routes_course

setup_logging()

app = FastAPI(title="Course Service", lifespan=lifespan)

app.include_router(routes_course.course_router, prefix="/api/courses")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8002)
