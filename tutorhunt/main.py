from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
from datetime import datetime
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.middleware.cors import CORSMiddleware
from tutorhunt.logger import logger
from tutorhunt.config import get_settings
from tutorhunt.database.database import engine, init_db
from tutorhunt.database.redis import redis_client
from tutorhunt.errors import register_error_handlers

### ROUTERS
from tutorhunt.routers.authentication import router as auth_router, limiter
from tutorhunt.routers.bookings import router as booking_router
from tutorhunt.routers.stats import router as stats_router
from tutorhunt.routers.tutors import router as tutor_router


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging all HTTP requests and responses.

    Logs request method, URL, response status, and timing information.
    Handles errors by logging exceptions.
    """
    async def dispatch(self, request: Request, call_next):
        # Log request
        start_time = datetime.now()
        logger.info(f"Request: {request.method} {request.url}")

        try:
            response = await call_next(request)
            # Log response
            duration = (datetime.now() - start_time).total_seconds()
            logger.info(f"Response: {response.status_code} - Duration: {duration:.3f}s")
            return response
        except Exception as e:
            # Log error
            logger.error(f"Error processing request: {str(e)}")
            raise

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle.
    Creates the tables on startup, releases the database and redis connections on shutdown.
    """
    logger.info("Server starting up...")
    init_db()
    yield
    logger.info("Server shutting down...")
    engine.dispose()
    if get_settings().use_redis:
        redis_client.close()

app = FastAPI(
    title=get_settings().app_name,
    version=get_settings().app_version,
    openapi_url="/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Rate limiter used by the token endpoint
app.state.limiter = limiter

register_error_handlers(app)

# Add logging middleware
app.add_middleware(LoggingMiddleware)

# The session cookie is sent cross-origin, so origins must be listed explicitly
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
    max_age=3600
)

# Include routers
app.include_router(auth_router, tags=['authentication'])
app.include_router(tutor_router, tags=['tutors'])
app.include_router(booking_router, tags=['bookings'])
app.include_router(stats_router, tags=['stats'])

@app.get("/")
def read_root():
    """
    Root endpoint returning a liveness message.

    Returns:
    - dict: Welcome message
    """
    return {"message": "Hello from TutorHunt Server...."}

def run():
    import uvicorn
    uvicorn.run(app, host=get_settings().app_host, port=get_settings().app_port)

if __name__ == '__main__':
    run()
