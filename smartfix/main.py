from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from smartfix.core.config import settings
from smartfix.core.errors import NotAuthenticatedError, RemoteStoreError, ValidationError
from smartfix.api import auth, bookings, services
from smartfix.core.logger import setup_logging, logger
from smartfix.services.container import start_container
from contextlib import asynccontextmanager
from datetime import datetime

setup_logging()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 Starting SmartFix backend")
    app.state.container = await start_container(settings)
    yield
    # Shutdown
    app.state.container.session.unsubscribe()
    logger.info("🛑 Shutting down backend")

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan
)

@app.exception_handler(NotAuthenticatedError)
async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError):
    return JSONResponse(status_code=401, content={"message": exc.message})

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"reason": exc.reason, "message": exc.message})

@app.exception_handler(RemoteStoreError)
async def remote_store_error_handler(request: Request, exc: RemoteStoreError):
    logger.warning(f"⚠️ Remote store failure surfaced to user: {exc.message}")
    return JSONResponse(status_code=502, content={"message": exc.message})

# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error("🔥 UNHANDLED ERROR: {}", str(exc))
    return JSONResponse(
        status_code=500,
        content={"message": "Internal Server Error", "detail": "An unexpected error occurred. Please try again."}
    )

# Include routers
app.include_router(services.router, tags=["Services"])
app.include_router(auth.router, tags=["Auth"])
app.include_router(bookings.router, tags=["Bookings"])

@app.get("/")
async def health_check():
    return {'status': 'active', 'time': datetime.now().isoformat()}

@app.get("/health")
async def health_check_std():
    return {"status": "ok", "environment": settings.ENVIRONMENT, "timestamp": datetime.now().isoformat()}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("smartfix.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
