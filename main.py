# main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from intern_tracker.config import CORS_ORIGINS
from intern_tracker.database import Base, engine, SessionLocal
from intern_tracker.reference_data import seed_reference_data
from intern_tracker.routes import (
    auth_router, students_router, daily_reports_router, progress_router,
    workflows_router, reference_router, reports_router
)

logger = logging.getLogger("intern_tracker.main")

# Create FastAPI app
app = FastAPI(
    title="Intern Tracker",
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    logger.info("Validation error on %s %s: %s", request.method, request.url.path, details)
    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation error",
            "details": details
        }
    )


@app.middleware("http")
async def catch_exceptions_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        # Full detail stays in the server log, the caller gets a generic message
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"}
        )


# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create database tables and default lookup lists
Base.metadata.create_all(bind=engine)
with SessionLocal() as db:
    seed_reference_data(db)

# Include routers
app.include_router(auth_router, prefix="/auth", tags=["Auth"])
app.include_router(students_router)
app.include_router(daily_reports_router)
app.include_router(progress_router)
app.include_router(workflows_router)
app.include_router(reference_router)
app.include_router(reports_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
