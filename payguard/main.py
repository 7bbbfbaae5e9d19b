from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
import logging

from payguard.config import settings
from payguard.exceptions import PayGuardError
from payguard.pipeline import pipeline
from payguard.scheduler import create_scheduler
from payguard.api import bills, subscriptions, dashboard, events

# Setup Logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    pipeline.connect()
    scheduler = None
    if settings.SCHEDULER_ENABLED:
        scheduler = create_scheduler(pipeline.run_bill_checker, pipeline.run_daily_summary)
        scheduler.start()
        logger.info(f"Scheduler started with {len(scheduler.get_jobs())} jobs")
    yield
    if scheduler:
        scheduler.shutdown()
    pipeline.close()

app = FastAPI(
    title="PayGuard API",
    description="Bill tracking with overdue escalation and notification pipeline",
    version="1.0.0",
    lifespan=lifespan
)

# CORS Config
origins = [
    "http://localhost:3000",
    "http://localhost:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(PayGuardError)
async def payguard_error_handler(request: Request, exc: PayGuardError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
    logger.warning(f"Rejected request to {request.url.path}: {details}")
    return JSONResponse(
        status_code=400,
        content={"error": "VALIDATION_ERROR", "message": "Request validation failed", "details": details},
    )

# Router Registration
app.include_router(bills.router)
app.include_router(subscriptions.router)
app.include_router(dashboard.router)
app.include_router(events.router)

# Health Check
@app.get("/health")
async def health_check():
    return {"status": "ok", "environment": settings.ENVIRONMENT}

if __name__ == "__main__":
    uvicorn.run("payguard.main:app", host="0.0.0.0", port=8000, reload=True)
