import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pdc_pro.core.config import settings

# Setup Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Vehicle Pre-Delivery Inspection API",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --------------------------------------------------------------------------
# CORS Middleware
# --------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --------------------------------------------------------------------------
# Database Initialization (Startup Event)
# --------------------------------------------------------------------------
from pdc_pro.core.database import init_db


@app.on_event("startup")
async def on_startup():
    logger.info("Connecting to Database...")
    await init_db()
    logger.info("Database Connection Successful!")


# --------------------------------------------------------------------------
# Global Exception Handler (JSON 500 without internals)
# --------------------------------------------------------------------------
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error at {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"message": "Server error"}
    )


# --------------------------------------------------------------------------
# Basic Routes
# --------------------------------------------------------------------------
@app.get("/api/health")
async def health_check():
    return {"message": "PDC Pro API is running"}


# --------------------------------------------------------------------------
# API Routers
# --------------------------------------------------------------------------
from pdc_pro.api import api_router

app.include_router(api_router, prefix="/api")
