"""EcoLearn API - FastAPI with DynamoDB and gamification"""
import logging
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ecolearn import dynamo
from ecolearn.config import get_settings
from ecolearn.errors import EcoLearnError
from ecolearn.routers import (
    admin, auth, challenges, ecomap, events, leaderboard, modules, pin_requests,
    quizzes, reviews, rewards, student, submissions, surveys, teacher,
)

settings = get_settings()
logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Environmental education with points, badges, challenges and rewards",
    version=settings.VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc"
)

for module in (
    auth, modules, quizzes, challenges, submissions, rewards, events, surveys,
    leaderboard, ecomap, pin_requests, reviews, admin, teacher, student,
):
    app.include_router(module.router, prefix="/api")

app.add_middleware(CORSMiddleware, allow_origins=settings.CORS_ORIGINS, allow_credentials=True, allow_methods=["*"], allow_headers=["*"])


@app.exception_handler(EcoLearnError)
async def ecolearn_error_handler(request: Request, exc: EcoLearnError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message, **exc.extra}
    )


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=exc.headers
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get('msg', "Invalid request") if errors else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": message,
            "errors": [{"field": ".".join(str(p) for p in e.get('loc', [])), "message": e.get('msg')} for e in errors]
        }
    )


@app.get("/")
async def root():
    return {"service": "ecolearn", "status": "running", "version": settings.VERSION}


@app.get("/health")
async def health():
    try:
        dynamo.db_client.users_table.meta.client.describe_table(TableName=settings.DYNAMODB_USERS_TABLE)
        return {"status": "healthy", "dynamodb": "connected"}
    except Exception as e:
        logger.warning(f"Health check DynamoDB connection failed: {str(e)}")
        return {"status": "healthy", "dynamodb": "unavailable", "warning": str(e)[:100]}
