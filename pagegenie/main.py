from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pagegenie.api.routes import ai, notes, quiz, reading, sources
from pagegenie.config import settings
from pagegenie.errors import PageGenieError, ParseFailureError, UpstreamCallFailure, ValidationFailure
from pagegenie.services import logger as log_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    log_service.log_event(event_type="startup", message="PageGenie backend started")
    yield


app = FastAPI(
    title="PageGenie",
    description="AI reading assistant backend: summaries, quizzes, notes and source finding",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(ai.router)
app.include_router(sources.router)
app.include_router(quiz.router)
app.include_router(notes.router)
app.include_router(reading.router)

ERROR_STATUS: dict[type[PageGenieError], int] = {
    ValidationFailure: 400,
    ParseFailureError: 502,
    UpstreamCallFailure: 502,
}


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"code": code, "message": message})


@app.exception_handler(PageGenieError)
async def handle_pagegenie_error(request: Request, exc: PageGenieError):
    status_code = ERROR_STATUS.get(type(exc), 500)
    log_service.log_event(
        event_type="request_failed",
        message=str(exc),
        path=request.url.path,
        code=exc.code,
        status_code=status_code,
    )
    return _error_response(status_code, exc.code, str(exc))


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    return _error_response(422, "validation_error", str(exc))


@app.get("/api/health")
async def health():
    return {"status": "ok", "service": "pagegenie"}
