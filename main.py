from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.config import settings
from app.core.database import wait_for_database
from app.core.logging import configure_logging
from app.endpoints import tests, student_answers, domains
from app.middleware.exceptions import global_exception_handler, http_exception_handler, validation_exception_handler
from app.middleware.logging import RequestLoggingMiddleware
from app.utils.events import event_bus, register_default_handlers

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

app.include_router(tests.router, prefix="/tests", tags=["Tests"])
app.include_router(student_answers.router, prefix="/student-answers", tags=["Student Answers"])
app.include_router(domains.router, prefix="/domains", tags=["Domains"])


@app.get("/", tags=["Health"])
async def root():
    return {"message": f"{settings.PROJECT_NAME} is running", "version": settings.VERSION}


@app.get("/healthz", tags=["Health"])
async def healthz():
    return {"status": "ok"}


@app.on_event("startup")
async def startup_event():
    configure_logging()
    wait_for_database()
    register_default_handlers(event_bus)

@app.on_event("shutdown")
async def shutdown_event():
    event_bus.shutdown()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
