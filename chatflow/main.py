from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from chatflow.config import settings
from chatflow.api import chatflows, submissions, public
from chatflow.core.exceptions import ChatflowError
from chatflow.core.logging import logger
from chatflow.database import init_db
from chatflow.integrations.http_client import HttpClient

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.AUTO_CREATE_TABLES:
        await init_db()
    yield
    # Shutdown
    await HttpClient.close_client()

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(ChatflowError)
async def chatflow_error_handler(request: Request, exc: ChatflowError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

app.include_router(chatflows.router, prefix=f"{settings.API_V1_STR}/chatflows", tags=["chatflows"])
app.include_router(submissions.router, prefix=f"{settings.API_V1_STR}/submissions", tags=["submissions"])
app.include_router(public.router, prefix=f"{settings.API_V1_STR}/public", tags=["public"])

@app.get("/")
async def root():
    return {"message": "Chatflow API is running"}

@app.get("/health")
async def health_check():
    return {"status": "healthy"}
