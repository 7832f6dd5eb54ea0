"""
PromptForge - FastAPI service that generates content with admin-defined Optimizers.
Routes each request to an LLM provider, normalizes the output and meters usage per caller.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from config import Config
from routes import generate, playground, usage
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    yield
    await HTTPClientManager.close_all()

app = FastAPI(title=Config.APP_TITLE, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return malformed request bodies as 400 with a readable message."""
    errors = exc.errors()
    app_logger.error(f"Validation error for {request.url}: {errors}")

    message = "Invalid request body"
    if errors:
        first_error = errors[0]
        loc = [str(part) for part in first_error.get('loc', []) if part != 'body']
        field = ".".join(loc) or "body"
        message = f"{field}: {first_error.get('msg', 'Validation error')}"

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": message,
            "detail": [
                {"msg": error.get('msg'), "type": error.get('type'), "loc": list(error.get('loc', []))}
                for error in errors
            ],
        },
    )


#root endpoint
@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"message": "PromptForge generation service is running"}

app.include_router(generate.router, tags=["generation"])
app.include_router(playground.router, tags=["admin"])
app.include_router(usage.router, tags=["admin"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
