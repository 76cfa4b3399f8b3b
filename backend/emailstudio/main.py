from fastapi import FastAPI, Depends, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session
from typing import List
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from emailstudio.config import get_settings, get_cors_origins
from emailstudio.database import get_db, engine, Base
from emailstudio.exceptions import EmailStudioError
from emailstudio.services.llm_service import LLMService
from emailstudio.routers import emails

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

cors_allow_origins: List[str] = get_cors_origins(settings)

if cors_allow_origins:
    logger.info("Allowing CORS origins: %s", cors_allow_origins)


# Create tables
Base.metadata.create_all(bind=engine)

app = FastAPI(title="Email Studio API", version="0.1.0")


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup"""
    settings = get_settings()
    app.state.llm_service = LLMService(
        openai_api_key=settings.openai_api_key,
        anthropic_api_key=settings.anthropic_api_key,
        model=settings.generation_model,
    )
    logger.info(f"LLM service initialized with model {settings.generation_model}")


app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EmailStudioError)
async def email_studio_error_handler(request: Request, exc: EmailStudioError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/api")
def api_info():
    """API information endpoint"""
    return {"message": "Email Studio API", "version": "0.1.0"}


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Check if API and database are working"""
    try:
        db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


app.include_router(emails.router)
