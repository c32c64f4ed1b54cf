import inspect
import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from routes.analysis_route import router as analysis_router
from routes.language_route import router as language_router
from routes.session_route import router as session_router
from services.openai.analysis_client import PlantAnalysisClient
from services.report.report_renderer import ReportRenderer
from services.report.session_store import SessionStore
from utils.cors import install_cors
from utils.settings import Settings

load_dotenv()  # Load environment variables from .env file if present

LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the analysis client (without a model client when no API key is set)
      - the in-memory report session store
      - the report renderer
    and attach them to `app.state`.
    """
    settings: Settings = app.state.settings

    analysis_client = PlantAnalysisClient.from_settings(settings)
    if not analysis_client.configured:
        LOGGER.warning("AI_GATEWAY_API_KEY is not set; analysis requests will fail with a configuration error.")
    app.state.analysis_client = analysis_client
    app.state.session_store = SessionStore()
    app.state.report_renderer = ReportRenderer(font_path=settings.report_font_path)

    try:
        yield
    finally:
        # Gracefully close the OpenAI client if it exposes a close/aclose method.
        client = getattr(analysis_client, "client", None)
        if client is not None:
            aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
            if aclose is not None:
                try:
                    if inspect.iscoroutinefunction(aclose):
                        await aclose()
                    else:
                        result = aclose()
                        if inspect.isawaitable(result):
                            await result
                except Exception as exc:  # pylint: disable=broad-exception-caught
                    LOGGER.warning("Error while closing the AI gateway client: %s", exc)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Plant Disease Diagnosis", lifespan=lifespan)
    app.state.settings = settings
    install_cors(app)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request payload.", "details": jsonable_encoder(exc.errors())})

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports whether the model client is configured.
        """
        client = getattr(request.app.state, "analysis_client", None)
        store = getattr(request.app.state, "session_store", None)
        return {
            "ok": True,
            "analysis_configured": bool(client is not None and client.configured),
            "sessions": len(store) if store is not None else 0,
        }

    # Register application routers
    app.include_router(analysis_router)
    app.include_router(session_router)
    app.include_router(language_router)

    return app


app = create_app()
