"""
HTTP entrypoints for ingestion and episode processing.

Both endpoints answer CORS pre-flight requests and send permissive CORS
headers on every response. Errors come back as {"error": ...} with a
non-2xx status; nothing escapes as an unhandled fault.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from podbrief import __version__
from podbrief.errors import PodbriefError
from podbrief.ingestion.podcast_ingest import ingest_podcast
from podbrief.logger import setup_logging
from podbrief.processing.processor import process_episode


logger = setup_logging(logger_name="api", log_file="api.log")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

INGEST_PATH = "/fetch-xiaoyuzhou-podcast"
PROCESS_PATH = "/process-episode"


class IngestRequest(BaseModel):
    podcastId: Optional[str] = None
    creatorId: Optional[str] = None


class ProcessRequest(BaseModel):
    episodeId: Optional[str] = None


app = FastAPI(title="podbrief", version=__version__)


def json_response(body: dict, status_code: int = 200) -> JSONResponse:
    return JSONResponse(body, status_code=status_code, headers=CORS_HEADERS)


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected request body on {request.url.path}: {exc.errors()}")
    return json_response({"error": "Request body must be a JSON object"}, 400)


@app.options(INGEST_PATH)
@app.options(PROCESS_PATH)
def preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@app.post(INGEST_PATH)
def fetch_podcast(payload: IngestRequest) -> JSONResponse:
    try:
        result = ingest_podcast(payload.podcastId, payload.creatorId)
    except PodbriefError as e:
        logger.error(f"Ingestion failed: {e}")
        return json_response({"error": str(e)}, e.status_code)
    except Exception as e:
        logger.error(f"Ingestion failed: {e}", exc_info=True)
        return json_response({"error": str(e)}, 500)
    return json_response(result)


@app.post(PROCESS_PATH)
def process(payload: ProcessRequest) -> JSONResponse:
    result = process_episode(payload.episodeId)
    return json_response(result.body, result.status_code)
