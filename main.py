
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from typing import Dict
import logging
import time
import uuid

from config import settings, validate_config
from models import SearchRequest, SelectRequest, SessionRequest, SessionView
from services.fetch_coordinator import FetchCoordinator
from services.geo_client import GeographyClient
from services.geo_service import FallbackGeographyStore
from services.location_resolver import LocationResolver
from services.result_cache import ResultCache

# Setup logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(levelname)s:%(name)s:%(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.SERVICE_NAME,
    description="Drill down country, province and city for neighborhood rooms",
    version=settings.SERVICE_VERSION
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if validate_config():
    logger.info(f"✅ Geography API at {settings.GEO_API_BASE_URL}")
else:
    logger.warning("⚠️  Geography API configuration looks wrong, lookups will likely fail")

# Shared across sessions for the lifetime of the process
geo_client = GeographyClient(base_url=settings.GEO_API_BASE_URL, timeout=settings.GEO_API_TIMEOUT)
fallback_store = FallbackGeographyStore()
result_cache = ResultCache()
fetch_coordinator = FetchCoordinator(result_cache)

sessions: Dict[str, LocationResolver] = {}


def _get_session(session_id: str) -> LocationResolver:
    resolver = sessions.get(session_id)
    if resolver is None:
        raise HTTPException(status_code=404, detail=f"Unknown session {session_id}")
    return resolver


def _view(session_id: str, resolver: LocationResolver) -> SessionView:
    state = resolver.state
    return SessionView(
        session_id=session_id,
        step=state.step,
        selected_country=state.selected_country.name if state.selected_country else None,
        selected_province=state.selected_province,
        search_query=state.search_query,
        last_error=state.last_error,
        loading=resolver.loading,
        options=resolver.visible_options(),
        result=resolver.result
    )


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "service": settings.SERVICE_NAME,
        "status": "running",
        "version": settings.SERVICE_VERSION,
        "geo_api": settings.GEO_API_BASE_URL
    }


@app.get("/health")
async def health():
    """Detailed health check"""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "open_sessions": len(sessions),
        "cached_lookups": len(result_cache)
    }


@app.post("/sessions", response_model=SessionView)
async def open_session(request: SessionRequest):
    session_id = str(uuid.uuid4())[:8]
    resolver = LocationResolver(
        geo_client,
        fallback_store=fallback_store,
        coordinator=fetch_coordinator,
        origin_city=request.origin_city,
        initial_country=request.initial_country,
        initial_province=request.initial_province
    )
    sessions[session_id] = resolver

    logger.info(f"[{session_id}] Opening location session")
    await resolver.open()
    return _view(session_id, resolver)


@app.get("/sessions/{session_id}", response_model=SessionView)
async def get_session(session_id: str):
    return _view(session_id, _get_session(session_id))


@app.post("/sessions/{session_id}/search", response_model=SessionView)
async def search_session(session_id: str, request: SearchRequest):
    resolver = _get_session(session_id)
    resolver.set_search(request.query)
    return _view(session_id, resolver)


@app.post("/sessions/{session_id}/select", response_model=SessionView)
async def select_option(session_id: str, request: SelectRequest):
    resolver = _get_session(session_id)
    try:
        await resolver.select(request.choice)
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    view = _view(session_id, resolver)
    if resolver.result:
        logger.info(f"[{session_id}] Session resolved to {resolver.result.city}")
        sessions.pop(session_id, None)
    return view


@app.post("/sessions/{session_id}/back", response_model=SessionView)
async def go_back(session_id: str):
    resolver = _get_session(session_id)
    try:
        await resolver.back()
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _view(session_id, resolver)


@app.post("/sessions/{session_id}/retry", response_model=SessionView)
async def retry_step(session_id: str):
    resolver = _get_session(session_id)
    try:
        await resolver.retry()
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _view(session_id, resolver)


@app.delete("/sessions/{session_id}")
async def close_session(session_id: str):
    resolver = _get_session(session_id)
    resolver.close()
    sessions.pop(session_id, None)
    logger.info(f"[{session_id}] Session closed")
    return {"session_id": session_id, "closed": True}


# Run with: uvicorn main:app --host 0.0.0.0 --port 8000
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
