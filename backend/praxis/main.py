"""Main FastAPI application for the Praxis backend."""
from fastapi import FastAPI, Request

from praxis.api.routes.chat import router as chat_router
from praxis.api.routes.composer import router as composer_router
from praxis.api.routes.drafts import router as drafts_router
from praxis.api.routes.jobs import router as jobs_router
from praxis.api.routes.plans import router as plans_router
from praxis.api.routes.tasks import router as tasks_router
from praxis.core.config import settings
from praxis.core.logging import configure_logging
from praxis.core.middleware import RequestContextMiddleware
from praxis.observability.client import init_opik
from praxis.observability.tracing import trace

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestContextMiddleware)
app.include_router(plans_router)
app.include_router(tasks_router)
app.include_router(drafts_router)
app.include_router(composer_router)
app.include_router(chat_router)
app.include_router(jobs_router)


@app.on_event("startup")
async def startup_observability() -> None:
    """Initialize observability backends after the event loop starts."""
    init_opik()


@app.get("/health", tags=["health"], summary="Readiness check")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can check the API is up."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
