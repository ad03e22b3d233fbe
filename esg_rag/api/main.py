"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Union

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from esg_rag.api.container import Services, build_services
from esg_rag.api.dependencies import authenticated_email, get_services
from esg_rag.config import settings
from esg_rag.domains import DOMAINS
from esg_rag.exceptions import ServiceError
from esg_rag.models.qa import QARequest, QAResponse
from esg_rag.models.search import (
    SearchRequest,
    SourcedDocument,
    WebSearchRequest,
    ZeroMatchResponse,
)

logger = logging.getLogger(__name__)

SearchResponse = Union[List[SourcedDocument], ZeroMatchResponse]


def _register_search_route(app: FastAPI, domain_name: str) -> None:
    endpoint = DOMAINS[domain_name].endpoint

    async def search(
        payload: SearchRequest,
        background_tasks: BackgroundTasks,
        email: str = Depends(authenticated_email),
        services: Services = Depends(get_services),
    ) -> SearchResponse:
        domain = services.domains[domain_name]
        result = await services.pipeline.search(domain, payload)
        background_tasks.add_task(
            services.usage_logger.record, email, endpoint, payload.top_k, payload.ext_k
        )
        return result

    app.add_api_route(
        f"/{endpoint}",
        search,
        methods=["POST"],
        response_model=SearchResponse,
        response_model_exclude_none=True,
        name=endpoint,
        summary=f"Hybrid search over the {domain_name} corpus",
    )


def create_app(services: Optional[Services] = None) -> FastAPI:
    """Build the application; ``services`` replaces the settings-built clients."""
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = services is None
        app.state.services = build_services(settings) if owned else services
        try:
            yield
        finally:
            if owned:
                await app.state.services.aclose()

    app = FastAPI(
        title="ESG RAG",
        description="Hybrid retrieval endpoints for ESG question answering",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/health")
    def health() -> dict[str, str]:
        """Simple readiness probe."""
        return {"status": "healthy"}

    for domain_name in DOMAINS:
        _register_search_route(app, domain_name)

    @app.post(
        "/tavily_search",
        response_model=List[SourcedDocument],
        response_model_exclude_none=True,
    )
    async def tavily_search(
        payload: WebSearchRequest,
        background_tasks: BackgroundTasks,
        email: str = Depends(authenticated_email),
        services: Services = Depends(get_services),
    ) -> List[SourcedDocument]:
        """Search the web for material outside the indexed corpora."""
        results = await services.web_search.search(payload.query, payload.max_results)
        background_tasks.add_task(
            services.usage_logger.record, email, "tavily_search", payload.max_results
        )
        return results

    @app.post("/rag", response_model=QAResponse, response_model_exclude_none=True)
    async def rag(
        payload: QARequest,
        background_tasks: BackgroundTasks,
        email: str = Depends(authenticated_email),
        services: Services = Depends(get_services),
    ) -> QAResponse:
        """Answer a question from one domain's search results."""
        domain = services.domains.get(payload.domain)
        if domain is None:
            raise HTTPException(status_code=404, detail=f"Unknown domain '{payload.domain}'.")

        result = await services.pipeline.search(
            domain, SearchRequest(query=payload.query, top_k=payload.top_k)
        )
        documents = result if isinstance(result, list) else []
        answer, sources = await services.answer_generator.generate(payload.query, documents)
        background_tasks.add_task(services.usage_logger.record, email, "rag", payload.top_k)
        return QAResponse(answer=answer, sources=sources)

    return app


app = create_app()
