"""hooktrigger - Main entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.requests import ClientDisconnect

from hooktrigger.config import settings
from hooktrigger.db import close_db, init_db
from hooktrigger.errors import MalformedPayload, MissingContentType, WebhookError
from hooktrigger.logging_config import configure_logging
from hooktrigger.registry import InMemoryJobRegistry, JobRegistry, PostgresJobRegistry
from hooktrigger.runner import JobRunner, ShellJobRunner
from hooktrigger.webhooks import handle_webhook

configure_logging(log_level=settings.log_level, json_output=settings.json_logs)

logger = logging.getLogger(__name__)


def build_registry() -> JobRegistry:
    if settings.registry == "memory":
        registry = InMemoryJobRegistry()
        if settings.jobs_file:
            registry.load_jobs_file(settings.jobs_file)
        return registry
    return PostgresJobRegistry()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if app.state.registry is None:
        app.state.registry = build_registry()
    use_db = isinstance(app.state.registry, PostgresJobRegistry)
    if use_db:
        await init_db()
        if settings.jobs_file:
            await app.state.registry.load_jobs_file(settings.jobs_file)

    yield

    runner = app.state.runner
    if isinstance(runner, ShellJobRunner) and runner.running:
        logger.info("Waiting for %d running job(s)", runner.running)
        await runner.drain()
    if use_db:
        await close_db()


def create_app(registry: JobRegistry | None = None, runner: JobRunner | None = None) -> FastAPI:
    app = FastAPI(
        title="hooktrigger",
        lifespan=lifespan,
    )
    app.state.registry = registry
    app.state.runner = runner or ShellJobRunner()

    @app.exception_handler(WebhookError)
    async def webhook_error_handler(request: Request, exc: WebhookError):
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post("/webhook")
    async def webhook(request: Request):
        """Trigger every job whose criteria match the incoming webhook."""
        content_type = request.headers.get("content-type")
        if not (content_type or "").strip():
            logger.warning("Received hook without Content-Type header.")
            raise MissingContentType()

        try:
            body = await request.body()
        except ClientDisconnect as e:
            logger.warning("Failed to read webhook payload from request body: %s", e)
            raise MalformedPayload("Failed to read webhook payload from request body.") from e

        result = await handle_webhook(
            body,
            content_type,
            request.headers.get("user-agent"),
            registry=request.app.state.registry,
            runner=request.app.state.runner,
            prefix=settings.env_prefix,
        )
        return PlainTextResponse(result.message, status_code=result.status_code)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
