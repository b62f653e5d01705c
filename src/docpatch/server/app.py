"""FastAPI app for the Slack slash command: acknowledge at once, patch in the background"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import BackgroundTasks, FastAPI, Form
from fastapi.responses import PlainTextResponse

from docpatch.config import Settings, configure_logging, load_config
from docpatch.core.models import Request
from docpatch.core.paths import split_request
from docpatch.core.pipeline import PipelineContext
from docpatch.errors import InvalidInput
from docpatch.server.dispatch import Dispatcher

logger = logging.getLogger(__name__)

USAGE = "Usage: /fixdoc <doc path> <what is wrong>, e.g. /fixdoc /widgets/button `## Sizing` the pixel example is wrong"


def create_app(settings: Optional[Settings] = None, ctx: Optional[PipelineContext] = None) -> FastAPI:
    settings = settings or load_config()
    configure_logging(settings.log_level)
    ctx = ctx or PipelineContext.from_settings(settings)
    dispatcher = Dispatcher(ctx, settings.max_workers)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        dispatcher.shutdown(wait=True)
        ctx.host.close()

    app = FastAPI(title=settings.app_name, description="Documentation fixes from chat requests", lifespan=lifespan)
    app.state.dispatcher = dispatcher

    @app.get("/", response_class=PlainTextResponse)
    def health() -> str:
        return "Slack bot is running ✅"

    @app.post("/slack/fixdoc", response_class=PlainTextResponse)
    def fixdoc(
        background_tasks: BackgroundTasks,
        text: str = Form(""),
        user_name: str = Form(""),
        response_url: str = Form(""),
    ) -> str:
        logger.info("[Slack] %s submitted: %s", user_name, text)
        try:
            raw_path, issue = split_request(text)
        except InvalidInput:
            return USAGE

        request = Request(raw_path=raw_path, raw_issue=issue, username=user_name, callback_url=response_url)
        background_tasks.add_task(dispatcher.submit, request)
        return f"✅ Thanks <@{user_name}>! We'll fix: *{text}*"

    return app
