"""Bounded background execution of pipeline requests"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from docpatch.core.models import Request
from docpatch.core.pipeline import PipelineContext, handle

logger = logging.getLogger(__name__)


class Dispatcher:
    """Runs handle() on a fixed-size thread pool so accepted requests never hold the inbound connection."""

    def __init__(self, ctx: PipelineContext, max_workers: int = 4):
        self.ctx = ctx
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="docpatch")

    def submit(self, request: Request) -> Future:
        logger.info("Queued %s from %s", request.raw_path, request.username)
        return self.executor.submit(handle, request, self.ctx)

    def shutdown(self, wait: bool = True) -> None:
        self.executor.shutdown(wait=wait)
