"""Asynchronous execution of transcoding runs.

A run is a stage function executed on a worker thread. As it advances it
reports progress; when it finishes it produces exactly one terminal
TranscodingResult. Progress and results are never delivered on the worker:
they are posted to the pipeline's delivery context, and each delivery first
checks that the run's owner is still alive. Runs are never cancelled; an
owner that goes away simply stops receiving callbacks.

Import runs move through:
    REQUESTED -> LOADED -> FORMAT_RESOLVED -> DECODED -> DELIVERED | FAILED
Export runs move through:
    REQUESTED -> ENCODED [-> WRITTEN] -> DELIVERED | FAILED
"""

import logging
import weakref
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from audioimport.delivery import DeliveryContext, default_delivery
from audioimport.dispatch import TranscodingDispatcher
from audioimport.errors import ConstructionError, TranscodingError, TranscodingStatus
from audioimport.types import PipelineConfig, TranscodingResult

logger = logging.getLogger(__name__)


ProgressCallback = Callable[[int], None]
ResultCallback = Callable[[TranscodingResult[Any]], None]


class Stage(Enum):
    """Pipeline stages, in the order a run can reach them."""

    REQUESTED = "requested"
    LOADED = "loaded"
    FORMAT_RESOLVED = "format_resolved"
    DECODED = "decoded"
    IMPORTED = "imported"
    CONVERTED = "converted"
    ENCODED = "encoded"
    WRITTEN = "written"
    DELIVERED = "delivered"
    FAILED = "failed"


class TranscodingOwner(Protocol):
    """Object whose lifetime gates delivery, with its own subscribers."""

    on_progress: list[ProgressCallback]
    on_result: list[ResultCallback]


@dataclass
class TranscodingRequest:
    """One submitted run: its owner (weakly held) and per-run subscribers."""

    name: str
    owner_ref: "weakref.ref[TranscodingOwner]"
    on_progress: list[ProgressCallback] = field(default_factory=list)
    on_result: list[ResultCallback] = field(default_factory=list)


class PipelineRun:
    """Stage and progress tracking for a run, used by its stage function."""

    def __init__(self, pipeline: "TranscodingPipeline", request: TranscodingRequest) -> None:
        self._pipeline = pipeline
        self.request = request
        self.stage = Stage.REQUESTED
        self.percent = 0

    def advance(self, stage: Stage, percent: int) -> None:
        """Record that `stage` was reached and report progress.

        Progress never goes backwards: a lower percentage than already
        reported is raised to the previous value.
        """
        logger.debug("%s: %s -> %s", self.request.name, self.stage.value, stage.value)
        self.stage = stage
        self.percent = max(self.percent, min(percent, 100))
        self._pipeline._post_progress(self.request, self.percent)


Job = Callable[[PipelineRun], Any]


class TranscodingPipeline:
    """Worker pool plus delivery context for transcoding runs.

    Args:
        dispatcher: Codec dispatcher shared by all runs (default: all
            supported codecs).
        delivery: Where callbacks run (default: the running event loop, or
            a QueueDelivery outside of one).
        config: Worker pool settings.
    """

    def __init__(
        self,
        dispatcher: TranscodingDispatcher | None = None,
        delivery: DeliveryContext | None = None,
        config: PipelineConfig | None = None,
    ) -> None:
        self.config = config or PipelineConfig()
        self.dispatcher = dispatcher or TranscodingDispatcher()
        self.delivery = delivery if delivery is not None else default_delivery()
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix=self.config.thread_name_prefix,
        )

    def submit(
        self,
        owner: TranscodingOwner,
        name: str,
        job: Job,
        *,
        on_progress: Iterable[ProgressCallback] | None = None,
        on_result: Iterable[ResultCallback] | None = None,
    ) -> "Future[None]":
        """Run `job` on a worker thread.

        Args:
            owner: Object gating delivery; held by weak reference only.
            name: Label used in log messages.
            job: Stage function. It receives the PipelineRun, returns the
                success payload and raises TranscodingError on failure.
            on_progress: Extra progress subscribers for this run.
            on_result: Extra result subscribers for this run.

        Returns:
            Future that completes once the terminal result has been posted
            to the delivery context. It resolves to None.
        """
        request = TranscodingRequest(
            name=name,
            owner_ref=weakref.ref(owner),
            on_progress=list(on_progress or ()),
            on_result=list(on_result or ()),
        )
        logger.debug("Dispatching %s", name)
        return self._executor.submit(self._execute, request, job)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting runs; optionally wait for running ones to finish."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "TranscodingPipeline":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown(wait=True)

    def _execute(self, request: TranscodingRequest, job: Job) -> None:
        run = PipelineRun(self, request)
        result: TranscodingResult[Any]

        try:
            payload = job(run)
        except TranscodingError as error:
            result = self._failure(run, error)
        except Exception as error:
            logger.exception("%s failed unexpectedly after stage '%s'", request.name, run.stage.value)
            internal = ConstructionError(f"Internal error: {error}")
            internal.__cause__ = error
            result = self._failure(run, internal)
        else:
            run.advance(Stage.DELIVERED, 100)
            result = TranscodingResult(status=TranscodingStatus.SUCCESS, payload=payload)

        self.delivery.post(_deliver_result, request, result)

    def _failure(self, run: PipelineRun, error: TranscodingError) -> TranscodingResult[Any]:
        if error.stage is None:
            error.stage = run.stage.value
        logger.error("%s failed after stage '%s': %s", run.request.name, error.stage, error)
        run.stage = Stage.FAILED
        return TranscodingResult(status=error.status, error=error)

    def _post_progress(self, request: TranscodingRequest, percent: int) -> None:
        self.delivery.post(_deliver_progress, request, percent)


def _deliver_progress(request: TranscodingRequest, percent: int) -> None:
    owner = request.owner_ref()
    if owner is None:
        return

    for callback in (*owner.on_progress, *request.on_progress):
        _invoke(callback, percent)


def _deliver_result(request: TranscodingRequest, result: TranscodingResult[Any]) -> None:
    owner = request.owner_ref()
    if owner is None:
        logger.debug("Owner of %s is gone, dropping %s result", request.name, result.status.value)
        return

    callbacks = [*owner.on_result, *request.on_result]
    if not callbacks:
        logger.warning("No result subscriber bound for %s", request.name)

    for callback in callbacks:
        _invoke(callback, result)


def _invoke(callback: Callable[[Any], None], argument: Any) -> None:
    # A failing subscriber must not keep the others from being notified
    try:
        callback(argument)
    except Exception:
        logger.exception("Subscriber %r raised", callback)
