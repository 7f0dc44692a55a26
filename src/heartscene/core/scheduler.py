"""Asynchronous asset loading with serialized completion delivery.

Each ``submit`` runs the kind's loader on a worker thread and returns a
``LoadRequest``. Workers only decode; their outcome is queued and handed to
the request's callbacks by ``dispatch_completed()``, which the animation loop
calls on the render thread at the start of every tick. That makes the
completion handlers the single, serialized point where loaded assets enter
the scene graph.
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from heartscene.config import LOADER_WORKERS
from heartscene.errors import ConcurrentMutationError, LoadFailure

logger = logging.getLogger(__name__)

Loader = Callable[[str], Any]
CompleteFn = Callable[[Any], None]
ErrorFn = Callable[[LoadFailure], None]


class AssetKind(str, Enum):
    MESH = "mesh"
    TEXTURE = "texture"
    FONT = "font"


class LoadState(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class LoadRequest:
    kind: AssetKind
    source: str
    on_complete: CompleteFn
    on_error: Optional[ErrorFn] = None
    state: LoadState = LoadState.PENDING
    error: Optional[LoadFailure] = None
    future: Optional[Future] = field(default=None, repr=False)
    # Filled in on the worker before the request is queued for delivery
    result: Any = field(default=None, repr=False)
    cause: Optional[BaseException] = field(default=None, repr=False)

    @property
    def done(self) -> bool:
        return self.state is not LoadState.PENDING


class AssetLoadScheduler:
    def __init__(
        self,
        loaders: Optional[Mapping[AssetKind, Loader]] = None,
        *,
        max_workers: int = LOADER_WORKERS,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> None:
        if loaders is None:
            from heartscene.loaders import DEFAULT_LOADERS

            loaders = DEFAULT_LOADERS
        self._loaders: Dict[AssetKind, Loader] = {AssetKind(k): v for k, v in loaders.items()}
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="asset-loader"
        )
        self._owns_executor = executor is None
        self._completed: "queue.SimpleQueue[LoadRequest]" = queue.SimpleQueue()
        self._requests: List[LoadRequest] = []
        self._lock = threading.Lock()
        self._owner = threading.get_ident()

    # ------------------------------------------------------------------
    def __enter__(self) -> "AssetLoadScheduler":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()

    @property
    def pending(self) -> int:
        """Requests whose outcome hasn't been delivered yet."""
        with self._lock:
            return sum(1 for r in self._requests if not r.done)

    @property
    def requests(self) -> List[LoadRequest]:
        with self._lock:
            return list(self._requests)

    # ------------------------------------------------------------------
    def submit(
        self,
        kind: AssetKind,
        source: str,
        on_complete: CompleteFn,
        on_error: Optional[ErrorFn] = None,
    ) -> LoadRequest:
        """Start loading ``source``; returns immediately."""
        kind = AssetKind(kind)
        loader = self._loaders.get(kind)
        if loader is None:
            raise KeyError(f"no loader registered for {kind.value} assets")
        request = LoadRequest(kind, str(source), on_complete, on_error)
        with self._lock:
            self._requests.append(request)
        request.future = self._executor.submit(self._run, request, loader)
        logger.debug("Submitted %s load for %s", kind.value, request.source)
        return request

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until every submitted loader has finished running.

        Outcomes still need ``dispatch_completed()`` to reach their handlers.
        Returns False if the timeout expired first.
        """
        futures = [r.future for r in self.requests if r.future is not None]
        _done, not_done = wait(futures, timeout=timeout)
        return not not_done

    def dispatch_completed(self) -> int:
        """Deliver every queued outcome on the calling (owner) thread.

        Returns the number of requests delivered.
        """
        if threading.get_ident() != self._owner:
            raise ConcurrentMutationError(
                "load completions must be dispatched on the thread that owns the scene"
            )
        delivered = 0
        while True:
            try:
                request = self._completed.get_nowait()
            except queue.Empty:
                break
            self._deliver(request)
            delivered += 1
        return delivered

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait, cancel_futures=not wait)

    # ------------------------------------------------------------------
    def _run(self, request: LoadRequest, loader: Loader) -> None:
        """Worker side: decode only, then queue the outcome for the owner thread."""
        try:
            request.result = loader(request.source)
        except Exception as e:
            request.cause = e
        finally:
            self._completed.put(request)

    def _deliver(self, request: LoadRequest) -> None:
        if request.done:
            return
        if request.cause is not None:
            self._fail(request, LoadFailure(request.kind, request.source, request.cause))
            return

        handle = request.result
        try:
            request.on_complete(handle)
        except Exception as e:
            # Building or inserting the visual failed; keep the loop alive
            logger.exception(
                "Completion handler for %s '%s' raised", request.kind.value, request.source
            )
            request.state = LoadState.FAILED
            request.error = LoadFailure(request.kind, request.source, e)
            return
        request.state = LoadState.SUCCEEDED
        logger.debug("Loaded %s '%s'", request.kind.value, request.source)

    def _fail(self, request: LoadRequest, failure: LoadFailure) -> None:
        request.state = LoadState.FAILED
        request.error = failure
        if request.on_error is None:
            logger.warning("%s", failure)
            return
        try:
            request.on_error(failure)
        except Exception:
            logger.exception("Error handler for '%s' raised", request.source)


__all__ = ["AssetKind", "LoadState", "LoadRequest", "AssetLoadScheduler"]
