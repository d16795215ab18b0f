from __future__ import annotations

import threading
import time

from app.schemas.quote import BoardState, FetchFailure, FetchResult, FetchSuccess


class RefreshHandle:
    """Cancellable handle for one armed refresh timer."""

    def __init__(self, generation: int) -> None:
        self.generation = generation
        self._cancelled = threading.Event()
        self.thread: threading.Thread | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()

    def wait(self, timeout: float) -> bool:
        """Sleep for one interval; True means the handle was cancelled."""
        return self._cancelled.wait(timeout)


class RefreshCycleController:
    """Owns the dashboard quote set and the timer that refreshes it.

    Each tick calls ``fetcher.fetch()`` and applies the returned
    ``FetchSuccess``/``FetchFailure``. A successful fetch replaces the whole
    quote set; a failed one keeps the last good set. ``loading`` drops to
    False after the first attempt either way.

    Results that come back for a cancelled or superseded handle are
    discarded, so a slow request cannot write into a stopped board.
    """

    def __init__(self, *, fetcher, interval_sec: float = 60.0) -> None:
        self.fetcher = fetcher
        self.interval_sec = interval_sec
        self._lock = threading.Lock()
        self._state = BoardState()
        self._handle: RefreshHandle | None = None
        self._generation = 0
        self._metrics = {
            "fetches": 0,
            "successes": 0,
            "failures": 0,
            "discarded_late_results": 0,
        }

    def _is_stale(self, handle: RefreshHandle | None) -> bool:
        if handle is None:
            return False
        return handle.cancelled or handle.generation != self._generation

    def fetch_once(self, handle: RefreshHandle | None = None) -> FetchResult:
        result = self.fetcher.fetch()

        with self._lock:
            self._metrics["fetches"] += 1
            if self._is_stale(handle):
                self._metrics["discarded_late_results"] += 1
                print(
                    f"[REFRESH][late_result_discarded] generation={handle.generation}",
                    flush=True,
                )
                return result

            match result:
                case FetchSuccess(quotes=quotes):
                    self._state.quotes = [q.model_copy() for q in quotes]
                    self._state.last_error = None
                    self._state.last_success_ts = int(time.time())
                    self._metrics["successes"] += 1
                case FetchFailure(reason=reason):
                    self._state.last_error = reason
                    self._metrics["failures"] += 1
                    print(f"[REFRESH][fetch_failed] reason={reason}", flush=True)
            self._state.loading = False

        return result

    def _next_delay(self, started_at: float) -> float:
        """Seconds until the next tick on the fixed grid from ``started_at``.

        Ticks do not drift by request latency; a tick missed by a slow
        fetch is skipped rather than run late.
        """
        elapsed = time.monotonic() - started_at
        return self.interval_sec - (elapsed % self.interval_sec)

    def _run(self, handle: RefreshHandle) -> None:
        started_at = time.monotonic()
        self._tick(handle)
        while not handle.wait(self._next_delay(started_at)):
            self._tick(handle)

    def _tick(self, handle: RefreshHandle) -> None:
        try:
            self.fetch_once(handle)
        except Exception as exc:
            # keep the timer alive; the next tick is the retry
            print(f"[REFRESH][tick_error] error={exc!r}", flush=True)

    def start(self) -> RefreshHandle:
        with self._lock:
            if self._handle is not None and not self._handle.cancelled:
                return self._handle
            self._generation += 1
            handle = RefreshHandle(self._generation)
            self._handle = handle

        handle.thread = threading.Thread(
            target=self._run,
            args=(handle,),
            daemon=True,
            name="forex-refresh-worker",
        )
        print(
            f"[REFRESH][worker_start] thread=forex-refresh-worker interval_sec={self.interval_sec}",
            flush=True,
        )
        handle.thread.start()
        return handle

    def stop(self, handle: RefreshHandle | None = None) -> None:
        with self._lock:
            target = handle or self._handle
            if target is None:
                return
            target.cancel()
            if target is self._handle:
                self._handle = None
                self._generation += 1
                self._state = BoardState()

        thread = target.thread
        if thread is not None and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=1.0)
        print("[REFRESH][worker_stop] thread=forex-refresh-worker", flush=True)

    @property
    def running(self) -> bool:
        with self._lock:
            return self._handle is not None and not self._handle.cancelled

    def snapshot(self) -> BoardState:
        with self._lock:
            return self._state.model_copy(deep=True)

    def metrics(self) -> dict:
        with self._lock:
            running = self._handle is not None and not self._handle.cancelled
            return {
                **self._metrics,
                "running": running,
                "interval_sec": self.interval_sec,
            }
