from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import Callable, Generic, Iterator, List, Protocol, Sequence, TypeVar

from ..error import new_error

DEFAULT_MAX_QUEUED = 4096
POLL_INTERVAL_SECS = 0.05

T = TypeVar("T")
P = TypeVar("P")


class MessageToCentral:
    def __init__(self, kind: str, i_thread: int, payload=None) -> None:
        self.kind = kind
        self._i_thread = i_thread
        self.payload = payload

    @classmethod
    def item(cls, i_thread: int, payload) -> "MessageToCentral":
        return cls("item", i_thread, payload)

    @classmethod
    def done(cls, i_thread: int) -> "MessageToCentral":
        return cls("done", i_thread)

    @classmethod
    def error(cls, i_thread: int, exc: BaseException) -> "MessageToCentral":
        return cls("error", i_thread, exc)

    def i_thread(self) -> int:
        return self._i_thread


class PhaseObserver(Protocol):
    def going_to_start_phase(self, n_threads: int) -> None: ...

    def worker_done(self, i_thread: int) -> None: ...

    def completed_phase(self, n_received: int) -> None: ...


class WorkerLauncher(Protocol[T, P]):
    def launch(self, task: T, emit: Callable[[P], None], i_thread: int) -> None:
        ...


class _SilentObserver:
    def going_to_start_phase(self, n_threads: int) -> None:
        pass

    def worker_done(self, i_thread: int) -> None:
        pass

    def completed_phase(self, n_received: int) -> None:
        pass


class _Aborted(Exception):
    pass


def _put(in_queue: queue.Queue, abort: threading.Event, message: MessageToCentral) -> None:
    while True:
        if abort.is_set():
            raise _Aborted()
        try:
            in_queue.put(message, timeout=POLL_INTERVAL_SECS)
            return
        except queue.Full:
            continue


def _run_worker(
    launcher: WorkerLauncher,
    task,
    in_queue: queue.Queue,
    abort: threading.Event,
    i_thread: int,
) -> None:
    def emit(payload) -> None:
        _put(in_queue, abort, MessageToCentral.item(i_thread, payload))

    try:
        try:
            launcher.launch(task, emit, i_thread)
        except _Aborted:
            return
        except BaseException as exc:
            _put(in_queue, abort, MessageToCentral.error(i_thread, exc))
            return
        _put(in_queue, abort, MessageToCentral.done(i_thread))
    except _Aborted:
        return


@dataclass
class Threads(Generic[T, P]):
    """One worker thread per task, all feeding a single bounded queue.

    The coordinator iterates `drain()` on its own thread. Draining ends once
    every worker has reported done; an exception in any worker is re-raised
    by the coordinator. If draining stops early, the abort flag is set and
    the remaining workers exit at their next emit.
    """

    in_queue: queue.Queue
    abort: threading.Event
    join_handles: List[threading.Thread]

    @classmethod
    def new(
        cls,
        launcher: WorkerLauncher[T, P],
        tasks: Sequence[T],
        max_queued: int = DEFAULT_MAX_QUEUED,
    ) -> "Threads[T, P]":
        in_queue: queue.Queue = queue.Queue(maxsize=max_queued)
        abort = threading.Event()
        join_handles: List[threading.Thread] = []
        for i_thread, task in enumerate(tasks):
            thread = threading.Thread(
                target=_run_worker,
                args=(launcher, task, in_queue, abort, i_thread),
                daemon=True,
            )
            thread.start()
            join_handles.append(thread)
        return cls(in_queue=in_queue, abort=abort, join_handles=join_handles)

    def n_threads(self) -> int:
        return len(self.join_handles)

    def drain(self, observer: PhaseObserver | None = None) -> Iterator[P]:
        observer = observer or _SilentObserver()
        observer.going_to_start_phase(self.n_threads())
        is_done = [False] * self.n_threads()
        n_done = 0
        n_received = 0
        try:
            while n_done < self.n_threads():
                message: MessageToCentral = self.in_queue.get()
                i_thread = message.i_thread()
                if message.kind == "item":
                    n_received += 1
                    yield message.payload
                elif message.kind == "done":
                    if is_done[i_thread]:
                        raise new_error(f"Thread {i_thread} reported done twice")
                    is_done[i_thread] = True
                    n_done += 1
                    observer.worker_done(i_thread)
                elif message.kind == "error":
                    raise message.payload
                else:
                    raise new_error(f"Received message of unknown kind {message.kind}")
        finally:
            if n_done < self.n_threads():
                self.abort.set()
        for join_handle in self.join_handles:
            join_handle.join()
        observer.completed_phase(n_received)


def fan_in(
    launcher: WorkerLauncher[T, P],
    tasks: Sequence[T],
    observer: PhaseObserver | None = None,
    max_queued: int = DEFAULT_MAX_QUEUED,
) -> Iterator[P]:
    return Threads.new(launcher, tasks, max_queued=max_queued).drain(observer)
