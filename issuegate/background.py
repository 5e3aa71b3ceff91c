"""Track follow-up work that runs after a response has been sent.

Falcon's ``Response.schedule`` runs a callback only after the response
is on the wire and keeps no reference to the task it creates. The
:class:`BackgroundTasks` tracker starts each follow-up as its own task gated
on that callback, holds a strong reference to it and logs failures with
traceback. It can also wait for outstanding work before the HTTP clients are
closed on shutdown.

Usage
-----
Schedule a follow-up from a resource and drain on shutdown::

    tasks = BackgroundTasks()
    tasks.schedule(resp, follow_up.run, name=follow_up.name)
    ...
    drained = await tasks.drain(timeout=30.0)

"""

from __future__ import annotations

import asyncio
import typing as typ

from issuegate.logging import get_logger, log_exception, log_info, log_warning

if typ.TYPE_CHECKING:
    from falcon.asgi import Response

__all__ = ["BackgroundTasks"]

logger = get_logger(__name__)

_DEFAULT_SEND_TIMEOUT_S = 10.0

Work = typ.Callable[[], typ.Awaitable[None]]


class BackgroundTasks:
    """Detached but tracked follow-up work.

    ``pending`` counts work that has been scheduled but has not finished,
    including work whose response has not been sent yet. The counter is
    incremented when work is scheduled, so a drain that starts between the
    reply and the task start still waits for it.
    """

    def __init__(self, *, send_timeout_s: float = _DEFAULT_SEND_TIMEOUT_S) -> None:
        """Initialise an empty tracker.

        Parameters
        ----------
        send_timeout_s
            Seconds scheduled work waits for its response to be sent before
            it runs anyway.

        """
        self._pending = 0
        self._idle = asyncio.Event()
        self._idle.set()
        self._running: set[asyncio.Task[typ.Any]] = set()
        self._send_timeout_s = send_timeout_s

    @property
    def pending(self) -> int:
        """Number of scheduled follow-ups that have not finished."""
        return self._pending

    def schedule(self, resp: Response, work: Work, *, name: str) -> None:
        """Run ``work`` once ``resp`` has been sent.

        The task is created immediately and waits for the response hook.
        Falcon skips the hook when sending the response fails, so after
        ``send_timeout_s`` the work runs regardless and the pending count
        is always released.

        Parameters
        ----------
        resp
            Falcon response whose post-response hook releases the work.
        work
            Zero-argument coroutine function, usually ``follow_up.run``.
        name
            Label used in log records.

        """
        sent = asyncio.Event()

        async def _mark_sent() -> None:
            sent.set()

        resp.schedule(_mark_sent)
        run = self.track(work, name=name)

        async def _run_after_send() -> None:
            try:
                await asyncio.wait_for(sent.wait(), self._send_timeout_s)
            except TimeoutError:
                log_warning(
                    logger,
                    "Response for follow-up %s not sent within %.1fs; running anyway",
                    name,
                    self._send_timeout_s,
                )
            except asyncio.CancelledError:
                self._finish()
                raise
            await run()

        task = asyncio.get_running_loop().create_task(_run_after_send())
        self._running.add(task)
        task.add_done_callback(self._running.discard)

    def track(self, work: Work, *, name: str) -> Work:
        """Count ``work`` as pending and return a wrapper that runs it.

        The returned coroutine function must be awaited exactly once.
        """
        self._pending += 1
        self._idle.clear()

        async def _run() -> None:
            task = asyncio.current_task()
            if task is not None:
                self._running.add(task)
            try:
                await work()
            except Exception as exc:  # noqa: BLE001 - follow-ups must not kill the loop
                log_exception(logger, f"Follow-up {name} failed", exc)
            finally:
                if task is not None:
                    self._running.discard(task)
                self._finish()

        return _run

    def _finish(self) -> None:
        self._pending -= 1
        if self._pending == 0:
            self._idle.set()

    async def drain(self, timeout: float | None = None) -> bool:
        """Wait until no follow-ups are pending.

        Parameters
        ----------
        timeout
            Seconds to wait; ``None`` waits indefinitely.

        Returns
        -------
        bool
            ``True`` when all work finished, ``False`` on timeout.

        """
        if self._pending == 0:
            return True
        log_info(logger, "Draining %d pending follow-up(s)", self._pending)
        try:
            await asyncio.wait_for(self._idle.wait(), timeout)
        except TimeoutError:
            log_warning(
                logger,
                "Timed out after %.1fs with %d follow-up(s) still pending",
                timeout,
                self._pending,
            )
            return False
        return True
