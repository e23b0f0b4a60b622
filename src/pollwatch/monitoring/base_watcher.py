"""
Shared poll loop lifecycle for file and folder watchers.

A watcher moves from CREATED to RUNNING when started and to STOPPED once its
loop has exited. Stopping is cooperative: stop() only sets an event that the
loop checks at every tick boundary and before every emission, and that
withdraws an emission still waiting on a full channel. After stop() returns
the only signal still produced is the terminal stopped signal.
"""

import asyncio
import logging
from abc import abstractmethod
from collections.abc import Awaitable, Callable
from enum import Enum
from pathlib import Path
from typing import Any

from pollwatch.config.settings import OverflowPolicy
from pollwatch.core.diagnostics import NullDiagnosticSink
from pollwatch.core.interfaces import IDiagnosticSink, IWatcher
from pollwatch.models import ConfigurationError, MonitoringError
from pollwatch.monitoring.channel import Channel
from pollwatch.monitoring.registry import WatcherKind, WatcherRegistry, get_default_registry

logger = logging.getLogger(__name__)


class WatcherState(str, Enum):
    """Watcher lifecycle state enumeration."""

    CREATED = "created"
    RUNNING = "running"
    STOPPED = "stopped"


class BaseWatcher(IWatcher):
    """
    Base class owning the poll loop, the stop flag and the shared channels.

    Subclasses provide kind, implement _tick() and may override _prepare()
    (synchronous, runs inside start()) and _on_loop_entry() (first thing the
    loop does).
    """

    @property
    @abstractmethod
    def kind(self) -> WatcherKind:
        """Get the registry bucket this watcher is counted in."""
        pass

    def __init__(
        self,
        path: str | Path,
        interval: int = 1,
        *,
        tick_unit: float = 1.0,
        diagnostics: IDiagnosticSink | None = None,
        registry: WatcherRegistry | None = None,
        channel_size: int = 64,
        overflow_policy: OverflowPolicy | str = OverflowPolicy.BLOCK,
    ):
        """
        Initialize the watcher.

        Args:
            path: Watched file or folder
            interval: Number of tick units to sleep between polls (at least 1)
            tick_unit: Length of one tick unit in seconds
            diagnostics: Sink for per-tick diagnostic messages
            registry: Registry counting live watchers (process default if None)
            channel_size: Capacity of each notification channel
            overflow_policy: What the loop does when a channel is full

        Raises:
            ConfigurationError: If the interval or tick unit is out of range
        """
        if isinstance(interval, bool) or interval < 1:
            raise ConfigurationError(
                f"Cannot create a {self.kind.value} watcher with a check interval of {interval} units",
                config_key="interval",
                expected_type="int >= 1",
                actual_value=interval,
            )
        if tick_unit <= 0:
            raise ConfigurationError(
                "tick_unit must be positive",
                config_key="tick_unit",
                expected_type="float > 0",
                actual_value=tick_unit,
            )

        self._path = str(path)
        self.interval = interval
        self.tick_unit = tick_unit
        self.diagnostics = diagnostics or NullDiagnosticSink()
        self.registry = registry or get_default_registry()
        self._channel_size = channel_size
        self._overflow_policy = OverflowPolicy(overflow_policy)

        self._moved: Channel[bool] = self._make_channel("moved")
        self._stopped: Channel[bool] = self._make_channel("stopped")

        # Control state
        self._state = WatcherState.CREATED
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    def __str__(self) -> str:
        return f'{type(self).__name__} "{self._path}"'

    def _make_channel(self, name: str) -> Channel[Any]:
        return Channel(self._channel_size, self._overflow_policy, name=f"{self._path}:{name}")

    @property
    def path(self) -> str:
        return self._path

    @property
    def state(self) -> WatcherState:
        return self._state

    @property
    def sleep_seconds(self) -> float:
        """Get the pause between two ticks in seconds."""
        return self.interval * self.tick_unit

    @property
    def moved(self) -> Channel[bool]:
        return self._moved

    @property
    def stopped(self) -> Channel[bool]:
        return self._stopped

    def is_running(self) -> bool:
        return self._state is WatcherState.RUNNING

    def start(self) -> None:
        """
        Start the poll loop as a task on the running event loop.

        A watcher that was asked to stop but has not sent its stopped signal
        yet is still running; callers restarting a watcher must wait for the
        stopped signal (or wait_stopped()) first, otherwise this call is a no-op.

        Raises:
            MonitoringError: If called without a running event loop
        """
        if self.is_running():
            if self._stopping:
                logger.warning("%s is still stopping; wait for its stopped signal before restarting", self)
            else:
                logger.warning("%s is already running", self)
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise MonitoringError(
                f"{self} must be started from a running event loop",
                path=self._path,
                operation="start",
                underlying_error=e,
            ) from e

        self._prepare()
        self._stop_event = asyncio.Event()
        self._state = WatcherState.RUNNING
        self._task = loop.create_task(self._run(), name=str(self))
        logger.info("Started %s (interval: %.2fs)", self, self.sleep_seconds)

    def stop(self) -> None:
        """Request the loop to exit at its next tick boundary."""
        self.diagnostics.log("Stopping %s", self)
        self._stop_event.set()

    async def wait_stopped(self) -> None:
        """Wait until the poll loop task has finished."""
        if self._task is not None:
            await self._task

    def _prepare(self) -> None:
        pass

    async def _on_loop_entry(self) -> None:
        pass

    @abstractmethod
    async def _tick(self) -> None:
        """Run one poll: capture, compare and emit."""
        pass

    @property
    def _stopping(self) -> bool:
        return self._stop_event.is_set()

    def _request_stop(self) -> None:
        self._stop_event.set()

    async def _emit(self, channel: Channel[Any], item: Any) -> bool:
        """Send an item unless a stop request arrives before it is enqueued."""
        if self._stopping:
            self.diagnostics.log("Suppressed %s emission after stop request", channel.name)
            return False
        delivered = await channel.send(item, abort=self._stop_event)
        if not delivered and self._stopping:
            self.diagnostics.log("Withdrew %s emission after stop request", channel.name)
        return delivered

    async def _run_step(self, step: Callable[[], Awaitable[None]]) -> None:
        try:
            await step()
        except Exception as e:
            logger.error("Error during poll tick of %s: %s", self, e)

    async def _run(self) -> None:
        self.registry.increment(self.kind)
        try:
            await self._run_step(self._on_loop_entry)
            while not self._stopping:
                await self._run_step(self._tick)

                if self._stopping:
                    break
                await asyncio.sleep(self.sleep_seconds)
        finally:
            self._state = WatcherState.STOPPED
            await self._stopped.send(True)
            self.registry.decrement(self.kind)
            logger.info("Stopped %s", self)
