"""
Mock vehicle link.

Stands in for a real vehicle so a ground-station client can be exercised
in-process. Bytes written by the client are queued to a single worker
thread which demultiplexes shell and MAVLink traffic, answers parameter,
mission and mode requests and sends a 1 Hz heartbeat once mavlink has
been started from the shell.
"""

import logging
import queue
import threading
import time
from typing import Callable, Iterable, List, Optional

from .config import MockLinkConfig
from .demux import ByteStreamDemux, NshCommandMatcher
from .dispatcher import CommandDispatcher
from .emitter import ResponseEmitter
from .errors import ProtocolErrorEvent
from .frame_decoder import FrameDecoder
from .handlers import MissionHandler, MissionUploadSession, ModeHandler, ParamHandler
from .heartbeat import HeartbeatScheduler
from .identity import EndpointState, Identity, LinkIdAllocator, default_link_ids
from .missions import MissionStore
from .params import ParameterStore, load_param_file

logger = logging.getLogger(__name__)


class _Stop:
    """Worker inbox sentinel; each worker thread gets its own."""


class MockLink:
    """
    Simulated MAVLink vehicle behind a byte-stream link.

    All vehicle state is owned by the worker thread. Other threads only
    talk to it through ``write_bytes`` and the lifecycle methods.
    """

    def __init__(self, link_ids: LinkIdAllocator, config: Optional[MockLinkConfig] = None,
                 parameters: Optional[ParameterStore] = None,
                 observers: Iterable = (),
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize the link.

        Args:
            link_ids: Allocator the link id is drawn from
            config: Link settings (defaults to MockLinkConfig())
            parameters: Preloaded parameter table; loaded from
                config.param_file when omitted
            observers: Extra frame observers, notified before built-in handling
            clock: Monotonic clock used by the heartbeat

        Raises:
            ParamFileError: if the parameter fixture is malformed
        """
        self.config = config or MockLinkConfig()
        self.identity = Identity(
            link_id=link_ids.next_id(),
            system_id=self.config.system_id,
            component_id=self.config.component_id,
        )
        self.state = EndpointState()
        self.fault: Optional[Exception] = None

        if parameters is None:
            parameters = load_param_file(self.config.resolved_param_file())
        self.parameters = parameters
        self.missions = MissionStore(self.config.duplicate_policy)

        self.emitter = ResponseEmitter(self.identity, self._emit_bytes)
        self.decoder = FrameDecoder(self.identity.link_id)
        self.shell = NshCommandMatcher(self.state)
        self.demux = ByteStreamDemux(self.state, self.shell, self._handle_mavlink_bytes)
        self.heartbeat = HeartbeatScheduler(
            self.state, self.emitter, self.config.heartbeat_interval, clock)

        mission_handler = MissionHandler(self.missions, self.emitter, self.report_error)
        self.dispatcher = CommandDispatcher(
            self.identity,
            ModeHandler(self.state),
            ParamHandler(self.parameters, self.emitter, self.report_error),
            mission_handler,
            self.report_error,
        )
        if self.config.mission_upload:
            self.upload_session = MissionUploadSession(
                self.identity.system_id, self.missions, self.emitter)
            self.dispatcher.add_observer(self.upload_session)
            mission_handler.upload_session = self.upload_session
        else:
            self.upload_session = None
        for observer in observers:
            self.dispatcher.add_observer(observer)

        self._inbox: "queue.Queue" = queue.Queue()
        self._worker: Optional[threading.Thread] = None
        self._stop: Optional[_Stop] = None
        self._detached = False
        self._lifecycle_lock = threading.Lock()

        self._bytes_callbacks: List[Callable] = []
        self._error_callbacks: List[Callable] = []
        self._connected_callbacks: List[Callable] = []
        self._connection_changed_callbacks: List[Callable] = []
        self._disconnected_callbacks: List[Callable] = []

    def __repr__(self):
        return (f"MockLink(link_id={self.identity.link_id}, "
                f"system_id={self.identity.system_id})")

    @property
    def link_id(self) -> int:
        return self.identity.link_id

    @property
    def connected(self) -> bool:
        return self.state.connected

    # ------------------------------------------------------------------
    # Events

    def register_bytes_callback(self, callback: Callable[[int, bytes], None]):
        """Register a callback for outbound bytes: callback(link_id, data)."""
        self._bytes_callbacks.append(callback)

    def register_error_callback(self, callback: Callable[[ProtocolErrorEvent], None]):
        """Register a callback for non-fatal protocol errors."""
        self._error_callbacks.append(callback)

    def register_connected_callback(self, callback: Callable[[], None]):
        self._connected_callbacks.append(callback)

    def register_connection_changed_callback(self, callback: Callable[[bool], None]):
        self._connection_changed_callbacks.append(callback)

    def register_disconnected_callback(self, callback: Callable[[], None]):
        self._disconnected_callbacks.append(callback)

    def add_observer(self, observer):
        """Register a frame observer (object with handle_message(msg))."""
        self.dispatcher.add_observer(observer)

    def _notify(self, callbacks: List[Callable], *args):
        for callback in callbacks:
            try:
                callback(*args)
            except Exception as e:
                logger.error(f"Callback error: {e}")

    def _emit_bytes(self, data: bytes):
        self._notify(self._bytes_callbacks, self.identity.link_id, data)

    def report_error(self, event: ProtocolErrorEvent):
        """Publish a non-fatal protocol error."""
        logger.warning(f"Link {self.identity.link_id}: {event}")
        self._notify(self._error_callbacks, event)

    # ------------------------------------------------------------------
    # Transport side (any thread)

    def write_bytes(self, data: bytes):
        """
        Bytes written by the client to the vehicle.

        Safe to call from any thread; chunks are processed by the worker in
        the order they were written. Before the first connect() chunks wait
        for run_pending(). Once the link has been disconnected, writes are
        dropped until it is connected again.
        """
        if self._detached:
            logger.debug(f"Link {self.identity.link_id} not connected, "
                         f"dropped {len(data)} bytes")
            return
        self._inbox.put(bytes(data))

    def set_system_status(self, status: int):
        """Change the MAV_STATE reported in heartbeats."""
        def apply():
            self.state.system_status = status
        self._inbox.put(apply)

    def connect(self) -> bool:
        """Start the worker thread."""
        with self._lifecycle_lock:
            if self._worker is not None:
                return True
            self._discard_stale_input()
            self.fault = None
            self._detached = False
            self.state.connected = True
            self._stop = _Stop()
            self._worker = threading.Thread(
                target=self._run, args=(self._stop,),
                name=f"MockLink-{self.identity.link_id}", daemon=True)
            self._worker.start()

        logger.info(f"Link {self.identity.link_id} connected")
        self._notify(self._connected_callbacks)
        self._notify(self._connection_changed_callbacks, True)
        return True

    def disconnect(self) -> bool:
        """
        Stop the worker thread.

        Safe to call more than once, before connect(), and after the worker
        stopped on a fault.
        """
        with self._lifecycle_lock:
            worker, stop = self._worker, self._stop
            self._worker = None
            self._stop = None
            was_connected = self.state.connected
            self.state.connected = False
            if was_connected:
                self._detached = True

        if worker is not None:
            self._inbox.put(stop)
            if worker is not threading.current_thread():
                worker.join(self.config.join_timeout)
                if worker.is_alive():
                    logger.warning(f"Link {self.identity.link_id} worker did not stop")

        if was_connected:
            logger.info(f"Link {self.identity.link_id} disconnected")
            self._notify(self._disconnected_callbacks)
            self._notify(self._connection_changed_callbacks, False)
        return True

    # ------------------------------------------------------------------
    # Worker side

    def _discard_stale_input(self):
        """Drop chunks and stop tokens queued while no worker ran."""
        kept = []
        dropped = 0
        while True:
            try:
                item = self._inbox.get_nowait()
            except queue.Empty:
                break
            if callable(item):
                kept.append(item)
            else:
                dropped += 1
        for item in kept:
            self._inbox.put(item)
        if dropped:
            logger.debug(f"Link {self.identity.link_id} discarded {dropped} stale inbox items")

    def _run(self, stop: _Stop):
        """Worker loop: inbound chunks and heartbeat ticks, one at a time."""
        logger.debug(f"Link {self.identity.link_id} worker started")
        self.heartbeat.start()
        try:
            while True:
                try:
                    item = self._inbox.get(timeout=self.heartbeat.time_until_due())
                except queue.Empty:
                    item = None

                if item is stop:
                    break
                if isinstance(item, _Stop):
                    logger.debug(f"Link {self.identity.link_id} skipped a stale stop token")
                    continue
                if item is not None:
                    self._process_item(item)
                self.run_periodic_tasks()
        except Exception as e:
            logger.critical(f"Link {self.identity.link_id} fault: {e}")
            self.fault = e
            self._stop_after_fault()
        logger.debug(f"Link {self.identity.link_id} worker stopped")

    def _stop_after_fault(self):
        with self._lifecycle_lock:
            if self._worker is not threading.current_thread():
                return
            self._worker = None
            self._stop = None
            self.state.connected = False
            self._detached = True
        self._notify(self._disconnected_callbacks)
        self._notify(self._connection_changed_callbacks, False)

    def _process_item(self, item):
        if callable(item):
            item()
        else:
            self.process_incoming(item)

    def run_pending(self):
        """
        Process every queued chunk on the calling thread.

        Only valid while the worker is not running; lets tests drive the
        link deterministically.

        Raises:
            RuntimeError: if the worker thread is running
            MockLinkFault: on a fatal condition while processing
        """
        if self._worker is not None:
            raise RuntimeError("run_pending() while the worker is running")
        while True:
            try:
                item = self._inbox.get_nowait()
            except queue.Empty:
                return
            if not isinstance(item, _Stop):
                self._process_item(item)

    def process_incoming(self, data: bytes):
        """Handle one inbound chunk (worker context)."""
        self.demux.feed(data)

    def _handle_mavlink_bytes(self, data: bytes):
        for msg in self.decoder.feed(data):
            self.dispatcher.dispatch(msg)

    def run_periodic_tasks(self, now: Optional[float] = None):
        """Run whatever periodic work is due (worker context)."""
        self.heartbeat.poll(now)


def create_mock_link(config: Optional[MockLinkConfig] = None,
                     link_ids: LinkIdAllocator = default_link_ids,
                     **kwargs) -> MockLink:
    """Create a MockLink drawing its id from ``link_ids``."""
    return MockLink(link_ids, config, **kwargs)
