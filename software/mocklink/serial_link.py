"""
Serial transport for the mock vehicle.

Exposes a MockLink on a serial port so an unmodified ground station can
connect to it, e.g. through a virtual port pair (com0com, socat ptys).
Any pyserial URL is accepted as the port name, including ``loop://``.
"""

import logging
import threading
import time
from typing import Optional

import serial

from .mock_link import MockLink

logger = logging.getLogger(__name__)


class SerialLink:
    """
    Thin serial port wrapper used by the bridge.
    """

    def __init__(self, port: str, baudrate: int = 115200, timeout: float = 0.1,
                 port_factory=serial.serial_for_url):
        """
        Open the serial port.

        Args:
            port: Port name or pyserial URL (e.g. '/dev/ttyUSB0', 'COM17', 'loop://')
            baudrate: Baud rate (default 115200)
            timeout: Read timeout in seconds
            port_factory: Callable returning a pyserial-compatible port
        """
        self.port = port
        self.serial = port_factory(port, baudrate=baudrate, timeout=timeout)

    def send(self, data: bytes) -> int:
        """Write raw bytes. Returns the number of bytes written."""
        return self.serial.write(data)

    def receive(self) -> Optional[bytes]:
        """
        Read whatever is waiting.

        Returns:
            Available bytes, or None if nothing is waiting
        """
        waiting = self.serial.in_waiting
        if waiting > 0:
            data = self.serial.read(waiting)
            if data:
                return data
        return None

    def close(self):
        """Close the serial connection."""
        self.serial.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class SerialBridge:
    """
    Pumps bytes between a SerialLink and a MockLink.

    Inbound serial bytes go to ``MockLink.write_bytes``; bytes the vehicle
    sends are written straight to the port from the link's worker.
    """

    def __init__(self, link: MockLink, port: SerialLink, poll_interval: float = 0.001):
        self.link = link
        self.port = port
        self.poll_interval = poll_interval
        self.running = False
        self._reader: Optional[threading.Thread] = None
        link.register_bytes_callback(self._on_vehicle_bytes)

    def _on_vehicle_bytes(self, link_id: int, data: bytes):
        if self.running:
            self.port.send(data)

    def _read_loop(self):
        while self.running:
            try:
                data = self.port.receive()
            except serial.SerialException as e:
                logger.error(f"Serial read failed on {self.port.port}: {e}")
                self.running = False
                break
            if data:
                self.link.write_bytes(data)
            else:
                time.sleep(self.poll_interval)

    def start(self):
        """Connect the link and start pumping."""
        if self.running:
            return
        self.running = True
        self.link.connect()
        self._reader = threading.Thread(target=self._read_loop, name="SerialBridge", daemon=True)
        self._reader.start()
        logger.info(f"Serving {self.link!r} on {self.port.port}")

    def stop(self):
        """Stop pumping and disconnect the link. The port stays open."""
        self.running = False
        if self._reader is not None:
            self._reader.join(timeout=1.0)
            self._reader = None
        self.link.disconnect()

    def run(self):
        """Serve until interrupted."""
        self.start()
        try:
            while self.running and self.link.fault is None:
                time.sleep(0.1)
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        finally:
            self.stop()
        if self.link.fault is not None:
            logger.error(f"Link stopped on fault: {self.link.fault}")
