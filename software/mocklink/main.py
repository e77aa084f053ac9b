"""
MockLink - simulated MAVLink vehicle

Serves a mock vehicle on a serial port (or any pyserial URL) so a ground
station can be tested without hardware.
"""

import argparse
import logging
import sys
from pathlib import Path

import serial

from .config import DEFAULT_COMPONENT_ID, DEFAULT_SYSTEM_ID, DuplicatePolicy, MockLinkConfig
from .errors import ParamFileError
from .mock_link import create_mock_link
from .serial_link import SerialBridge, SerialLink

logger = logging.getLogger('mocklink')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='MockLink - simulated MAVLink vehicle'
    )
    parser.add_argument(
        '-p', '--port',
        required=True,
        help='Serial port or pyserial URL (e.g. COM17, /dev/pts/3, loop://)'
    )
    parser.add_argument(
        '-b', '--baudrate',
        type=int,
        default=115200,
        help='Baud rate (default: 115200)'
    )
    parser.add_argument(
        '--system-id',
        type=int,
        default=DEFAULT_SYSTEM_ID,
        help=f'Vehicle system id (default: {DEFAULT_SYSTEM_ID})'
    )
    parser.add_argument(
        '--component-id',
        type=int,
        default=DEFAULT_COMPONENT_ID,
        help=f'Vehicle component id (default: {DEFAULT_COMPONENT_ID})'
    )
    parser.add_argument(
        '--params',
        type=Path,
        default=None,
        help='Parameter fixture file (default: bundled mocklink.params)'
    )
    parser.add_argument(
        '--heartbeat',
        type=float,
        default=1.0,
        help='Heartbeat interval in seconds (default: 1.0)'
    )
    parser.add_argument(
        '--duplicates',
        choices=[policy.value for policy in DuplicatePolicy],
        default=DuplicatePolicy.STRICT.value,
        help='Handling of re-uploaded mission items (default: strict)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )
    return parser


def config_from_args(args: argparse.Namespace) -> MockLinkConfig:
    return MockLinkConfig(
        system_id=args.system_id,
        component_id=args.component_id,
        heartbeat_interval=args.heartbeat,
        param_file=args.params,
        duplicate_policy=DuplicatePolicy(args.duplicates),
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        link = create_mock_link(config_from_args(args))
    except (ParamFileError, OSError) as e:
        logger.error(f"Failed to load parameters: {e}")
        return 1

    try:
        port = SerialLink(args.port, args.baudrate)
    except (serial.SerialException, ValueError) as e:
        logger.error(f"Failed to open {args.port}: {e}")
        return 1

    with port:
        SerialBridge(link, port).run()
    return 1 if link.fault is not None else 0


if __name__ == '__main__':
    sys.exit(main())
