"""Traffic light client — application entry point.

Wires together: Config → logging → HardwareFactory → Transport → SystemManager,
then blocks in the main loop until SIGINT / SIGTERM.
"""

from __future__ import annotations

import argparse
import logging

from trafficlight.config.config_manager import load_config
from trafficlight.config.secrets_manager import SecretsManager
from trafficlight.core.system_manager import SystemManager
from trafficlight.hardware.factory import create_hardware_factory
from trafficlight.log_config.logger import setup_logging
from trafficlight.transport.factory import create_transport

_log = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Drive the traffic light from the remote authority.")
    parser.add_argument("--config", help="Path to trafficlight_config.json")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Synchronous entry point — bootstraps and runs until signalled."""
    args = _parse_args(argv)

    # 1. Load configuration
    config = load_config(args.config)
    setup_logging(config.system.log_level, config.system.log_dir)
    _log.info("Starting traffic light client")

    # 2. Hardware (mock off-Pi / dev_mode, GPIO on Pi)
    factory = create_hardware_factory(config)

    # 3. Transport selected once from configuration
    transport = create_transport(config.transport, SecretsManager())

    # 4. Run
    system = SystemManager(config=config, hardware_factory=factory, transport=transport)
    system.start()
    system.run_forever()
    _log.info("Traffic light client stopped")


if __name__ == "__main__":
    main()
