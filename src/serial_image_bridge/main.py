"""
Serial Image Bridge Main Application
====================================

Command-line entry point: stream hex-dump images to a serial device.

Usage:
    serial-image-bridge --device /dev/ttyACM0 --image-dir images --count 10
    python -m serial_image_bridge --config config.yaml

Exit codes:
    0   - every image was transmitted
    1   - configuration, link, image or write failure
    130 - interrupted (Ctrl-C)
"""

import argparse
import functools
import logging
import signal
import sys
from typing import List, Optional

from serial_image_bridge import __version__
from serial_image_bridge.config import Settings, load_config, setup_logging
from serial_image_bridge.errors import BridgeError, SettingsError
from serial_image_bridge.images import ImageDirectory
from serial_image_bridge.link import open_serial_link
from serial_image_bridge.models.image import Image
from serial_image_bridge.observability import GridPrinter, PreviewWriter
from serial_image_bridge.transmission import TransmissionSequencer


logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


# =============================================================================
# Signal Handlers
# =============================================================================

def _handle_sigterm(signum, frame):
    """Turn SIGTERM into SystemExit so the link is closed on the way out."""
    logger.info("Received SIGTERM, stopping transmission...")
    raise SystemExit(128 + signum)


# =============================================================================
# Argument Parsing
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serial-image-bridge",
        description="Stream hex-dump encoded images to a serial device.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-c", "--config",
        help="YAML configuration file (default: ./config.yaml if present)",
    )
    parser.add_argument("--device", help="Serial device node or pyserial URL")
    parser.add_argument("--baud", type=int, help="Baud rate")
    parser.add_argument("--image-dir", help="Directory holding img<N>.raw files")
    parser.add_argument("--width", type=int, help="Image side length in samples")
    parser.add_argument("--count", type=int, help="Number of images to send")
    parser.add_argument("--pacing", type=float, help="Seconds to wait after each frame")
    parser.add_argument(
        "--no-grid",
        dest="render_grid",
        action="store_false",
        default=None,
        help="Do not print decoded images as hex grids",
    )
    parser.add_argument("--preview-dir", help="Write a PNG preview of each image here")
    parser.add_argument(
        "--log-device-output",
        action="store_true",
        default=None,
        help="Log bytes received from the device after each frame",
    )
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, ...)")
    return parser


def _cli_overrides(args: argparse.Namespace) -> dict:
    return {
        "link": {"device_path": args.device, "baud_rate": args.baud},
        "images": {
            "directory": args.image_dir,
            "image_width": args.width,
            "image_count": args.count,
        },
        "sequencer": {
            "pacing_seconds": args.pacing,
            "render_grid": args.render_grid,
            "log_device_output": args.log_device_output,
        },
        "observability": {"preview_dir": args.preview_dir},
        "logging": {"level": args.log_level},
    }


# =============================================================================
# Pipeline Assembly
# =============================================================================

def build_sequencer(settings: Settings) -> TransmissionSequencer:
    """Wire a TransmissionSequencer from settings."""
    images = ImageDirectory(
        directory=settings.images.directory,
        width=settings.images.image_width,
        count=settings.images.image_count,
        template=settings.images.file_template,
    )
    grid = GridPrinter(enabled=settings.sequencer.render_grid)
    preview = PreviewWriter(
        directory=settings.observability.preview_dir,
        scale=settings.observability.preview_scale,
    )

    def on_image(image: Image) -> None:
        grid(image)
        preview(image)

    return TransmissionSequencer(
        link_factory=functools.partial(open_serial_link, settings.link),
        images=images,
        pacing_seconds=settings.sequencer.pacing_seconds,
        on_image=on_image,
        log_device_output=settings.sequencer.log_device_output,
    )


# =============================================================================
# Main Entry Point
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_config(args.config, overrides=_cli_overrides(args))
    except SettingsError as e:
        print(f"serial-image-bridge: {e}", file=sys.stderr)
        return EXIT_FAILURE

    setup_logging(settings)

    logger.info(
        f"Streaming {settings.images.image_count} images of "
        f"{settings.images.image_width}x{settings.images.image_width} "
        f"from {settings.images.directory} to {settings.link.device_path}"
    )

    try:
        sequencer = build_sequencer(settings)
    except BridgeError as e:
        logger.error(f"Setup failed: {e}")
        return EXIT_FAILURE

    previous_handler = signal.signal(signal.SIGTERM, _handle_sigterm)
    try:
        report = sequencer.run()
    except BridgeError as e:
        index = sequencer.report.current_index
        if index is None:
            logger.error(f"Link setup failed: {e}")
        else:
            logger.error(f"Transmission failed at image {index}: {e}")
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.warning(
            f"Interrupted after {sequencer.report.frames_sent} frames"
        )
        return EXIT_INTERRUPTED
    finally:
        signal.signal(signal.SIGTERM, previous_handler)

    logger.info(f"Run summary: {report.to_dict()}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
