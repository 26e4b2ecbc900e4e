"""
love.js game server CLI entry point.
"""
import sys
import argparse
import logging

import uvicorn

from lovejs_server.app import create_app
from lovejs_server.config.settings import LoveServerConfig


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="lovejs-server - serve a love.js game with save/load support"
    )

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default="lovejs-server.yml",
        help="Path to configuration file"
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Override the listen host"
    )

    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Override the listen port (also read from PORT)"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--generate-config",
        action="store_true",
        help="Generate default configuration file and exit"
    )

    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate configuration file and exit"
    )

    return parser


def main(argv=None):
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    # Setup logging
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    # Handle config generation
    if args.generate_config:
        config = LoveServerConfig()
        config.save(args.config)
        print(f"Generated default configuration at: {args.config}")
        return 0

    # Handle config validation
    if args.validate_config:
        try:
            config = LoveServerConfig.from_file(args.config)
            print(f"Configuration valid: {args.config}")
            return 0
        except Exception as e:
            print(f"Configuration invalid: {e}")
            return 1

    # Run the server
    try:
        config = LoveServerConfig.from_file(args.config).apply_env()
        if args.host:
            config.server.host = args.host
        if args.port is not None:
            config.server.port = args.port

        app = create_app(config)
        logger.info(f"Server listening at http://{config.server.host}:{config.server.port}")
        uvicorn.run(
            app,
            host=config.server.host,
            port=config.server.port,
            log_level=config.server.log_level
        )

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
