import argparse
import sys

import anyio

from mcp_calendar.app.config import StartupError, get_settings
from mcp_calendar.infrastructure.platform_manager import create_logger


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command line arguments for the calendar MCP server.

    Returns:
        argparse.Namespace: Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="mcp-calendar",
        description="Serve Google Calendar tools over MCP",
    )
    parser.add_argument(
        "transport",
        nargs="?",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport to serve on (default: stdio)",
    )
    parser.add_argument("--host", default="127.0.0.1", help="HTTP bind host")
    parser.add_argument("--port", type=int, default=8000, help="HTTP bind port")
    parser.add_argument(
        "--log-level",
        "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set the logging level (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument("--logs-dir", default=None, help="Also write logs to this directory")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """
    Main function to run the server from the command line.

    Returns:
        int: Exit code (0 for success, 1 for error)
    """
    args = parse_args(argv)
    logger = create_logger(log_level=args.log_level or "INFO", logs_dir=args.logs_dir)

    try:
        settings = get_settings()
    except StartupError as e:
        logger.critical(f"Error: {e}")
        return 1

    if args.log_level is None:
        logger.setLevel(settings.log_level)

    logger.info(f"Starting Calendar MCP Service ({args.transport})")
    try:
        if args.transport == "http":
            import uvicorn

            uvicorn.run(
                "mcp_calendar.fast_api_server.server:app",
                host=args.host,
                port=args.port,
                log_level=logger.getEffectiveLevel(),
            )
        else:
            from mcp_calendar.transports.stdio_server import run_stdio

            anyio.run(run_stdio, settings)
    except KeyboardInterrupt:
        logger.info("Shutting down")
    except Exception as e:
        logger.exception(f"Fatal error running server: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
