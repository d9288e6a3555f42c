"""
AgentForward - Proxy forward compiler and traffic accounting
Main entry point for the application.
"""

import argparse

import uvicorn
import structlog
from dotenv import load_dotenv

from agentforward import __version__
from agentforward.config import get_settings
from agentforward.infrastructure.security import generate_secret
from agentforward.logging_config import configure_logging

# Load environment variables
load_dotenv(".env.local")

logger = structlog.get_logger(__name__)


def run_api():
    """Run the API server."""
    settings = get_settings()
    configure_logging(settings.app.log_level)

    logger.info(
        "starting_agentforward",
        version=__version__,
        environment=settings.app.env,
    )
    logger.info(
        "configuration",
        host=settings.app.api_host,
        port=settings.app.api_port,
        workers=settings.app.api_workers,
        debug=settings.app.debug,
        server_url=settings.app.server_url,
    )

    uvicorn.run(
        "agentforward.api.rest.app:create_app",
        factory=True,
        host=settings.app.api_host,
        port=settings.app.api_port,
        workers=settings.app.api_workers if not settings.app.debug else 1,
        reload=settings.app.debug,
        log_level=settings.app.log_level.lower(),
        access_log=True,
    )


def run_secret():
    """Print a fresh agent secret."""
    secret = generate_secret()
    print(f"Generated agent secret: {secret}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="AgentForward - proxy forward compiler and traffic accounting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --mode api       # Run API server
  python main.py --mode secret    # Generate an agent secret
        """,
    )
    parser.add_argument(
        "--mode",
        choices=["api", "secret"],
        default="api",
        help="What to run (default: api)",
    )

    args = parser.parse_args()

    if args.mode == "api":
        run_api()
    elif args.mode == "secret":
        run_secret()
