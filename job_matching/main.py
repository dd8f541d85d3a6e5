"""Main entry point for the Job Matching API service."""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from job_matching.api import create_app
from job_matching.config.environment import EnvironmentConfig
from job_matching.config.exceptions import ConfigurationError
from job_matching.config.loader import load_config, validate_config_file
from job_matching.config.models import AppConfig
from job_matching.logging import get_logger
from job_matching.logging.config import configure_logging
from job_matching.persistence import Database, PersistenceError
from job_matching.services import build_services

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and prepare runtime configuration.

    Args:
        config_path: Path to configuration file (None searches the defaults)
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with the effective log level
        stored on env_config.log_level

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    # Log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    elif app_config.logging and app_config.logging.level:
        env_config.log_level = app_config.logging.level
    else:
        env_config.log_level = "INFO"

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Job Matching API - match talents to jobs and serve dashboard statistics"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument("--host", default=None, help="Interface to bind (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on (overrides config)")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--init-db",
        action="store_true",
        help="Create the database schema and exit",
    )
    mode.add_argument(
        "--print-stats",
        action="store_true",
        help="Print admin dashboard statistics as JSON and exit",
    )
    mode.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate the file given by --config and exit",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the Job Matching API.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    if args.validate_config:
        if args.config is None:
            print("--validate-config requires --config", file=sys.stderr)
            return 2
        return 0 if validate_config_file(args.config) else 1

    load_dotenv()
    database: Optional[Database] = None

    try:
        # Step 1: Load configuration early (before logging for format detection)
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        # Step 2: Configure logging
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            "Job Matching API starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
            },
        )

        # Step 3: Initialize database (creates the schema)
        database = Database(env_config.database_url).initialize()

        if args.init_db:
            logger.info("Database schema ready", extra={"event": "service.init_db.completed"})
            return 0

        # Step 4: Wire services
        services = build_services(app_config, env_config, database=database)

        if args.print_stats:
            stats = services.statistics.admin_stats()
            print(json.dumps(stats.to_json_dict(), indent=2))
            return 0

        # Step 5: Serve HTTP
        if not env_config.gateway_token:
            raise ConfigurationError(
                "GATEWAY_TOKEN is required to serve the HTTP API",
                suggestions=[
                    "Set GATEWAY_TOKEN to the secret your authenticating gateway sends "
                    "in X-Gateway-Token",
                ],
            )

        host = args.host or app_config.server.host
        port = args.port or app_config.server.port
        app = create_app(
            services,
            gateway_token=env_config.gateway_token,
            cors_origins=app_config.server.cors_origins,
        )

        logger.info(
            f"Serving on http://{host}:{port}",
            extra={"event": "service.serving", "host": host, "port": port},
        )
        app.run(host=host, port=port)
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except PersistenceError as e:
        print(f"Database Error: {e}", file=sys.stderr)
        logger.error(
            f"Database error: {e}",
            extra={"event": "service.database.failed", "error_type": type(e).__name__},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            extra={
                "event": "service.startup.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1
    finally:
        if database is not None:
            database.close()
            logger.info(
                "Job Matching API stopped",
                extra={
                    "event": "service.stopping",
                    "uptime_seconds": round(time.time() - start_time, 2),
                },
            )


if __name__ == "__main__":
    sys.exit(main())
