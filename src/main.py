"""
Portfolio analytics entry point.

Serves the dashboard API by default, or runs a one-off query against the
stored analytics.

Usage:
    python src/main.py --config config/config.yaml
    python src/main.py --summary
    python src/main.py --export analytics.json
    python src/main.py --clear

Arguments:
    --config: Path to configuration file (applied over config/default.yaml)
    --host/--port: Override web.host/web.port
    --summary: Print the bucketed summary as JSON and exit
    --export: Write the full export to a file ("-" for stdout) and exit
    --clear: Delete all stored analytics and the session tag, then exit
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, Optional

import uvicorn

from models.config import Config
from ops.logging import setup_logging
from runtime.context import RuntimeContext, build_context, create_backend
from runtime.environment import RequestEnvironment, StaticEnvironment
from web.app import create_app
from web.services.config_service import ConfigService, validate_config


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        config_dir = os.path.dirname(config_path) if config_path else ConfigService.CONFIG_DIR
        return ConfigService.load_effective_config(config_dir or ".", config_path)
    except Exception as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def _open_context(config: Config, serving: bool) -> RuntimeContext:
    fallback = StaticEnvironment(config.user_agent, config.referrer)
    environment = RequestEnvironment(fallback) if serving else fallback
    backend = create_backend(config.storage)
    return build_context(config, backend, environment=environment, track_page_view=serving)


def main(argv=None):
    """Main application function."""
    parser = argparse.ArgumentParser(description='Portfolio Analytics')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to configuration file')
    parser.add_argument('--host', type=str, default=None,
                        help='Dashboard API host')
    parser.add_argument('--port', type=int, default=None,
                        help='Dashboard API port')
    action = parser.add_mutually_exclusive_group()
    action.add_argument('--summary', action='store_true',
                        help='Print the analytics summary and exit')
    action.add_argument('--export', type=str, metavar='PATH',
                        help='Export analytics JSON to PATH ("-" for stdout)')
    action.add_argument('--clear', action='store_true',
                        help='Clear stored analytics and exit')
    args = parser.parse_args(argv)

    raw_config = load_config(args.config)

    is_valid, error_msg = validate_config(raw_config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    config = Config.from_dict(raw_config)
    setup_logging(config.log_path, config.log_level)

    serving = not (args.summary or args.export or args.clear)
    ctx = _open_context(config, serving)

    try:
        if args.summary:
            print(json.dumps(ctx.service.get_analytics_summary().to_dict(), indent=2))
            return 0

        if args.export:
            data = ctx.service.export_analytics_data()
            if args.export == '-':
                print(data)
            else:
                with open(args.export, 'w', encoding='utf-8') as f:
                    f.write(data)
                logging.info(f"Exported analytics to {args.export}")
            return 0

        if args.clear:
            ctx.service.clear_analytics_data()
            return 0

        host = args.host or config.web.host
        port = args.port or config.web.port
        logging.info(f"Starting dashboard API on {host}:{port}")
        uvicorn.run(create_app(ctx), host=host, port=port, log_level=config.log_level.lower())
        return 0
    finally:
        ctx.close()


if __name__ == "__main__":
    sys.exit(main())
