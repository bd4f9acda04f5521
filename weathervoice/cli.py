"""CLI entry point for the voice weather service."""

import argparse
import logging

from weathervoice.config.loader import config_hash, get_config_value, load_config
from weathervoice.errors import UpstreamError, WeatherVoiceError
from weathervoice.pipeline.report_pipeline import build_pipeline

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "ops/configs/default.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weathervoice",
        description="Spoken weather report service",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )

    sub = parser.add_subparsers(dest="command")

    # serve
    serve_p = sub.add_parser("serve", help="Run the HTTP server")
    serve_p.add_argument("--host", default=None, help="Override ops.host")
    serve_p.add_argument("--port", type=int, default=None, help="Override ops.port")

    # render
    render_p = sub.add_parser("render", help="Fetch once and print the payload")
    render_p.add_argument(
        "--degraded", action="store_true", help="Print the fallback payload instead"
    )

    # config show / config get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Print one config value")
    get_p.add_argument("key", help="Dotted key, e.g. cache.ttl_minutes")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    config = load_config(args.config)

    logging.basicConfig(
        level=config.ops.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Loaded config %s (%s)", args.config, config_hash(config))

    if args.command == "serve":
        return _cmd_serve(config, args)
    elif args.command == "render":
        return _cmd_render(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_serve(config, args) -> int:
    import uvicorn

    from weathervoice.api import create_app

    app = create_app(config)
    uvicorn.run(
        app,
        host=args.host or config.ops.host,
        port=args.port or config.ops.port,
        log_level=config.ops.log_level.lower(),
    )
    return 0


def _cmd_render(config, args) -> int:
    try:
        pipeline = build_pipeline(config)
        if args.degraded:
            print(pipeline.render_degraded("manual"))
        else:
            print(pipeline.render())
        return 0
    except UpstreamError as e:
        print(f"Error: {e} (status={e.status}, body={e.body!r})")
        return 1
    except WeatherVoiceError as e:
        print(f"Error: {type(e).__name__}: {e}")
        return 1


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "get":
        try:
            print(get_config_value(config, args.key))
            return 0
        except (KeyError, IndexError, ValueError) as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config get key")
        return 1
