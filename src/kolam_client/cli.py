"""Command line collaborator for the kolam generation controller.

Usage:
  kolam-client health
  kolam-client generate --density 15 --boundary diamond --output kolam.png
  kolam-client serve-stub --port 8080
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from kolam_client.core.config import Settings, get_settings
from kolam_client.core.logging import setup_logging
from kolam_client.schemas.generation import (
    BoundaryType,
    GenerationResult,
    Theme,
    default_color_for,
)
from kolam_client.schemas.status import (
    ClassifiedError,
    ConnectivityState,
    connectivity_label,
)
from kolam_client.services.controller import KolamController


def _settings_for(args: argparse.Namespace) -> Settings:
    settings = get_settings()
    if args.base_url:
        overrides = {**settings.model_dump(), "KOLAM_API_BASE_URL": args.base_url}
        return Settings(**overrides)
    return settings


def _print_result(result: GenerationResult) -> None:
    stroke = "One-stroke" if result.is_one_stroke else "Multi-stroke"
    print(f"Boundary: {result.boundary_type}")
    print(f"Paths:    {result.path_count}")
    print(f"Type:     {stroke}")
    print(f"Time:     {result.elapsed_seconds}s")
    print(result.message)


async def _health(settings: Settings) -> int:
    controller = KolamController(settings)
    try:
        state = await controller.probe()
    finally:
        await controller.aclose()
    if state is ConnectivityState.CONNECTED:
        print(f"Connected: {settings.KOLAM_API_BASE_URL}")
        return 0
    label = connectivity_label(controller.monitor.last_failure_kind)
    print(f"Connection Failed ({label}): {controller.monitor.last_failure_message}")
    return 1


async def _generate(settings: Settings, args: argparse.Namespace) -> int:
    params = {
        "density": args.density,
        "smoothing": args.smoothing,
        "boundary_kind": args.boundary,
        "color_hex": args.color or default_color_for(args.boundary),
        "one_stroke": args.one_stroke,
        "theme": args.theme,
    }
    async with KolamController(settings) as controller:
        if controller.state is not ConnectivityState.CONNECTED:
            label = connectivity_label(controller.monitor.last_failure_kind)
            print(f"Backend not connected ({label})", file=sys.stderr)
            return 1
        if args.one_stroke:
            print("One-stroke generation may take up to 2 minutes")
        outcome = await controller.submit(params)
        if isinstance(outcome, ClassifiedError):
            print(f"Generation Failed: {outcome.user_message}", file=sys.stderr)
            return 1
        if outcome is None:  # pragma: no cover - single submit per process
            return 1
        _print_result(outcome)
        if args.output:
            path = controller.export_current(args.output)
            print(f"Saved to {path}")
    return 0


def _serve_stub(args: argparse.Namespace) -> int:
    import uvicorn

    from kolam_client.dev.stub_service import create_stub_app

    app = create_stub_app(delay_seconds=args.delay)
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kolam-client",
        description="Talk to a remote kolam generation service",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        help="Service base URL (overrides KOLAM_API_BASE_URL)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("health", help="Probe the service health endpoint")

    gen = sub.add_parser("generate", help="Generate one kolam")
    gen.add_argument("--density", type=int, default=15, help="Grid density (ND)")
    gen.add_argument(
        "--smoothing", type=float, default=0.6, help="Smoothing factor (sigmaref)"
    )
    gen.add_argument(
        "--boundary",
        choices=[b.value for b in BoundaryType],
        default=BoundaryType.DIAMOND.value,
        help="Boundary shape",
    )
    gen.add_argument(
        "--color", type=str, help="Stroke color #rrggbb (default: boundary swatch)"
    )
    gen.add_argument(
        "--one-stroke",
        action="store_true",
        help="Request a single continuous path (slower)",
    )
    gen.add_argument(
        "--theme",
        choices=[t.value for t in Theme],
        default=Theme.LIGHT.value,
    )
    gen.add_argument("--output", type=str, help="Write the generated image here")

    stub = sub.add_parser("serve-stub", help="Run the local stub service")
    stub.add_argument("--host", type=str, default="127.0.0.1")
    stub.add_argument("--port", type=int, default=8080)
    stub.add_argument(
        "--delay", type=float, default=0.0, help="Simulated generation delay (s)"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    if args.command == "serve-stub":
        return _serve_stub(args)

    settings = _settings_for(args)
    setup_logging(settings)
    if args.command == "health":
        return asyncio.run(_health(settings))
    return asyncio.run(_generate(settings, args))


if __name__ == "__main__":
    sys.exit(main())
