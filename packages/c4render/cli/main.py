"""Command-line interface for c4render."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
import sys

from pydantic import ValidationError
from rich.console import Console

from c4render.core.config.loader import configure_logging, load_app_config
from c4render.core.config.models import AppConfig
from c4render.core.errors import RenderingError
from c4render.core.exporter import WorkspaceRenderer
from c4render.core.rendering.models import PlantumlLayoutEngine, RendererKind

console = Console()
logger = logging.getLogger(__name__)


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Overlay command-line options onto the loaded config."""
    updates: dict = {}
    if args.output_dir:
        updates["output_dir"] = args.output_dir
    if args.ws_endpoint:
        updates["browser"] = config.browser.model_copy(update={"ws_endpoint": args.ws_endpoint})
    if args.force:
        updates["cache"] = config.cache.model_copy(update={"force": True})

    logging_updates: dict = {}
    if args.log_level:
        logging_updates["level"] = args.log_level
    if args.structured_logs:
        logging_updates["structured"] = True
    if logging_updates:
        updates["logging"] = config.logging.model_copy(update=logging_updates)

    return config.model_copy(update=updates) if updates else config


async def render_async(args: argparse.Namespace, config: AppConfig) -> int:
    """Render the requested views.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    workspace = Path(args.workspace).resolve()
    layout = Path(args.workspace_json).resolve() if args.workspace_json else None
    renderer = RendererKind(args.renderer) if args.renderer else None
    engine = PlantumlLayoutEngine(args.plantuml_layout_engine) if args.plantuml_layout_engine else None

    console.print(f"[bold]Rendering[/bold] {workspace.name}")
    exporter = WorkspaceRenderer(config)
    try:
        exported = await exporter.render_detailed(
            workspace,
            layout_path=layout,
            output_dir=Path(config.output_dir),
            view_key=args.view_key,
            renderer=renderer,
            layout_engine=engine,
        )
    except RenderingError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        logger.debug("Render failed", exc_info=True)
        return 1

    if not exported:
        console.print("[yellow]No SVG was produced[/yellow]")
        return 1

    for view in exported:
        marker = "[dim](cached)[/dim]" if view.from_cache else "[green]✅[/green]"
        console.print(f"   {marker} {view.view_key}: {view.svg_path}")

    console.print(f"\n[green]📁 {len(exported)} diagram(s) in:[/green] {Path(config.output_dir).resolve()}")
    return 0


def run_render(args: argparse.Namespace) -> None:
    """Render a workspace to SVG."""
    try:
        config = apply_overrides(load_app_config(args.config), args)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f"[red]ERROR: Could not load config: {e}[/red]")
        sys.exit(1)

    configure_logging(config)

    if not Path(args.workspace).exists():
        console.print(f"[red]ERROR: Workspace not found: {args.workspace}[/red]")
        sys.exit(1)

    sys.exit(asyncio.run(render_async(args, config)))


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="c4render",
        description="c4render - render Structurizr workspaces to SVG",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    render = sub.add_parser("render", help="Render workspace views to SVG")
    render.add_argument("-w", "--workspace", required=True, help="Workspace file (DSL or JSON)")
    render.add_argument(
        "-j",
        "--workspace-json",
        help="Workspace JSON with manual layout (used verbatim by the Structurizr renderer)",
    )
    render.add_argument("-o", "--output-dir", help="Output directory (default: from config)")
    render.add_argument("-v", "--view-key", help="Render only this view (default: all views)")
    render.add_argument(
        "-r",
        "--renderer",
        choices=[kind.value for kind in RendererKind],
        help="Renderer (default: from config, structurizr)",
    )
    render.add_argument(
        "-e",
        "--plantuml-layout-engine",
        choices=[engine.value for engine in PlantumlLayoutEngine],
        help="Layout engine for the C4-PlantUML renderer (default: graphviz)",
    )
    render.add_argument("--ws-endpoint", help="Remote Playwright browser endpoint")
    render.add_argument("--config", help="Path to config file (default: c4render.yaml if present)")
    render.add_argument("--force", action="store_true", help="Ignore the cache and re-render")
    render.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: from config)",
    )
    render.add_argument("--structured-logs", action="store_true", help="Emit JSON log lines")

    return p


def main(argv: list[str] | None = None) -> None:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)

    if args.cmd == "render":
        run_render(args)
