"""Command-line entry point for the route visualizer.

Usage:
    python main.py                              # Interactive mode
    python main.py "From Paris to London"       # Single query mode

Set EXPORT_FORMATS=gpx,geojson to also save each route under output/.
"""

import asyncio
import sys

from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt

from routeviz.config import Settings
from routeviz.pipeline import RouteSearchPipeline, SearchOutcome, build_strategies
from routeviz.tools import MapboxDirections, MapboxGeocoder, create_llm_client, export_route
from routeviz.utils import setup_logging


console = Console()


def create_pipeline(settings: Settings) -> RouteSearchPipeline:
    """Wire the configured upstream clients into a search pipeline."""
    geocoder = MapboxGeocoder(
        token=settings.mapbox_token,
        base_url=settings.mapbox_base_url,
        timeout=settings.http_timeout_seconds,
    )
    directions = MapboxDirections(
        token=settings.mapbox_token,
        base_url=settings.mapbox_base_url,
        timeout=settings.http_timeout_seconds,
    )
    return RouteSearchPipeline(
        strategies=build_strategies(create_llm_client(settings)),
        geocoder=geocoder,
        directions=directions,
        extraction_timeout=settings.extraction_timeout_seconds,
        show_progress=True,
    )


def show_outcome(outcome: SearchOutcome, settings: Settings) -> None:
    """Print a search result and save the route if exports are enabled."""
    console.print()
    console.print(Markdown(outcome.format_summary()))

    if outcome.route and settings.export_formats:
        stops = list(zip(outcome.locations, outcome.coordinates))
        for path in export_route(outcome.route, stops, settings.export_formats, settings.output_dir):
            console.print(f"[green]✓[/green] Saved {path}")


async def interactive_mode(pipeline: RouteSearchPipeline, settings: Settings):
    """Run interactive search mode."""

    console.print("\n[bold blue]🗺️ Route Visualizer[/bold blue]\n")

    console.print(Panel(
        "Describe a trip and I'll find the route.\n\n"
        "[bold]How to use:[/bold]\n"
        "  • 'From Paris to London'\n"
        "  • 'Berlin to Prague to Vienna by bike, avoiding highways'\n"
        "  • 'Lisbon' (just show a place)\n\n"
        "[dim]Type 'quit' to exit.[/dim]",
        title="Welcome",
        border_style="blue",
    ))

    while True:
        try:
            console.print()
            user_input = Prompt.ask("[bold green]Search[/bold green]")

            if user_input.lower() in ["quit", "exit", "q"]:
                console.print("\n[dim]Goodbye![/dim]\n")
                break

            if not user_input.strip():
                console.print("[yellow]Please enter a search query[/yellow]")
                continue

            outcome = await pipeline.search(user_input)
            show_outcome(outcome, settings)

        except KeyboardInterrupt:
            console.print("\n\n[dim]Session interrupted. Goodbye![/dim]\n")
            break


async def single_query(pipeline: RouteSearchPipeline, settings: Settings, query: str) -> bool:
    """Run a single query."""
    outcome = await pipeline.search(query)
    show_outcome(outcome, settings)
    return outcome.success


def main():
    """Main entry point."""
    load_dotenv()
    settings = Settings()
    setup_logging(settings.log_level)

    # Check configuration
    missing = settings.validate_required()
    if missing:
        console.print(Panel(
            f"[red]Missing required configuration:[/red]\n" +
            "\n".join(f"  • {m}" for m in missing) +
            "\n\n[dim]Copy .env.example to .env and fill in your API keys.[/dim]",
            title="Configuration Error",
            border_style="red",
        ))
        sys.exit(1)

    if not settings.llm_configured():
        console.print("[dim]No language model configured - using the simple 'A to B' parser.[/dim]")

    pipeline = create_pipeline(settings)

    if len(sys.argv) > 1:
        query = " ".join(sys.argv[1:])
        ok = asyncio.run(single_query(pipeline, settings, query))
        sys.exit(0 if ok else 1)
    else:
        asyncio.run(interactive_mode(pipeline, settings))


if __name__ == "__main__":
    main()
