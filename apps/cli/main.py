"""CLI application for GemBump."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console

from core.config import Settings, load_settings
from core.logging import setup_logging
from core.models import UpdateReport
from core.resolve_ruby import RubyGemsClient
from core.update import GemfileUpdater

console = Console()


async def update_gemfile(content: str, filename: str, settings: Settings) -> UpdateReport:
    """Run the update pipeline against the live registry."""
    async with RubyGemsClient(
        registry_url=settings.registry_url, timeout=settings.timeout
    ) as client:
        updater = GemfileUpdater(
            client.fetch_history,
            threshold_days=settings.staleness_days,
            max_concurrency=settings.max_concurrency,
        )
        return await updater.update(content, filename=filename)


app = typer.Typer(
    name="gembump",
    help="GemBump - Update Gemfile version constraints to the latest stable releases",
    add_completion=False,
)


@app.command()
def update(
    gemfile: str = typer.Argument("Gemfile", help="Path to the Gemfile to update"),
) -> None:
    """GemBump - Rewrite gem lines to `~>` the latest stable release."""

    path = Path(gemfile)
    if not path.exists():
        console.print(f"Error: {gemfile} not found", style="red")
        raise typer.Exit(1)

    try:
        settings = load_settings()
        setup_logging(settings.log_level, console=console)

        console.print(f"Updating {gemfile}...\n")
        content = path.read_bytes().decode("utf-8")
        report = asyncio.run(update_gemfile(content, gemfile, settings))
        path.write_bytes(report.content.encode("utf-8"))

    except Exception as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)

    if report.skipped:
        console.print(f"\n{len(report.skipped)} gem(s) skipped")
    console.print(f"\n✓ {gemfile} updated successfully!", style="green")


if __name__ == "__main__":
    app()
