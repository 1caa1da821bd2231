"""
CLI for the gallery proxy.

Commands:
- serve: Start the HTTP server
- warm: Compute and cache every page of the current folder listing
- info: Show configuration and cache status
"""

import asyncio

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import settings
from .errors import GalleryError
from .logging import setup_logging

app = typer.Typer(
    name="gallery-proxy",
    help="Caching proxy serving paginated Cloudinary folder listings",
)
console = Console()


def _missing_credentials() -> list[str]:
    required = {
        "CLOUDINARY_CLOUD_NAME": settings.cloudinary_cloud_name,
        "CLOUDINARY_API_KEY": settings.cloudinary_api_key,
        "CLOUDINARY_API_SECRET": settings.cloudinary_api_secret,
    }
    return [name for name, value in required.items() if not value]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Gallery Proxy - cached, paginated image listings for a Cloudinary folder."""
    log_level = "DEBUG" if verbose else settings.log_level
    setup_logging(level=log_level, json_output=settings.log_json, log_file=settings.log_file)
    logger.debug("CLI initialized with log level: {}", log_level)


@app.command()
def serve(
    host: str = typer.Option(settings.host, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(settings.port, "--port", "-p", help="Port to bind to"),
):
    """Start the HTTP server."""
    import uvicorn

    from .server import create_app

    logger.info("Starting gallery proxy on {}:{}", host, port)
    console.print("[bold blue]Starting Gallery Proxy[/]")
    console.print(f"Host: {host}:{port}")
    console.print()

    missing = _missing_credentials()
    if missing:
        logger.warning("Missing Cloudinary settings: {}", ", ".join(missing))
        console.print(f"[red]Warning: {', '.join(missing)} not set. Requests will fail.[/]")
    if settings.is_development:
        logger.warning("Development mode: API key check disabled")
        console.print("[yellow]Development mode: API key check disabled[/]")
    elif not settings.api_secret_key:
        console.print("[red]Warning: API_SECRET_KEY not set. Every request will be rejected.[/]")

    uvicorn.run(create_app(), host=host, port=port, log_level=settings.log_level.lower())


@app.command()
def warm(
    per_page: int = typer.Option(settings.per_page, "--per-page", "-n", help="Page size"),
    force: bool = typer.Option(False, "--force", help="Discard cached pages first"),
):
    """Compute and cache every page of the current folder listing."""
    missing = _missing_credentials()
    if missing:
        logger.error("Missing Cloudinary settings: {}", ", ".join(missing))
        console.print(f"[red]Error: {', '.join(missing)} not set[/]")
        raise typer.Exit(1)

    async def run_warm() -> int:
        from .server import GalleryService

        service = GalleryService(settings)
        try:
            return await service.controller.warm(per_page=per_page, force=force)
        finally:
            await service.close()

    logger.info("Warming cache (per_page={}, force={})", per_page, force)
    try:
        computed = asyncio.run(run_warm())
    except GalleryError as e:
        logger.error("Cache warm failed: {}", e.message)
        console.print(f"[red]Cache warm failed: {e.message}[/]")
        raise typer.Exit(1)

    console.print(f"[bold green]Computed {computed} page(s)[/]")


@app.command()
def info():
    """Show configuration and cache status."""
    logger.debug("Displaying configuration and status")
    console.print("[bold blue]Gallery Proxy Configuration[/]")

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("API Secret Key", "***" if settings.api_secret_key else "[red]NOT SET[/]")
    table.add_row("Cloudinary Cloud", settings.cloudinary_cloud_name or "[red]NOT SET[/]")
    table.add_row("Cloudinary API Key", "***" if settings.cloudinary_api_key else "[red]NOT SET[/]")
    table.add_row("Cloudinary Folder", settings.cloudinary_folder_prefix)
    table.add_row("Detail Lookup", settings.cloudinary_detail_lookup)
    table.add_row("CDN Base URL", settings.cdn_base_url)
    table.add_row("KV Store", f"{settings.kv_store_type} ({settings.kv_store_path})")
    table.add_row("Cache Key", settings.cache_key_name)
    table.add_row("Per Page", str(settings.per_page))
    table.add_row("Strict Normalization", str(settings.strict_normalization))
    table.add_row("Server Host", settings.host)
    table.add_row("Server Port", str(settings.port))

    console.print(table)

    console.print("\n[bold]Cache Status[/]")
    try:
        from .gallery import read_cache_record
        from .store import create_kv_store

        store = create_kv_store(store_type=settings.kv_store_type, path=settings.kv_path)
        record = asyncio.run(read_cache_record(store, settings.cache_key_name))

        if record is None:
            console.print("No cached snapshot (run warm or request a page)")
        else:
            logger.debug(
                "Cache status: {} resources, {} pages", record.total_items, record.page_count
            )
            console.print(f"Snapshot resources: {record.total_items}")
            console.print(f"Cached pages: {record.page_count}")
            console.print(f"Snapshot hash: {record.snapshot_hash[:12]}")
            console.print(f"Updated: {record.updated_at.isoformat()}")
    except Exception as e:
        logger.error("Error accessing cache: {}", e)
        console.print(f"[red]Error accessing cache: {e}[/]")


if __name__ == "__main__":
    app()
