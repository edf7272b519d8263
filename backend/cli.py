"""
Menu service CLI.

Command-line interface for common operations: schema creation, demo
data, menu inspection and configuration checks.
"""

import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

app = typer.Typer(
    name="menu-cli",
    help="Navigation menu service CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create missing tables."""
    from menu_api.models import Base
    from shared.infrastructure.db import engine

    try:
        Base.metadata.create_all(bind=engine)
        console.print("[green]✓ Tables created/verified[/green]")
    except Exception as e:
        console.print(f"[red]✗ Table creation failed: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def db_seed(
    tenant_id: int = typer.Option(None, help="Tenant owning the demo menu (central when omitted)"),
    force: bool = typer.Option(False, "--force", "-f", help="Allow seeding production"),
):
    """Create a demo menu with a few items."""
    from menu_api.services.context import LocaleContext, TenantContext
    from menu_api.services.domain import MenuItemService, MenuService
    from shared.config.settings import settings
    from shared.infrastructure.db import get_db_context, transaction

    if settings.environment == "production" and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    tenant = TenantContext.for_tenant(tenant_id)
    locale = LocaleContext.from_settings()

    with get_db_context() as db:
        with transaction(db, "seed demo menu"):
            menu = MenuService(db, tenant, locale).create(
                {"name": "demo", "primary": True, "title": "Demo menu", "status": True}
            )
            items = MenuItemService(db, tenant, locale)
            home = items.create({"menu_id": menu.id, "link_type": "url", "title": "Home", "url": "/"})
            about = items.create({"menu_id": menu.id, "link_type": "page", "page_id": 1, "title": "About"})
            items.create(
                {"menu_id": menu.id, "parent_id": about.id, "link_type": "page", "page_id": 2, "title": "Team"}
            )
            menu_id = menu.id

        console.print(f"[green]✓ Seeded menu {menu_id} (home item {home.id})[/green]")


# =============================================================================
# Menu Commands
# =============================================================================

@app.command()
def menus(
    tenant_id: int = typer.Option(None, help="Tenant to list (all when omitted)"),
):
    """List menus."""
    from menu_api.services.context import LocaleContext, TenantContext
    from menu_api.services.domain import MenuService
    from shared.infrastructure.db import get_db_context

    locale = LocaleContext.from_settings()

    with get_db_context() as db:
        records, _ = MenuService(db, TenantContext.for_tenant(tenant_id), locale).list()

        table = Table(title="Menus")
        table.add_column("ID", style="cyan")
        table.add_column("Name", style="green")
        table.add_column("Title")
        table.add_column("Tenant", style="yellow")

        for menu in records:
            table.add_row(
                str(menu.id),
                menu.name,
                menu.title_for(locale.current_locale()) or "-",
                str(menu.tenant_id) if menu.tenant_id is not None else "central",
            )

    console.print(table)


@app.command()
def menu_tree(
    menu_id: int = typer.Argument(..., help="Menu to render"),
    lang: str = typer.Option(None, help="Locale of the titles"),
):
    """Print the item tree of a menu."""
    from menu_api.services.context import LocaleContext, TenantContext
    from menu_api.services.domain import MenuItemService
    from shared.infrastructure.db import get_db_context
    from shared.utils.exceptions import AppException

    locale = LocaleContext.from_settings(lang)

    with get_db_context() as db:
        try:
            nodes = MenuItemService(db, TenantContext.central(), locale).tree(menu_id)
        except AppException as e:
            console.print(f"[red]✗ {e.detail}[/red]")
            raise typer.Exit(1)

    tree = Tree(f"[bold]Menu {menu_id}[/bold]")

    def add(branch, entries):
        for entry in entries:
            label = f"{entry['title'] or '(untitled)'} [dim]#{entry['id']} pos {entry['position']}[/dim]"
            if entry["uri"]:
                label += f" [cyan]/{entry['uri']}[/cyan]"
            add(branch.add(label), entry["children"])

    add(tree, nodes)
    console.print(tree)


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def config_check():
    """Validate locale and pagination settings."""
    from shared.config.settings import settings

    errors = settings.validate_locales()

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Default locale", settings.default_locale)
    table.add_row("Supported locales", ", ".join(settings.supported_locale_list))
    table.add_row("Central data", ", ".join(sorted(settings.central_data_entities)) or "-")
    table.add_row("Page size", f"{settings.default_page_size} (max {settings.max_page_size})")
    console.print(table)

    if errors:
        for error in errors:
            console.print(f"[red]✗ {error}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Configuration valid[/green]")


@app.command()
def health(
    url: str = typer.Option("http://localhost:8000/api/health", help="Health endpoint"),
):
    """Check the running API."""
    import time

    import httpx

    table = Table(title="Service Health")
    table.add_column("Service", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Response Time", style="yellow")

    try:
        start = time.time()
        response = httpx.get(url, timeout=5.0)
        elapsed = (time.time() - start) * 1000
        if response.status_code == 200:
            table.add_row("Menu API", "✓ Healthy", f"{elapsed:.0f}ms")
        else:
            table.add_row("Menu API", f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")
    except httpx.HTTPError as e:
        table.add_row("Menu API", f"✗ {type(e).__name__}", "-")

    console.print(table)


@app.command()
def version():
    """Show version information."""
    table = Table(title="Menu Service Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", "0.1.0")
    table.add_row("CLI", "0.1.0")
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
