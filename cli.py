# cli.py - interactive catalog browser
import os
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.catalog_client import CatalogClient, error_messages
import requests

console = Console()
c = CatalogClient(base_url=os.getenv("CATALOG_API_URL", "http://127.0.0.1:8085"))

SORT_OPTIONS = ["price_asc", "price_desc", "rating", "name", "name_desc"]

status_message = "Ready"
product_cache: List[Dict[str, Any]] = []
category_cache: List[str] = []

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]], count: Optional[int] = None, total: Optional[int] = None):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    title = "📦 Product Catalog"
    if count is not None and total is not None:
        title += f" ({count} of {total})"

    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=10)
    table.add_column("Name", style="bold", width=26)
    table.add_column("Category", width=14)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Stock", justify="right", width=7)
    table.add_column("Rating", justify="right", width=7)

    for p in products:
        stock = p.get("stock", 0)
        stock_style = "green" if stock > 0 else "red"
        table.add_row(
            p.get("id", "N/A"),
            p.get("name", "N/A"),
            p.get("category", "N/A"),
            f"{p.get('price', 0):,}",
            f"[{stock_style}]{stock}[/{stock_style}]",
            f"⭐ {p.get('rating', 0)}"
        )
    console.print(table)


def show_product(p: Dict[str, Any]):
    body = (
        f"[bold]{p.get('name')}[/bold]  [dim]{p.get('id')}[/dim]\n"
        f"🏷️ {p.get('category')}\n"
        f"{p.get('description') or '[dim]no description[/dim]'}\n\n"
        f"💰 [green]{p.get('price'):,}[/green]   📦 {p.get('stock')}   ⭐ {p.get('rating')}"
    )
    if p.get("image"):
        body += f"\n🖼️ {p['image']}"
    console.print(Panel.fit(body, title="Product", border_style="cyan"))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    API errors are shown with every message the server returned; returns None on failure.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except requests.exceptions.HTTPError as e:
        status_message = f"Error: HTTP {e.response.status_code}"
        console.print(show_status("\n".join(error_messages(e)), False))
        return None
    except requests.exceptions.RequestException as e:
        status_message = f"Error: {e}"
        console.print(show_status(f"Error: {e}", False))
        return None


# ---------------------------
# Autocompletion helpers
# ---------------------------
def refresh_caches():
    global product_cache, category_cache
    listing = try_api(c.list_products)
    if listing is not None:
        product_cache = listing.get("data", [])
    category_cache = try_api(c.list_categories) or category_cache


def get_product_completer():
    if not product_cache:
        refresh_caches()
    ids = [p.get("id", "") for p in product_cache]
    return WordCompleter([i for i in ids if i], ignore_case=True)


def get_category_completer():
    return WordCompleter(category_cache, ignore_case=True, sentence=True)


# ---------------------------
# Layout and Header
# ---------------------------
def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🛍️ Catalog SDK",
        "[bold blue]Product Catalog CLI[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Input helpers
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_float(message: str, default: Optional[float] = None) -> Optional[float]:
    while True:
        raw = Prompt.ask(message, default="" if default is None else str(default))
        if raw == "":
            return None
        try:
            return float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")


def ask_product_fields(current: Optional[Dict[str, Any]] = None, only_changes: bool = False) -> Dict[str, Any]:
    """
    Prompt for product fields, prefilled from current.
    With only_changes, fields left as they were are not returned.
    """
    current = current or {}
    fields: Dict[str, Any] = {
        "name": prompt_with_autocomplete("Name", default=current.get("name", "")),
        "category": prompt_with_autocomplete("🏷️ Category", completer=get_category_completer(),
                                             default=current.get("category", "general")),
        "description": prompt_with_autocomplete("Description", default=current.get("description", "")),
        "price": ask_float("💰 Price", default=current.get("price")),
        "stock": IntPrompt.ask("📦 Stock", default=current.get("stock", 0)),
        "rating": ask_float("⭐ Rating (0-5)", default=current.get("rating", 0)),
    }
    fields = {k: v for k, v in fields.items() if v is not None}
    if only_changes:
        fields = {k: v for k, v in fields.items() if current.get(k) != v}
    return fields


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message

    console.clear()
    console.print(create_header())
    refresh_caches()

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "5", "✏️ Edit product"),
            ("2", "🔍 Filter & sort", "6", "♻️ Replace product"),
            ("3", "ℹ️ Get product by ID", "7", "🗑️ Delete product"),
            ("4", "➕ Create product", "8", "🏷️ Categories"),
            ("", "", "q", "👋 Quit")
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 9)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            listing = try_api(c.list_products, success_msg="Products loaded")
            if listing is not None:
                show_products(listing["data"], listing["count"], listing["total"])

        elif choice == "2":
            category = prompt_with_autocomplete("🏷️ Category contains", completer=get_category_completer()) or None
            min_price = ask_float("Min price")
            max_price = ask_float("Max price")
            in_stock = Confirm.ask("Only in stock?", default=False)
            sort = prompt_with_autocomplete("Sort by", completer=WordCompleter(SORT_OPTIONS)) or None
            limit = IntPrompt.ask("Limit (0 = all)", default=0) or None
            listing = try_api(c.list_products, category, min_price, max_price, in_stock, sort, limit,
                              success_msg="Filtered products loaded")
            if listing is not None:
                show_products(listing["data"], listing["count"], listing["total"])

        elif choice == "3":
            pid = prompt_with_autocomplete("Product ID", completer=get_product_completer())
            product = try_api(c.get_product, pid, success_msg=f"Product {pid} loaded")
            if product:
                show_product(product)

        elif choice == "4":
            fields = ask_product_fields()
            product = try_api(c.create_product, success_msg=f"Product '{fields.get('name')}' created", **fields)
            if product:
                show_product(product)
                refresh_caches()

        elif choice in ("5", "6"):
            pid = prompt_with_autocomplete("Product ID", completer=get_product_completer())
            current = try_api(c.get_product, pid)
            if not current:
                continue
            if choice == "5":
                changes = ask_product_fields(current, only_changes=True)
                product = try_api(c.update_product, pid, success_msg=f"Product {pid} updated", **changes)
            else:
                fields = ask_product_fields(current)
                product = try_api(c.replace_product, pid, success_msg=f"Product {pid} replaced", **fields)
            if product:
                show_product(product)
                refresh_caches()

        elif choice == "7":
            pid = prompt_with_autocomplete("Product ID", completer=get_product_completer())
            if Confirm.ask(f"[red]Delete product {pid}?[/red]"):
                try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted")
                refresh_caches()

        elif choice == "8":
            cats = try_api(c.list_categories, success_msg="Categories loaded")
            if cats is not None:
                console.print(Panel("\n".join(f"• {cat}" for cat in cats) or "No categories",
                                    title="🏷️ Categories", border_style="magenta"))

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Goodbye! 👋[/bold green]", title="Catalog"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
