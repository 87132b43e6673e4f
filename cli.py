# cli.py
import os
import sys
from datetime import datetime
from typing import Any, Dict, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.text import Text
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from shopsdk.cart import Cart, FileCartStorage
from shopsdk.client import StoreClient, DEFAULT_BASE_URL
from shopsdk.session import ShopSession

console = Console()

CART_DIR = os.environ.get("STORE_CART_DIR", os.path.join(os.path.expanduser("~"), ".poultry-paradise"))

CATEGORIES = ["Country Chicken", "Broiler & Layer", "Quail Bird"]
SUBCATEGORIES = {
    "Country Chicken": ["Chicken", "Eggs"],
    "Broiler & Layer": ["Chicken", "Eggs"],
    "Quail Bird": ["Meat", "Eggs"],
}

# Global state for status messages
status_message = "Ready"

# Custom prompt style for prompt_toolkit
custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


def rupees(amount: float) -> str:
    return f"₹{amount:.2f}"


def clamp_to_stock(product: Dict[str, Any], quantity: int) -> int:
    """Cap a requested quantity at the product's stock figure (at least 1)."""
    stock = int(product.get("stock", 0) or 0)
    return max(1, min(quantity, stock))


# ---------------------------
# Display helpers
# ---------------------------
def stock_badge(stock: int) -> str:
    if stock == 0:
        return "[red]Out of stock[/red]"
    if stock <= 5:
        return f"[yellow]Only {stock} left![/yellow]"
    return f"[green]{stock}[/green]"


def show_products(session: ShopSession):
    if not session.products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    for category, products in session.products_by_category().items():
        table = Table(
            title=f"🐔 {category}",
            box=box.ROUNDED,
            header_style="bold cyan",
            title_style="bold magenta",
            show_lines=True
        )
        table.add_column("ID", style="dim", width=28)
        table.add_column("Name", style="bold", width=26)
        table.add_column("Type", width=10)
        table.add_column("Price", justify="right", width=14)
        table.add_column("Stock", justify="right", width=16)

        for p in products:
            table.add_row(
                p.get("id", "N/A"),
                p.get("name", "N/A"),
                p.get("subcategory", ""),
                f"{rupees(p.get('price', 0))}/{p.get('unit', '')}",
                stock_badge(int(p.get("stock", 0) or 0)),
            )
        console.print(table)


def show_cart(session: ShopSession):
    cart = session.cart
    summary = session.summary()

    title = Text()
    title.append("🛒 Your Shopping Cart", style="bold")
    title.append(f" - {cart.item_count} item(s)", style="bold cyan")

    if len(cart) == 0:
        console.print(Panel("Your cart is empty 🛍️", title=title, style="blue"))
        return

    table = Table(box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("Product", style="bold", width=30)
    table.add_column("Qty", justify="right", width=8)
    table.add_column("Price", justify="right", width=14)
    table.add_column("Line total", justify="right", width=14)

    for line in cart:
        table.add_row(
            line.get("name", "Unknown"),
            str(line["quantity"]),
            f"{rupees(line['price'])}/{line.get('unit', '')}",
            rupees(line["price"] * line["quantity"]),
        )

    table.add_section()
    table.add_row("Subtotal", "", "", rupees(summary.subtotal))
    table.add_row("Delivery", "", "", rupees(summary.delivery))
    table.add_row("[bold green]Total[/bold green]", "", "", f"[bold green]{rupees(summary.total)}[/bold green]")

    console.print(Panel(table, title=title, border_style="blue"))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper with exception handling
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Returns the result, or None after printing the error.
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
    except Exception as e:
        status_message = f"Error: {e}"
        console.print(show_status(f"Error: {e}", False))
        return None


def sync(session: ShopSession, success_msg: Optional[str] = None):
    global status_message
    session.sync_catalog()
    if session.error:
        status_message = f"Error: {session.error}"
        console.print(show_status(status_message, False))
    elif success_msg:
        status_message = success_msg


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_product_completer(session: ShopSession):
    ids = [p.get("id", "") for p in session.products]
    return WordCompleter([i for i in ids if i], ignore_case=True)


def get_cart_completer(session: ShopSession):
    return WordCompleter([line["id"] for line in session.cart], ignore_case=True)


# ---------------------------
# Layout and Header
# ---------------------------
def create_header(session: ShopSession):
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    who = "guest"
    if session.user:
        who = (session.user.get("user_metadata") or {}).get("name") or session.user.get("email", "user")
    header.add_row(
        "🐔 Poultry Paradise",
        f"[bold blue]Welcome, {who}![/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_float(message: str, default: float = 100.0) -> float:
    while True:
        raw = Prompt.ask(message, default=str(default))
        try:
            return float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")


def ask_product_fields(existing: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    existing = existing or {}
    category = Prompt.ask("🏷️ Category", choices=CATEGORIES, default=existing.get("category") or CATEGORIES[0])
    subcategory = Prompt.ask(
        "Type", choices=SUBCATEGORIES[category],
        default=existing.get("subcategory") if existing.get("subcategory") in SUBCATEGORIES[category] else SUBCATEGORIES[category][0],
    )
    return {
        "name": prompt_with_autocomplete("Product name", default=existing.get("name", "")),
        "category": category,
        "subcategory": subcategory,
        "price": ask_float("💰 Price", default=existing.get("price", 100.0)),
        "unit": Prompt.ask("Unit", default=existing.get("unit", "kg")),
        "description": prompt_with_autocomplete("Description", default=existing.get("description", "")),
        "stock": IntPrompt.ask("📦 Stock", default=existing.get("stock", 10)),
    }


# ---------------------------
# Shopper actions
# ---------------------------
def add_to_cart(session: ShopSession):
    global status_message
    pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer(session)).strip()
    product = session.find_product(pid)
    if not product:
        status_message = f"Error: unknown product {pid}"
        return
    if int(product.get("stock", 0) or 0) <= 0:
        status_message = f"Error: {product['name']} is out of stock"
        return
    qty = clamp_to_stock(product, IntPrompt.ask("Enter quantity", default=1))
    session.cart.add(product, qty)
    status_message = f"Added {qty} x {product['name']} to cart"
    show_cart(session)


def update_cart_line(session: ShopSession):
    global status_message
    pid = prompt_with_autocomplete("Cart product ID", completer=get_cart_completer(session)).strip()
    line = session.cart.get(pid)
    if not line:
        status_message = f"Error: {pid} is not in your cart"
        return
    qty = IntPrompt.ask("New quantity (0 removes)", default=line["quantity"])
    if qty > 0:
        qty = clamp_to_stock(line, qty)
    session.cart.update_quantity(pid, qty)
    status_message = f"Updated {line['name']}"
    show_cart(session)


def remove_from_cart(session: ShopSession):
    global status_message
    pid = prompt_with_autocomplete("Cart product ID", completer=get_cart_completer(session)).strip()
    session.cart.remove(pid)
    status_message = f"Removed {pid} from cart"
    show_cart(session)


def place_order(session: ShopSession):
    global status_message
    if len(session.cart) == 0:
        status_message = "Error: your cart is empty"
        return
    show_cart(session)
    if not Confirm.ask("Place this order?"):
        return
    summary = session.place_order()
    console.print(Panel.fit(
        f"[green]Order Placed Successfully![/green]\n"
        f"Total: [bold]{rupees(summary.total)}[/bold]\n"
        "Thank you for your order. We'll deliver it fresh to your doorstep!",
        title="🎉 Order Confirmation"
    ))
    status_message = "Order placed"


def sign_up(session: ShopSession, role: str):
    email = Prompt.ask("Email")
    password = Prompt.ask("Password", password=True)
    name = Prompt.ask("Full name")
    user = try_api(session.client.signup, email, password, name, role, success_msg=f"Signed up {email}")
    if user:
        session.user = user


# ---------------------------
# Admin actions
# ---------------------------
def admin_add_product(session: ShopSession):
    fields = ask_product_fields()
    image_path = Prompt.ask("Image file path (blank to give a URL instead)", default="")
    if image_path:
        product = try_api(session.client.upload_product, fields, image_path, success_msg=f"Product '{fields['name']}' added")
    else:
        fields["image"] = Prompt.ask("Image URL", default="")
        product = try_api(session.client.create_product, fields, success_msg=f"Product '{fields['name']}' added")
    if product:
        sync(session)


def admin_edit_product(session: ShopSession):
    pid = prompt_with_autocomplete("Product ID to edit", completer=get_product_completer(session)).strip()
    existing = session.find_product(pid)
    if not existing:
        console.print(show_status(f"Error: unknown product {pid}", False))
        return
    patch = ask_product_fields(existing)
    patch["image"] = Prompt.ask("Image URL", default=existing.get("image", ""))
    if try_api(session.client.update_product, pid, patch, success_msg=f"Product {pid} updated"):
        sync(session)


def admin_delete_product(session: ShopSession):
    pid = prompt_with_autocomplete("Product ID to delete", completer=get_product_completer(session)).strip()
    if not Confirm.ask("Are you sure you want to delete this product?"):
        return
    if try_api(session.client.delete_product, pid, success_msg=f"Product {pid} deleted"):
        sync(session)


def admin_init_products(session: ShopSession):
    resp = try_api(session.client.init_products)
    if resp:
        console.print(show_status(f"{resp['message']} ({resp['count']} products)", True))
        sync(session)


# ---------------------------
# Main menu
# ---------------------------
SHOPPER_OPTIONS = [
    ("1", "📦 Browse products", "5", "➖ Remove from cart"),
    ("2", "🔄 Refresh catalog", "6", "🧹 Clear cart"),
    ("3", "🛒 Add to cart", "7", "🧾 View cart"),
    ("4", "✏️ Update quantity", "8", "✅ Place order"),
    ("s", "👤 Sign up", "S", "🔑 Sign up as admin"),
]

ADMIN_OPTIONS = [
    ("a", "➕ Add product", "e", "✏️ Edit product"),
    ("d", "🗑️ Delete product", "i", "🌱 Initialize products"),
]


def menu(session: ShopSession):
    global status_message

    console.clear()
    console.print(create_header(session))

    sync(session, success_msg="Catalog loaded")

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = list(SHOPPER_OPTIONS)
        if session.is_admin:
            options += ADMIN_OPTIONS
        options.append(("", "", "q", "👋 Quit"))
        for row in options:
            menu_table.add_row(*row)

        keys = [k for row in options for k in (row[0], row[2]) if k]
        console.print(Panel(menu_table, title=f"📋 Menu ({session.cart.item_count} in cart)", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter(keys + ["quit", "exit"])
        ).strip()

        if choice == "1":
            show_products(session)
        elif choice == "2":
            sync(session, success_msg="Catalog refreshed")
            show_products(session)
        elif choice == "3":
            add_to_cart(session)
        elif choice == "4":
            update_cart_line(session)
        elif choice == "5":
            remove_from_cart(session)
        elif choice == "6":
            if Confirm.ask("Empty your cart?"):
                session.cart.clear()
                status_message = "Cart cleared"
        elif choice == "7":
            show_cart(session)
        elif choice == "8":
            place_order(session)
        elif choice == "s":
            sign_up(session, "user")
        elif choice == "S":
            sign_up(session, "admin")
        elif session.is_admin and choice == "a":
            admin_add_product(session)
        elif session.is_admin and choice == "e":
            admin_edit_product(session)
        elif session.is_admin and choice == "d":
            admin_delete_product(session)
        elif session.is_admin and choice == "i":
            admin_init_products(session)
        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Thank you for shopping at Poultry Paradise! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


def main():
    client = StoreClient(base_url=DEFAULT_BASE_URL)
    cart = Cart(FileCartStorage(CART_DIR))
    menu(ShopSession(client, cart))


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n\n[bold red]Unexpected error: {e}[/bold red]")
        sys.exit(1)
