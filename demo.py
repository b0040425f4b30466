#!/usr/bin/env python
import requests
from sdk.catalog_client import CatalogClient, error_messages


def main():
    c = CatalogClient(base_url="http://127.0.0.1:8085")

    # -----------------------------
    # Create products
    # -----------------------------
    print("Creating products...")
    mouse = c.create_product(name="Mouse", price=999)
    keyboard = c.create_product(name="Keyboard", category="Peripherals", price=4990, stock=12, rating=4.4)
    print(mouse)
    print(keyboard)

    # -----------------------------
    # Invalid create
    # -----------------------------
    print("\nCreating an invalid product...")
    try:
        c.create_product(name="A", price=-1)
    except requests.exceptions.HTTPError as e:
        print(e.response.status_code, error_messages(e))

    # -----------------------------
    # Query
    # -----------------------------
    print("\nPeripherals under 10000, cheapest first...")
    listing = c.list_products(category="periph", max_price=10000, sort="price_asc")
    print(f"{listing['count']} of {listing['total']}")
    for p in listing["data"]:
        print(f"  {p['name']}: {p['price']}")

    print("\nCategories:", c.list_categories())

    # -----------------------------
    # Updates
    # -----------------------------
    print("\nPatching stock...")
    print(c.update_product(mouse["id"], stock=5))

    print("\nReplacing keyboard...")
    print(c.replace_product(keyboard["id"], name="Keyboard TKL", price=3990))

    # -----------------------------
    # Delete
    # -----------------------------
    print("\nDeleting mouse...")
    c.delete_product(mouse["id"])
    try:
        c.get_product(mouse["id"])
    except requests.exceptions.HTTPError as e:
        print("After delete:", e.response.status_code, error_messages(e))


if __name__ == "__main__":
    main()
