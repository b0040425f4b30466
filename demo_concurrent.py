import asyncio
from sdk.catalog_client import CatalogClient


async def patch_field(client, product_id, **fields):
    r = await client.update_product_async(product_id, **fields)
    if r.status_code == 200:
        print(f"✅ {fields} applied")
    else:
        print(f"❌ {fields} rejected ({r.status_code}): {r.json()}")


async def main():
    c = CatalogClient(base_url="http://127.0.0.1:8085")

    product = c.create_product(name="Gaming Laptop", category="Laptops", price=5000, stock=2)
    product_id = product["id"]
    print(f"\n🖥️  Created product: {product}")

    # Each request changes a different field; the store serializes them so none is lost
    print("\n⚡ Sending concurrent partial updates...")
    await asyncio.gather(
        patch_field(c, product_id, stock=10),
        patch_field(c, product_id, rating=4.5),
        patch_field(c, product_id, description="RTX 4070, 32GB RAM"),
        patch_field(c, product_id, price=0),
    )

    print("\n📦 Final product state:", c.get_product(product_id))
    c.delete_product(product_id)


if __name__ == "__main__":
    asyncio.run(main())
