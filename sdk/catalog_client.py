# sdk/catalog_client.py
import requests
import httpx
from typing import Optional, Dict, Any, List


class CatalogClient:
    def __init__(self, base_url: str = "http://localhost:8085", timeout: int = 10):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api{path}"

    # Products
    def list_products(
        self,
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        in_stock: bool = False,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if category:
            params["category"] = category
        if min_price is not None:
            params["minPrice"] = min_price
        if max_price is not None:
            params["maxPrice"] = max_price
        if in_stock:
            params["inStock"] = "true"
        if sort:
            params["sort"] = sort
        if limit is not None:
            params["limit"] = limit
        r = self.session.get(self._url("/products"), params=params, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def get_product(self, product_id: str) -> Dict[str, Any]:
        r = self.session.get(self._url(f"/products/{product_id}"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()["data"]

    def create_product(self, **fields) -> Dict[str, Any]:
        r = self.session.post(self._url("/products"), json=fields, timeout=self.timeout)
        r.raise_for_status()
        return r.json()["data"]

    def replace_product(self, product_id: str, **fields) -> Dict[str, Any]:
        r = self.session.put(self._url(f"/products/{product_id}"), json=fields, timeout=self.timeout)
        r.raise_for_status()
        return r.json()["data"]

    def update_product(self, product_id: str, **fields) -> Dict[str, Any]:
        r = self.session.patch(self._url(f"/products/{product_id}"), json=fields, timeout=self.timeout)
        r.raise_for_status()
        return r.json()["data"]

    def delete_product(self, product_id: str) -> None:
        r = self.session.delete(self._url(f"/products/{product_id}"), timeout=self.timeout)
        r.raise_for_status()

    def list_categories(self) -> List[str]:
        r = self.session.get(self._url("/categories"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()["data"]

    # Async partial update (used by the concurrent demo)
    async def update_product_async(self, product_id: str, **fields) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.patch(self._url(f"/products/{product_id}"), json=fields)
            # do not raise here, callers inspect 400/404
            return r


def error_messages(exc: requests.exceptions.HTTPError) -> List[str]:
    """Pull the error list out of a failed API response."""
    try:
        body = exc.response.json()
    except ValueError:
        return [str(exc)]
    return body.get("errors") or [body.get("error", str(exc))]


if __name__ == "__main__":
    import argparse
    import json

    parser = argparse.ArgumentParser(description="Product catalog CLI")
    parser.add_argument("--base-url", default="http://127.0.0.1:8085")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lp = subparsers.add_parser("list-products", help="List products")
    lp.add_argument("--category", help="Case-insensitive category filter")
    lp.add_argument("--min-price", type=float)
    lp.add_argument("--max-price", type=float)
    lp.add_argument("--in-stock", action="store_true", help="Only products with stock > 0")
    lp.add_argument("--sort", choices=["price_asc", "price_desc", "rating", "name", "name_desc"])
    lp.add_argument("--limit", type=int)

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--product-id", required=True)

    cp = subparsers.add_parser("create-product", help="Create a product")
    cp.add_argument("--name", required=True)
    cp.add_argument("--price", type=float, required=True)
    cp.add_argument("--category")
    cp.add_argument("--description")
    cp.add_argument("--stock", type=int)
    cp.add_argument("--rating", type=float)

    up = subparsers.add_parser("update-product", help="Partially update a product")
    up.add_argument("--product-id", required=True)
    up.add_argument("--name")
    up.add_argument("--price", type=float)
    up.add_argument("--category")
    up.add_argument("--description")
    up.add_argument("--stock", type=int)
    up.add_argument("--rating", type=float)

    dp = subparsers.add_parser("delete-product", help="Delete a product")
    dp.add_argument("--product-id", required=True)

    subparsers.add_parser("categories", help="List categories")

    args = parser.parse_args()
    c = CatalogClient(base_url=args.base_url)
    field_names = ("name", "price", "category", "description", "stock", "rating")

    try:
        if args.command == "list-products":
            out = c.list_products(args.category, args.min_price, args.max_price, args.in_stock, args.sort, args.limit)
        elif args.command == "get-product":
            out = c.get_product(args.product_id)
        elif args.command == "create-product":
            out = c.create_product(**{k: getattr(args, k) for k in field_names if getattr(args, k) is not None})
        elif args.command == "update-product":
            out = c.update_product(args.product_id, **{k: getattr(args, k) for k in field_names if getattr(args, k) is not None})
        elif args.command == "delete-product":
            c.delete_product(args.product_id)
            out = {"deleted": args.product_id}
        else:
            out = c.list_categories()
    except requests.exceptions.HTTPError as e:
        out = {"status": e.response.status_code, "errors": error_messages(e)}
    print(json.dumps(out, indent=2, ensure_ascii=False))
