from typing import List

# Domain errors raised by the catalog store and persistence layer.


class CatalogError(Exception):
    pass


class ValidationFailed(CatalogError):
    def __init__(self, errors: List[str]):
        super().__init__("validation failed")
        self.errors = list(errors)


class NotFound(CatalogError):
    def __init__(self, product_id: str):
        super().__init__("product not found")
        self.product_id = product_id


class CorruptState(CatalogError):
    """The data file exists but cannot be trusted as a product collection."""

    def __init__(self, path, reason: str):
        super().__init__(f"corrupt catalog file {path}: {reason}")
        self.path = path
        self.reason = reason


class IOFailure(CatalogError):
    """A save could not be written durably."""

    def __init__(self, path, reason: str):
        super().__init__(f"could not write catalog file {path}: {reason}")
        self.path = path
        self.reason = reason
