"""Product queries: storefront listing, admin dashboard and per-category pages."""

from protean.utils.globals import current_domain

from catalogue.category.management import get_category
from catalogue.product.product import Product, ProductType
from shared.pagination import Page, paginate


def _products():
    return current_domain.repository_for(Product)._dao.query


def list_products(
    limit: int,
    cursor: str | None = None,
    type: ProductType | None = None,
    search: str | None = None,
) -> Page:
    """Storefront listing: only active products with at least one unit in stock."""
    queryset = _products().filter(is_active=True, stock__gte=1)
    if type is not None:
        queryset = queryset.filter(type=ProductType(type).value)
    if search and search.strip():
        queryset = queryset.filter(name__icontains=search.strip())
    return paginate(queryset, limit, cursor)


def list_dashboard_products(limit: int, cursor: str | None = None) -> Page:
    """Admin listing: every product, including removed and sold-out ones."""
    return paginate(_products(), limit, cursor)


def list_products_by_category(category_id: str, limit: int, cursor: str | None = None) -> Page:
    get_category(category_id)
    return paginate(_products().filter(category_id=str(category_id), is_active=True), limit, cursor)


def count_products() -> int:
    return _products().filter(is_active=True).all().total
