"""Category management: commands, handler and queries."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from catalogue.category.category import Category, clean_category_name
from catalogue.domain import catalogue
from catalogue.product.product import Product
from shared.pagination import Page, paginate

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)


@catalogue.command(part_of="Category")
class RenameCategory:
    category_id: Identifier(required=True)
    name: String(required=True, max_length=100)


@catalogue.command(part_of="Category")
class DeleteCategory:
    category_id: Identifier(required=True)


def get_category(category_id: str) -> Category:
    category = current_domain.repository_for(Category)._dao.query.filter(id=str(category_id)).all().first
    if category is None:
        raise ObjectNotFoundError("Category not found")
    return category


def list_categories(limit: int, cursor: str | None = None) -> Page:
    return paginate(current_domain.repository_for(Category)._dao.query, limit, cursor)


def _ensure_unique_name(name: str) -> None:
    clash = current_domain.repository_for(Category)._dao.query.filter(name__iexact=name).all().first
    if clash is not None:
        raise ValidationError({"name": [f"Category '{name}' already exists"]})


@catalogue.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        category = Category.create(name=command.name)
        _ensure_unique_name(category.name)

        current_domain.repository_for(Category).add(category)
        logger.info("Category created", category_id=str(category.id), name=category.name)
        return str(category.id)

    @handle(RenameCategory)
    def rename_category(self, command):
        category = get_category(command.category_id)
        new_name = clean_category_name(command.name)
        if new_name != category.name:
            if new_name.lower() != category.name.lower():
                _ensure_unique_name(new_name)
            category.rename(new_name)
            current_domain.repository_for(Category).add(category)

    @handle(DeleteCategory)
    def delete_category(self, command):
        category = get_category(command.category_id)

        product_count = (
            current_domain.repository_for(Product)._dao.query.filter(category_id=str(category.id)).all().total
        )
        if product_count:
            raise ValidationError(
                {"category": [f"Category is still referenced by {product_count} product(s) and cannot be deleted"]}
            )

        current_domain.repository_for(Category)._dao.delete(category)
        logger.info("Category deleted", category_id=str(category.id))


def create_category(name: str) -> Category:
    category_id = current_domain.process(CreateCategory(name=name), asynchronous=False)
    return get_category(category_id)


def rename_category(category_id: str, name: str) -> Category:
    current_domain.process(RenameCategory(category_id=str(category_id), name=name), asynchronous=False)
    return get_category(category_id)


def delete_category(category_id: str) -> None:
    current_domain.process(DeleteCategory(category_id=str(category_id)), asynchronous=False)
