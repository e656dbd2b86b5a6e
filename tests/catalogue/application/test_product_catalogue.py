"""Application tests for product creation, listing, updates, removal and stock."""

import uuid

import pytest
from catalogue.product.creation import create_product
from catalogue.product.details import get_product, update_product
from catalogue.product.lifecycle import remove_product
from catalogue.product.listing import (
    count_products,
    list_dashboard_products,
    list_products,
    list_products_by_category,
)
from catalogue.product.lookup import find_product, find_products
from catalogue.product.product import ProductType
from catalogue.product.stock import release_stock, reserve_stock
from files.upload import Upload
from protean.exceptions import ObjectNotFoundError, ValidationError


def _png(name="cover.png"):
    return Upload(filename=name, content=b"\x89PNG\r\n\x1a\n" + b"0" * 64, content_type="image/png")


class TestCreateProduct:
    def test_creates_product_in_category(self, storage, create_category):
        category = create_category("Metroidvania")
        result = create_product(storage, "Hollow Knight", 14.99, 8, category.id)

        assert result.message == "Product created successfully"
        stored = get_product(result.product.id)
        assert stored.price == 14.99
        assert stored.category_id == category.id

    def test_unknown_category_rejected(self, storage):
        with pytest.raises(ObjectNotFoundError):
            create_product(storage, "Ghost", 9.99, 1, str(uuid.uuid4()))

    def test_first_uploaded_image_becomes_main_image(self, storage, create_category):
        category = create_category()
        result = create_product(storage, "Hades", 24.99, 3, category.id, images=[_png("a.png"), _png("b.png")])

        assert len(result.images) == 2
        assert result.product.image_url == result.images[0].secure_url

    def test_image_failures_do_not_undo_the_product(self, storage, create_category):
        category = create_category()
        storage.configure(failing_filenames={"broken.png"})
        result = create_product(
            storage, "Hades", 24.99, 3, category.id, images=[_png("ok.png"), _png("broken.png")]
        )

        assert result.message == "Product created, but some images failed to upload"
        assert [failure.filename for failure in result.failed_uploads] == ["broken.png"]
        assert get_product(result.product.id).is_active


class TestListing:
    def test_storefront_hides_inactive_and_sold_out(self, create_product):
        visible = create_product(name="Visible", stock=2)
        create_product(name="Sold out", stock=0)
        create_product(name="Removed", is_active=False)

        page = list_products(limit=10)
        assert [product.id for product in page.items] == [visible.id]

    def test_dashboard_shows_everything(self, create_product):
        create_product(name="Visible")
        create_product(name="Sold out", stock=0)
        create_product(name="Removed", is_active=False)

        assert len(list_dashboard_products(limit=10).items) == 3

    def test_filter_by_type(self, create_product):
        create_product(name="Digital")
        physical = create_product(name="Boxed", type=ProductType.PHYSICAL)

        page = list_products(limit=10, type=ProductType.PHYSICAL)
        assert [product.id for product in page.items] == [physical.id]

    def test_search_is_case_insensitive(self, create_product):
        create_product(name="Stardew Valley")
        create_product(name="Star Wars")
        create_product(name="Hades")

        assert {p.name for p in list_products(limit=10, search="star").items} == {"Stardew Valley", "Star Wars"}
        assert [p.name for p in list_products(limit=10, search="  HADES ").items] == ["Hades"]

    def test_by_category(self, create_category, create_product):
        rpg = create_category("RPG")
        other = create_category("Racing")
        in_rpg = create_product(name="Disco Elysium", category=rpg)
        create_product(name="Forza", category=other)

        page = list_products_by_category(rpg.id, limit=10)
        assert [product.id for product in page.items] == [in_rpg.id]

    def test_by_unknown_category(self):
        with pytest.raises(ObjectNotFoundError):
            list_products_by_category(str(uuid.uuid4()), limit=10)

    def test_count_only_active(self, create_product):
        create_product(name="One")
        create_product(name="Two", stock=0)
        create_product(name="Gone", is_active=False)

        assert count_products() == 2


class TestUpdateAndRemove:
    def test_update_product(self, create_product):
        product = create_product(price=19.99)
        update_product(product.id, price=17.49, stock=4)

        stored = get_product(product.id)
        assert stored.price == 17.49
        assert stored.stock == 4

    def test_update_with_unknown_category(self, create_product):
        product = create_product()
        with pytest.raises(ObjectNotFoundError):
            update_product(product.id, category_id=str(uuid.uuid4()))

    def test_soft_delete_keeps_row_but_hides_it(self, create_product):
        product = create_product()
        remove_product(product.id)

        assert get_product(product.id).is_active is False
        assert list_products(limit=10).items == []

    def test_removing_twice_is_not_found(self, create_product):
        product = create_product()
        remove_product(product.id)

        with pytest.raises(ObjectNotFoundError):
            remove_product(product.id)

    def test_removed_product_cannot_be_updated(self, create_product):
        product = create_product(is_active=False)
        with pytest.raises(ObjectNotFoundError):
            update_product(product.id, name="Back")


class TestStockReservation:
    def test_reserves_every_line(self, create_product, product_stock):
        celeste = create_product(name="Celeste", stock=3, price=19.99)
        hades = create_product(name="Hades", stock=5, price=24.99)

        reserved = reserve_stock({celeste.id: 2, hades.id: 1})

        assert {line.name: line.quantity for line in reserved} == {"Celeste": 2, "Hades": 1}
        assert {line.name: line.price for line in reserved} == {"Celeste": 19.99, "Hades": 24.99}
        assert product_stock(celeste.id) == 1
        assert product_stock(hades.id) == 4

    def test_shortfall_reserves_nothing(self, create_product, product_stock):
        plenty = create_product(name="Plenty", stock=10)
        scarce = create_product(name="Scarce", stock=1)

        with pytest.raises(ValidationError) as exc:
            reserve_stock({plenty.id: 2, scarce.id: 2})

        assert exc.value.messages["stock"] == ["Scarce is out of stock"]
        assert product_stock(plenty.id) == 10
        assert product_stock(scarce.id) == 1

    def test_inactive_product_cannot_be_reserved(self, create_product):
        product = create_product(is_active=False)
        with pytest.raises(ObjectNotFoundError):
            reserve_stock({product.id: 1})

    def test_quantity_must_be_positive(self, create_product):
        product = create_product()
        with pytest.raises(ValidationError):
            reserve_stock({product.id: 0})

    def test_release_puts_units_back(self, create_product, product_stock):
        product = create_product(stock=4)
        reserve_stock({product.id: 3})

        release_stock({product.id: 3})

        assert product_stock(product.id) == 4


class TestLookup:
    def test_find_product_returns_snapshot(self, create_product):
        product = create_product(name="Celeste", stock=0)

        snapshot = find_product(product.id)

        assert snapshot.name == "Celeste"
        assert not snapshot.is_purchasable

    def test_find_unknown_product(self):
        assert find_product(str(uuid.uuid4())) is None

    def test_find_products_skips_unknown_ids(self, create_product):
        product = create_product()
        found = find_products([product.id, str(uuid.uuid4())])
        assert list(found) == [product.id]
