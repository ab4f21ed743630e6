"""End-to-end tests for the product dashboard over HTTP."""

from decimal import Decimal

import pytest
from sqlmodel import select

from catalog_admin.entities.catalog.category import CategoryTable
from catalog_admin.entities.catalog.product import Product, ProductRepository, ProductTable

pytestmark = pytest.mark.integration

VALID_FORM = {
    "name": "Widget",
    "slug": "widget",
    "sku": "SKU1",
    "price": "9.99",
    "stock": "5",
}


def _products(db_service) -> list[ProductTable]:
    with db_service.session_scope() as session:
        return list(session.exec(select(ProductTable).order_by(ProductTable.id)).all())


def _create(db_service, **overrides) -> Product:
    values = {"name": "Gadget", "slug": "gadget", "sku": "GAD1", "price": Decimal("3.50"), "stock": 2}
    values.update(overrides)
    with db_service.session_scope() as session:
        return ProductRepository(session).save(Product(**values))


def _category_id(db_service, name: str) -> int:
    with db_service.session_scope() as session:
        return session.exec(select(CategoryTable.id).where(CategoryTable.name == name)).one()


class TestAmbientEndpoints:
    def test_root_redirects_to_list(self, client):
        response = client.get("/", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"].endswith("/products")

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_ready(self, client):
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready"}

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_unknown_route_renders_404_page(self, client):
        response = client.get("/nowhere")

        assert response.status_code == 404
        assert "could not be found" in response.text


class TestList:
    def test_empty_list(self, client):
        response = client.get("/products")

        assert response.status_code == 200
        assert "No products found." in response.text

    def test_search_by_sku(self, client, db_service):
        _create(db_service, name="Widget", slug="widget", sku="SKU1")
        _create(db_service, name="Gadget", slug="gadget", sku="GAD1")

        response = client.get("/products", params={"q": "SKU1"})

        assert response.status_code == 200
        assert "Widget" in response.text
        assert "Gadget" not in response.text
        assert 'value="SKU1"' in response.text

    def test_pagination(self, client, db_service):
        for n in range(12):
            _create(db_service, name=f"Item {n:02d}", slug=f"item-{n}", sku=f"ITEM{n}")

        first = client.get("/products")
        second = client.get("/products", params={"page": "2"})

        assert "Item 09" in first.text
        assert "Item 10" not in first.text
        assert "Item 10" in second.text
        assert "Item 11" in second.text
        assert "Showing 11 to 12 of 12" in second.text

    def test_bad_page_number_shows_first_page(self, client, db_service):
        _create(db_service)

        response = client.get("/products", params={"page": "abc"})

        assert response.status_code == 200
        assert "Gadget" in response.text


class TestCreate:
    def test_create_form_lists_categories(self, client):
        response = client.get("/products/create")

        assert response.status_code == 200
        assert "Beverages" in response.text
        assert 'enctype="multipart/form-data"' in response.text

    def test_valid_create_persists_and_lists(self, client, db_service):
        category_id = _category_id(db_service, "Snacks")

        response = client.post(
            "/products",
            data={**VALID_FORM, "product_category_id": str(category_id), "is_active": "1"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert response.headers["location"].endswith("/products")
        [product] = _products(db_service)
        assert product.name == "Widget"
        assert product.slug == "widget"
        assert product.sku == "SKU1"
        assert product.price == Decimal("9.99")
        assert product.stock == 5
        assert product.product_category_id == category_id
        assert product.is_active is True
        assert product.image is None

        listing = client.get("/products")
        assert "Product saved successfully." in listing.text
        assert "Widget" in listing.text

    def test_flash_shown_only_once(self, client):
        client.post("/products", data=VALID_FORM)

        again = client.get("/products")

        assert "Product saved successfully." not in again.text

    def test_missing_field_redirects_back_with_errors(self, client, db_service):
        form = {key: value for key, value in VALID_FORM.items() if key != "name"}

        response = client.post(
            "/products",
            data=form,
            headers={"Referer": "http://testserver/products/create"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert response.headers["location"] == "http://testserver/products/create"
        assert _products(db_service) == []

        page = client.get(response.headers["location"])
        assert "The name field is required." in page.text
        assert "Validation error, please check your input." in page.text
        assert 'value="widget"' in page.text

    def test_long_input_keeps_session_cookie_within_browser_limit(self, client):
        form = {**VALID_FORM, "name": "", "description": "x" * 5000}

        response = client.post("/products", data=form, follow_redirects=False)

        assert len(response.headers["set-cookie"]) <= 4096
        page = client.get(response.headers["location"])
        assert "The name field is required." in page.text
        assert "Validation error, please check your input." in page.text
        assert 'value="widget"' in page.text

    @pytest.mark.parametrize(
        "field, message",
        [
            ("product_category_id", "The selected product category id is invalid."),
            ("stock", "The stock field must not be greater than 2147483647."),
        ],
    )
    def test_out_of_range_integers_are_field_errors(self, client, db_service, field, message):
        response = client.post("/products", data={**VALID_FORM, field: "99999999999999999999"})

        assert response.status_code == 200
        assert message in response.text
        assert _products(db_service) == []

    def test_back_without_referer_goes_to_form(self, client):
        response = client.post("/products", data={}, follow_redirects=False)

        assert response.headers["location"].endswith("/products/create")

    def test_duplicate_slug_rejected(self, client, db_service):
        client.post("/products", data=VALID_FORM)

        response = client.post("/products", data={**VALID_FORM, "sku": "SKU2"})

        assert "The slug has already been taken." in response.text
        assert len(_products(db_service)) == 1

    def test_upload_stored_and_served(self, client, db_service, storage_root):
        response = client.post(
            "/products",
            data=VALID_FORM,
            files={"image": ("photo.jpg", b"jpeg-bytes", "image/jpeg")},
            follow_redirects=False,
        )

        assert response.status_code == 302
        [product] = _products(db_service)
        assert product.image.startswith("uploads/product/")
        assert product.image.endswith("_photo.jpg")
        assert (storage_root / product.image).read_bytes() == b"jpeg-bytes"

        served = client.get(f"/storage/{product.image}")
        assert served.status_code == 200
        assert served.content == b"jpeg-bytes"


class TestShowAndEdit:
    def test_show_with_category(self, client, db_service):
        product = _create(db_service, product_category_id=_category_id(db_service, "Beverages"))

        response = client.get(f"/products/{product.id}")

        assert response.status_code == 200
        assert "Gadget" in response.text
        assert "Beverages" in response.text

    def test_show_missing(self, client):
        assert client.get("/products/999").status_code == 404

    def test_show_non_numeric_id(self, client):
        assert client.get("/products/abc").status_code == 404

    def test_edit_form(self, client, db_service):
        product = _create(db_service)

        response = client.get(f"/products/{product.id}/edit")

        assert response.status_code == 200
        assert 'name="_method" value="PUT"' in response.text
        assert 'value="gadget"' in response.text

    def test_edit_missing(self, client):
        assert client.get("/products/999/edit").status_code == 404


class TestUpdate:
    def _form(self, product: Product, **overrides) -> dict[str, str]:
        form = {
            "name": product.name,
            "slug": product.slug,
            "sku": product.sku,
            "price": str(product.price),
            "stock": str(product.stock),
            "is_active": "0",
        }
        form.update(overrides)
        return form

    def test_put_updates(self, client, db_service):
        product = _create(db_service)

        response = client.put(
            f"/products/{product.id}", data=self._form(product, name="Renamed", is_active="1"), follow_redirects=False
        )

        assert response.status_code == 302
        assert response.headers["location"].endswith("/products")
        [stored] = _products(db_service)
        assert stored.name == "Renamed"
        assert stored.is_active is True
        assert "Product updated successfully." in client.get("/products").text

    def test_method_override_from_html_form(self, client, db_service):
        product = _create(db_service)

        response = client.post(
            f"/products/{product.id}",
            data=self._form(product, stock="42", _method="PUT"),
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert _products(db_service)[0].stock == 42

    def test_patch_supported(self, client, db_service):
        product = _create(db_service)

        response = client.patch(f"/products/{product.id}", data=self._form(product, price="7.25"), follow_redirects=False)

        assert response.status_code == 302
        assert _products(db_service)[0].price == Decimal("7.25")

    def test_duplicate_sku_of_other_product(self, client, db_service):
        _create(db_service, slug="first", sku="FIRST")
        product = _create(db_service)

        response = client.put(
            f"/products/{product.id}",
            data=self._form(product, sku="FIRST"),
            headers={"Referer": f"http://testserver/products/{product.id}/edit"},
            follow_redirects=False,
        )

        assert response.headers["location"] == f"http://testserver/products/{product.id}/edit"
        assert "The sku has already been taken." in client.get(response.headers["location"]).text
        assert _products(db_service)[1].sku == "GAD1"

    def test_invalid_image_url(self, client, db_service):
        product = _create(db_service)

        response = client.put(f"/products/{product.id}", data=self._form(product, image_url="not-a-url"), follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"].endswith(f"/products/{product.id}/edit")
        page = client.get(response.headers["location"])
        assert "The image url field must be a valid URL." in page.text
        assert _products(db_service)[0].image is None

    def test_invalid_image_url_on_missing_product(self, client):
        """Input is validated before the product is looked up."""
        response = client.put("/products/7", data={"image_url": "not-a-url"}, follow_redirects=False)

        assert response.status_code == 302

    def test_valid_update_of_missing_product(self, client):
        response = client.put("/products/7", data=VALID_FORM, follow_redirects=False)

        assert response.status_code == 404

    def test_image_url_stored(self, client, db_service):
        product = _create(db_service)

        client.put(
            f"/products/{product.id}",
            data=self._form(product, image_url="https://cdn.test/p.png"),
            follow_redirects=False,
        )

        assert _products(db_service)[0].image == "https://cdn.test/p.png"
        assert 'src="https://cdn.test/p.png"' in client.get(f"/products/{product.id}").text

    def test_permissive_boolean_rejected(self, client, db_service):
        product = _create(db_service)

        response = client.put(
            f"/products/{product.id}", data=self._form(product, is_active="yes"), follow_redirects=False
        )

        assert response.status_code == 302

        assert _products(db_service)[0].is_active is False


class TestDestroy:
    def test_delete_then_404(self, client, db_service):
        product = _create(db_service)

        first = client.delete(f"/products/{product.id}", follow_redirects=False)
        second = client.delete(f"/products/{product.id}", follow_redirects=False)

        assert first.status_code == 302
        assert first.headers["location"].endswith("/products")
        assert second.status_code == 404
        assert _products(db_service) == []

    def test_delete_via_method_override(self, client, db_service):
        product = _create(db_service)

        response = client.post(f"/products/{product.id}", data={"_method": "DELETE"}, follow_redirects=False)

        assert response.status_code == 302
        assert "Product deleted successfully." in client.get("/products").text

    def test_unknown_override_not_allowed(self, client, db_service):
        product = _create(db_service)

        response = client.post(f"/products/{product.id}", data={"_method": "GET"})

        assert response.status_code == 405
        assert len(_products(db_service)) == 1
