"""Product dashboard routes: list, create, show, edit, update and delete."""

from urllib.parse import urlparse

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.datastructures import FormData, UploadFile

from catalog_admin.api.http.deps import (
    get_blob_storage,
    get_flash,
    get_form,
    get_product_controller,
)
from catalog_admin.api.http.templating import templates
from catalog_admin.core.exceptions import NotFoundError
from catalog_admin.core.models import ActionResult, Outcome, ViewResult
from catalog_admin.core.services import BlobStorage, FlashBag, IncomingFile, ProductController
from catalog_admin.entities.catalog.product import Product

router = APIRouter(prefix="/products", tags=["products"])

IMAGE_FIELD = "image"


def split_form(form: FormData) -> tuple[dict[str, str], IncomingFile | None]:
    """Separate text fields from the uploaded image, if one was actually chosen."""
    fields: dict[str, str] = {}
    image: IncomingFile | None = None
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key == IMAGE_FIELD and value.filename:
                image = IncomingFile(
                    filename=value.filename,
                    stream=value.file,
                    content_type=value.content_type,
                )
            continue
        fields[key] = value
    return fields, image


def _render(
    request: Request, view: ViewResult, flash: FlashBag, storage: BlobStorage
) -> HTMLResponse:
    flashed = flash.consume()

    def image_src(product: Product) -> str | None:
        if not product.image:
            return None
        return product.image if product.has_external_image else storage.url(product.image)

    context = {
        **view.context,
        "flash": flashed,
        "errors": flashed.errors,
        "old": flashed.old,
        "image_src": image_src,
        "app_name": request.app.state.config.app.name,
    }
    return templates.TemplateResponse(request, view.template, context)


def _back_url(request: Request, fallback: str) -> str:
    """Previous page from the Referer header when it points at this site."""
    referer = request.headers.get("referer")
    if referer:
        parsed = urlparse(referer)
        if not parsed.netloc or parsed.netloc == request.url.netloc:
            return referer
    return fallback


def _respond(
    request: Request,
    result: ActionResult,
    flash: FlashBag,
    fallback_url: str,
    product_id: int | None = None,
) -> RedirectResponse:
    if result.outcome is Outcome.NOT_FOUND:
        raise NotFoundError("Product", product_id)

    flash.flash(**result.flash_payload())
    if result.redirect_route:
        url = str(request.url_for(result.redirect_route))
    else:
        url = _back_url(request, fallback_url)
    return RedirectResponse(url, status_code=302)


@router.get("", name="products.index", response_class=HTMLResponse)
def index(
    request: Request,
    q: str | None = None,
    page: str | None = None,
    controller: ProductController = Depends(get_product_controller),
    flash: FlashBag = Depends(get_flash),
    storage: BlobStorage = Depends(get_blob_storage),
):
    """List products, optionally searching name or sku."""
    return _render(request, controller.list(q=q, page=page), flash, storage)


@router.get("/create", name="products.create", response_class=HTMLResponse)
def create(
    request: Request,
    controller: ProductController = Depends(get_product_controller),
    flash: FlashBag = Depends(get_flash),
    storage: BlobStorage = Depends(get_blob_storage),
):
    """Show the form for creating a new product."""
    return _render(request, controller.create_form(), flash, storage)


@router.post("", name="products.store")
def store(
    request: Request,
    form: FormData = Depends(get_form),
    controller: ProductController = Depends(get_product_controller),
    flash: FlashBag = Depends(get_flash),
):
    """Store a newly created product."""
    fields, image = split_form(form)
    result = controller.store(fields, image)
    return _respond(request, result, flash, str(request.url_for("products.create")))


@router.get("/{product_id}", name="products.show", response_class=HTMLResponse)
def show(
    request: Request,
    product_id: int,
    controller: ProductController = Depends(get_product_controller),
    flash: FlashBag = Depends(get_flash),
    storage: BlobStorage = Depends(get_blob_storage),
):
    """Display one product with its category."""
    return _render(request, controller.show(product_id), flash, storage)


@router.get("/{product_id}/edit", name="products.edit", response_class=HTMLResponse)
def edit(
    request: Request,
    product_id: int,
    controller: ProductController = Depends(get_product_controller),
    flash: FlashBag = Depends(get_flash),
    storage: BlobStorage = Depends(get_blob_storage),
):
    """Show the form for editing a product."""
    return _render(request, controller.edit_form(product_id), flash, storage)


def _update(
    request: Request, product_id: int, form: FormData, controller: ProductController, flash: FlashBag
) -> RedirectResponse:
    fields, image = split_form(form)
    result = controller.update(product_id, fields, image)
    fallback = str(request.url_for("products.edit", product_id=product_id))
    return _respond(request, result, flash, fallback, product_id=product_id)


def _destroy(
    request: Request, product_id: int, controller: ProductController, flash: FlashBag
) -> RedirectResponse:
    result = controller.destroy(product_id)
    fallback = str(request.url_for("products.index"))
    return _respond(request, result, flash, fallback, product_id=product_id)


@router.api_route("/{product_id}", methods=["PUT", "PATCH"], name="products.update")
def update(
    request: Request,
    product_id: int,
    form: FormData = Depends(get_form),
    controller: ProductController = Depends(get_product_controller),
    flash: FlashBag = Depends(get_flash),
):
    """Update a product."""
    return _update(request, product_id, form, controller, flash)


@router.delete("/{product_id}", name="products.destroy")
def destroy(
    request: Request,
    product_id: int,
    controller: ProductController = Depends(get_product_controller),
    flash: FlashBag = Depends(get_flash),
):
    """Delete a product."""
    return _destroy(request, product_id, controller, flash)


@router.post("/{product_id}", name="products.method_override")
def method_override(
    request: Request,
    product_id: int,
    form: FormData = Depends(get_form),
    controller: ProductController = Depends(get_product_controller),
    flash: FlashBag = Depends(get_flash),
):
    """HTML forms can only POST; ``_method`` selects update or delete."""
    method = str(form.get("_method", "")).upper()
    if method in ("PUT", "PATCH"):
        return _update(request, product_id, form, controller, flash)
    if method == "DELETE":
        return _destroy(request, product_id, controller, flash)
    raise HTTPException(status_code=405, detail="Method Not Allowed")
