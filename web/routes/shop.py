"""Shop product endpoints."""

from __future__ import annotations

from flask import Blueprint

from core import NotificationType
from utils.validators import validate_shop_product
from web.routes.common import found, get_storage, json_body, render, render_list

shop_bp = Blueprint("shop", __name__, url_prefix="/api/shop-products")


@shop_bp.route("", methods=["GET"])
def list_products():
    return render_list(get_storage().list_shop_products())


@shop_bp.route("/<product_id>", methods=["GET"])
def get_product(product_id: str):
    return render(found(get_storage().get_shop_product(product_id), "Product"))


@shop_bp.route("", methods=["POST"])
def create_product():
    data = validate_shop_product(json_body())
    storage = get_storage()
    with storage.transaction():
        product = storage.create_shop_product(**data)
        storage.create_notification(
            NotificationType.SHOP_PRODUCT_NEW.value,
            f"New Shop Product: {product.name}",
            f"{product.category} - {product.price}",
        )
    return render(product, 201)


@shop_bp.route("/<product_id>", methods=["PATCH"])
def update_product(product_id: str):
    patch = validate_shop_product(json_body(), partial=True)
    return render(found(get_storage().update_shop_product(product_id, patch), "Product"))


@shop_bp.route("/<product_id>", methods=["DELETE"])
def delete_product(product_id: str):
    if not get_storage().delete_shop_product(product_id):
        found(None, "Product")
    return "", 204
