from decimal import Decimal
from typing import Dict, Any, List
from sqlalchemy.orm import Session
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _require_positive_int(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError(
            "Quantity must be a positive integer",
            {"quantity": quantity},
        )
    return quantity


class CartService:
    """
    Koszyk uzytkownika, cqrs jak w reszcie serwisow
    commands (add, update, remove, clear) modyfikuja stan
    query (get) tylko odczyt

    Cena pozycji to snapshot z chwili ostatniego zapisu pozycji:
    odswiezana tylko przy add/update, nigdy przy odczycie.
    Stock produktu to tylko limit, koszyk go nie rezerwuje ani nie zmniejsza.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query - odczyt
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        try:
            cart = self.repo.get_cart_by_user(user_id)

            if not cart:
                raise NotFoundError("Cart not found", {"user_id": user_id})

            return self._to_view(cart, self.repo.get_cart_items(cart.id))
        except Exception:
            logger.error(
                f"Failed to load cart of user {user_id}",
                extra={"context": {"user_id": user_id}},
            )
            raise

    #commands
    def add_item(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        context = {"user_id": user_id, "product_id": product_id, "quantity": quantity}

        try:
            _require_positive_int(quantity)

            product = self.products.get_active(product_id)
            if not product:
                raise NotFoundError("Product not found", {"product_id": product_id})

            cart = self.repo.get_cart_by_user(user_id)
            existing_item = self.repo.get_cart_item(cart.id, product_id) if cart else None

            # cala zadana ilosc musi sie zmiescic, nigdy czesciowe dodanie
            if existing_item:
                if existing_item.quantity + quantity > product.stock:
                    raise InsufficientStockError(
                        available=product.stock,
                        requested=quantity,
                        in_cart=existing_item.quantity,
                    )
            elif quantity > product.stock:
                raise InsufficientStockError(available=product.stock, requested=quantity)

            if cart is None:
                logger.info(f"Creating cart for user {user_id}")
                cart = self.repo.create_cart(user_id)

            if existing_item:
                existing_item.quantity += quantity
                existing_item.price = product.price
                resulting = existing_item.quantity
            else:
                self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        product_id=product.id,
                        quantity=quantity,
                        price=product.price,
                    )
                )
                resulting = quantity

            self.repo.touch(cart)
            self.repo.commit()

            logger.info(
                f"Product added to cart: {product.title}",
                extra={"context": {**context, "resulting_quantity": resulting}},
            )
        except Exception:
            self.repo.rollback()
            logger.error("Failed to add product to cart", extra={"context": context})
            raise

        return self.get_cart(user_id)

    def update_item(self, user_id: int, item_id: int, quantity: int) -> Dict[str, Any]:
        context = {"user_id": user_id, "item_id": item_id, "quantity": quantity}

        try:
            _require_positive_int(quantity)

            item = self.repo.get_owned_item(item_id, user_id)
            if not item:
                raise NotFoundError("Cart item not found", {"item_id": item_id})

            product = item.product
            if quantity > product.stock:
                raise InsufficientStockError(available=product.stock, requested=quantity)

            item.quantity = quantity
            item.price = product.price
            self.repo.touch(item.cart)
            self.repo.commit()

            logger.info(
                f"Cart item updated: {product.title}",
                extra={"context": {**context, "resulting_quantity": quantity}},
            )
        except Exception:
            self.repo.rollback()
            logger.error("Failed to update cart item", extra={"context": context})
            raise

        return self.get_cart(user_id)

    def remove_item(self, user_id: int, item_id: int) -> Dict[str, Any]:
        context = {"user_id": user_id, "item_id": item_id}

        try:
            item = self.repo.get_owned_item(item_id, user_id)
            if not item:
                raise NotFoundError("Cart item not found", {"item_id": item_id})

            cart = item.cart
            product_id = item.product_id
            self.repo.delete_cart_item(item)
            self.repo.touch(cart)
            self.repo.commit()

            logger.info(
                "Cart item removed",
                extra={"context": {**context, "product_id": product_id, "resulting_quantity": 0}},
            )
        except Exception:
            self.repo.rollback()
            logger.error("Failed to remove cart item", extra={"context": context})
            raise

        return self.get_cart(user_id)

    def clear_cart(self, user_id: int) -> Dict[str, Any]:
        try:
            cart = self.repo.get_cart_by_user(user_id)
            if not cart:
                raise NotFoundError("Cart not found", {"user_id": user_id})

            # sam koszyk zostaje, pusty
            removed = self.repo.delete_cart_items(cart.id)
            self.repo.touch(cart)
            self.repo.commit()

            logger.info(
                "Cart cleared",
                extra={"context": {"user_id": user_id, "items_removed": removed}},
            )
        except Exception:
            self.repo.rollback()
            logger.error("Failed to clear cart", extra={"context": {"user_id": user_id}})
            raise

        return {"message": "Cart cleared", "items_removed": removed}

    def _to_view(self, cart: CartModel, items: List[CartItemModel]) -> Dict[str, Any]:
        lines = [
            {
                "id": i.id,
                "quantity": i.quantity,
                "unit_price": i.price,
                "total_price": i.price * i.quantity,
                "added_at": i.created_at,
                "product": {
                    "id": i.product.id,
                    "title": i.product.title,
                    "thumbnail": i.product.thumbnail,
                    "stock": i.product.stock,
                    "category": {
                        "id": i.product.category.id,
                        "name": i.product.category.name,
                        "slug": i.product.category.slug,
                    },
                },
            }
            for i in items
        ]

        return {
            "id": cart.id,
            "user_id": cart.user_id,
            "items": lines,
            "total_items": sum(line["quantity"] for line in lines),
            "total_amount": sum((line["total_price"] for line in lines), Decimal("0.00")),
            "created_at": cart.created_at,
            "updated_at": cart.updated_at,
        }
