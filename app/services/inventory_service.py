from typing import Optional
from sqlmodel import Session

from app.models.product import Product
import logging

logger = logging.getLogger(__name__)


def get_product(session: Session, product_id: int) -> Optional[Product]:
    return session.get(Product, product_id)


def decrement_stock(session: Session, product_id: int, amount: int) -> bool:
    """
    Take `amount` units off a product's stock.

    Returns False when the product is gone or does not have enough stock.
    The change is only staged; the caller commits or rolls back.
    """
    product = session.get(Product, product_id, with_for_update=True)

    if product is None:
        logger.warning(f"Stock update skipped: product {product_id} not found")
        return False

    if product.stock < amount:
        logger.warning(
            f"Insufficient stock for product {product_id}. "
            f"Available: {product.stock}, Requested: {amount}"
        )
        return False

    product.stock -= amount
    session.add(product)
    session.flush()
    return True
