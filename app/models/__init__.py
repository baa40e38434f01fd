from app.models.user import User
from app.models.product import Product
from app.models.cart import Cart, CartItem
from app.models.order import Order
from app.models.order_item import OrderItem

# add ALL models here
