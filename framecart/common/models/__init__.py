from .base import Base
from .animal import Animal
from .frame_material import FrameMaterial
from .frame_pricing import FramePricing
from .frame_specification import FrameSpecification
from .order import Order, OrderStatus
from .order_line import OrderLine
from .product import Product
from .user import User

__all__ = [
    "Base",
    "Animal",
    "FrameMaterial",
    "FramePricing",
    "FrameSpecification",
    "Order",
    "OrderStatus",
    "OrderLine",
    "Product",
    "User",
]
