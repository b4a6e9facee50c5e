from decimal import Decimal
import enum

from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey, Enum
from sqlalchemy.orm import relationship

from snapserve.db.session import Base
from snapserve.models.mixins import TimestampMixin


class OrderStatus(enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    preparing = "preparing"
    ready = "ready"
    served = "served"
    cancelled = "cancelled"


class PaymentStatus(enum.Enum):
    pending = "pending"
    paid = "paid"
    failed = "failed"
    refunded = "refunded"


class Order(TimestampMixin, Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(100), nullable=False, unique=True)
    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.pending)
    total_amount = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    table_id = Column(Integer, ForeignKey("restaurant_tables.id"), nullable=True)
    payment_status = Column(Enum(PaymentStatus), nullable=True, default=PaymentStatus.pending)

    customer = relationship("User")
    restaurant = relationship("Restaurant", back_populates="orders")
    table = relationship("Table", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    def calculate_total(self) -> Decimal:
        total = sum(
            (Decimal(item.price) * item.quantity for item in self.items),
            Decimal("0"),
        )
        return total.quantize(Decimal("0.01"))

    def update_total_amount(self) -> None:
        self.total_amount = self.calculate_total()

    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.paid

    def is_table_order(self) -> bool:
        return self.table_id is not None or self.table is not None

    def is_active(self) -> bool:
        """Orders that are neither served nor cancelled still need attention."""
        return self.status not in (OrderStatus.served, OrderStatus.cancelled)


class OrderItem(TimestampMixin, Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Numeric(10, 2), nullable=False)
    notes = Column(Text, nullable=True)

    order = relationship("Order", back_populates="items")
    menu_item = relationship("MenuItem")

    def line_total(self) -> Decimal:
        return (Decimal(self.price) * self.quantity).quantize(Decimal("0.01"))
