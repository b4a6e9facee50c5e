import base64
import secrets

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from snapserve.db.session import Base
from snapserve.models.mixins import TimestampMixin


class Table(TimestampMixin, Base):
    __tablename__ = "restaurant_tables"

    id = Column(Integer, primary_key=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    table_number = Column(String(50), nullable=False)
    qr_code = Column(String(255), nullable=True, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("restaurant_id", "table_number", name="unique_restaurant_table"),
    )

    restaurant = relationship("Restaurant", back_populates="tables")
    orders = relationship("Order", back_populates="table")

    def display_name(self) -> str:
        return f"Table {self.table_number}"

    def generate_qr_code(self) -> str:
        """
        Assign a fresh QR code payload to the table.

        Returns:
            The base64 encoded code

        Raises:
            ValueError: If the table is not attached to a restaurant
        """
        if self.restaurant_id is None:
            raise ValueError("Cannot generate QR code without restaurant assignment")

        payload = f"{self.restaurant_id}-{self.table_number}-{secrets.token_hex(6)}"
        self.qr_code = base64.b64encode(payload.encode("utf-8")).decode("ascii")
        return self.qr_code

    def active_orders(self):
        return [order for order in self.orders if order.is_active()]

    def has_active_orders(self) -> bool:
        return len(self.active_orders()) > 0
