"""
Order flow model - one row per workflow step, so every order keeps its
full lifecycle
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from bizhub.db.base import Base


class OrderFlow(Base):
    """Order lifecycle record"""
    __tablename__ = "order_flows"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)

    # created / updated / status_changed / payment_received / items_replaced
    flow_type = Column(String(30), nullable=False, comment="Flow type")
    from_status = Column(String(20), comment="Review status before")
    to_status = Column(String(20), comment="Review status after")
    description = Column(String(200), comment="Description")
    meta_data = Column(JSON, comment="Extra data")
    notes = Column(Text, comment="Notes")

    operator_id = Column(Integer, nullable=False, comment="Actor id")
    operated_at = Column(DateTime, default=datetime.utcnow, comment="Operated at")

    order = relationship("Order", back_populates="flows")

    def __repr__(self):
        return f"<OrderFlow {self.order_id}: {self.flow_type}>"

    @property
    def type_display(self) -> str:
        type_map = {
            "created": "Created",
            "updated": "Updated",
            "status_changed": "Status changed",
            "payment_received": "Payment received",
            "items_replaced": "Items replaced",
        }
        return type_map.get(self.flow_type, self.flow_type)
