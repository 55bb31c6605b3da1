# ORM models

from bizhub.models.company import Company
from bizhub.models.product import Product
from bizhub.models.account import Account
from bizhub.models.order import Order, OrderItem
from bizhub.models.order_flow import OrderFlow
from bizhub.models.sales_journal import SalesJournalEntry

__all__ = [
    "Company",
    "Product",
    "Account",
    "Order",
    "OrderItem",
    "OrderFlow",
    "SalesJournalEntry",
]
