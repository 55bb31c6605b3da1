"""Enumerations shared by models, schemas and services"""

from enum import Enum


class Role(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    ACCOUNTANT = "accountant"
    SALESMAN = "salesman"


class OrderType(str, Enum):
    INVOICE = "invoice"
    QUOTATION = "quotation"
    PROFORMA = "proforma"
    CREDIT = "credit"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"
    CREDIT = "credit"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class Priority(str, Enum):
    NORMAL = "normal"
    URGENT = "urgent"
    RUSH = "rush"
    EMERGENCY = "emergency"


class ReviewStatus(str, Enum):
    """Authoritative order state (review axis)"""
    PENDING_REVIEW = "PENDING_REVIEW"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class SimpleStatus(str, Enum):
    """Derived order status shown to non-reviewer roles"""
    PENDING = "pending"
    PROCESSING = "processing"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class ProductStatus(str, Enum):
    ACTIVE = "active"
    OUT_OF_STOCK = "out_of_stock"


class CompanyPaymentStatus(str, Enum):
    ACTIVE = "active"
    WARNING = "warning"
    OVER_LIMIT = "over_limit"


class JournalEntryType(str, Enum):
    SALE = "sale"
    REVERSAL = "reversal"
