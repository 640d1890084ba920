from .tenant import Tenant, SubscriptionPlanEnum
from .menu import MenuCategory, MenuItem
from .table import RestaurantTable
from .order import PosOrder, OrderStatusEnum, OrderTypeEnum, OrderModeEnum
from .order_history import OrderHistory
from .staff import StaffUser, StaffRoleEnum
from .shift import Shift, ShiftStatusEnum
from .payment import Payment, PaymentMethodEnum, PaymentStatusEnum
from .feedback import Feedback

__all__ = [
    "Tenant",
    "SubscriptionPlanEnum",
    "MenuCategory",
    "MenuItem",
    "RestaurantTable",
    "PosOrder",
    "OrderStatusEnum",
    "OrderTypeEnum",
    "OrderModeEnum",
    "OrderHistory",
    "StaffUser",
    "StaffRoleEnum",
    "Shift",
    "ShiftStatusEnum",
    "Payment",
    "PaymentMethodEnum",
    "PaymentStatusEnum",
    "Feedback",
]
