from .tenancy import Store, Location
from .staff import Staff, SessionToken
from .tills import Till
from .transactions import Transaction, TransactionItem
from .orders import Order, OrderItem
from .tenders import Tender, DeviceTenderAssignment
from .customers import Customer
from .expenses import Expense

__all__ = [
    'Store', 'Location',
    'Staff', 'SessionToken',
    'Till',
    'Transaction', 'TransactionItem',
    'Order', 'OrderItem',
    'Tender', 'DeviceTenderAssignment',
    'Customer',
    'Expense',
]
