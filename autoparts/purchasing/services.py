from django.utils import timezone

from autoparts.inventory.documents import DocumentLifecycle
from autoparts.inventory.models import DocumentKind, LedgerTransactionType
from autoparts.parties.models import Supplier
from .models import PurchaseOrder, PurchaseOrderItem


class PurchaseOrderService(DocumentLifecycle):
    """Purchase orders start pending; stock comes in on receive"""
    kind = DocumentKind.PURCHASE_ORDER
    label = 'Purchase order'
    model = PurchaseOrder
    item_model = PurchaseOrderItem
    item_fk = 'purchase_order'
    number_field = 'order_number'
    number_prefix = 'PO'
    date_field = 'order_date'
    party_field = 'supplier'
    party_model = Supplier
    extra_fields = ('type',)

    stock_direction = 0
    transaction_type = LedgerTransactionType.PURCHASE
    # received orders may still be cancelled; stock already received stays
    transitions = {
        'pending': ('received', 'cancelled'),
        'received': ('cancelled',),
    }

    @classmethod
    def on_transition(cls, document, old_status, new_status, user=None):
        if new_status == 'received':
            cls.apply_stock(document, +1, user)
            document.received_at = timezone.now()

    @classmethod
    def receive(cls, document_id, user=None):
        """Add every item to stock and mark the order received. Only pending orders can be received."""
        return cls.transition(document_id, 'received', user)
