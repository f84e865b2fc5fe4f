# payments/signals.py

from django.dispatch import Signal

# kwargs: settlement_payment, credit_payment, fully_settled
installment_recorded = Signal()
