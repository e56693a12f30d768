from .builder import PaymentDetails, PaymentError, build_receipt_data, generate_receipt_number, resolve_payment

__all__ = [
    "PaymentDetails",
    "PaymentError",
    "build_receipt_data",
    "generate_receipt_number",
    "resolve_payment",
]
