import razorpay
from razorpay.errors import SignatureVerificationError

from venue_booking.core.config import RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET, PAYMENT_CURRENCY

razorpay_client = razorpay.Client(auth=(RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET))


def create_order(amount: int, receipt: str) -> dict:
    # Razorpay expects the smallest currency subunit
    return razorpay_client.order.create({
        "amount": amount * 100,
        "currency": PAYMENT_CURRENCY,
        "receipt": receipt,
    })


def verify_signature(order_id: str, payment_id: str, signature: str) -> bool:
    try:
        razorpay_client.utility.verify_payment_signature({
            "razorpay_order_id": order_id,
            "razorpay_payment_id": payment_id,
            "razorpay_signature": signature,
        })
    except SignatureVerificationError:
        return False
    return True
