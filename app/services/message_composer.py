# app/services/message_composer.py
"""
Wiadomosc WhatsApp dla zamowienia.

`compose` czyta tylko pola zamowienia (snapshot) i ustawienia sklepu
(STORE_NAME, CURRENCY_LABEL), bez zegara i bez zapytan do bazy. Tekst jest
zapisywany na zamowieniu przy tworzeniu, resend zwraca zapisany tekst.
"""
from urllib.parse import quote

from app.utils.settings import CURRENCY_LABEL, STORE_NAME, WHATSAPP_BASE_URL, WHATSAPP_PHONE_NUMBER

# to samo co encodeURIComponent
_URI_SAFE = "-_.!~*'()"


def format_amount(amount: int) -> str:
    return f"{amount:,} {CURRENCY_LABEL}"


def _or_na(value) -> str:
    return value if value else "N/A"


def compose(order) -> str:
    customer = order.customer_name or "Customer"
    address = order.shipping_address or {}

    items_list = "\n".join(
        f"• {item.name} x{item.quantity} - {format_amount(item.price)} = {format_amount(item.line_total)}"
        for item in order.items
    )

    lines = [
        f"🛒 *New Order from {customer}*",
        "",
        "📋 *Order Items:*",
        items_list,
        "",
        "💰 *Order Summary:*",
        f"Order Number: {order.order_number}",
        f"Total Amount: {format_amount(order.total_amount)}",
        f"Payment Method: {order.payment_method}",
        "",
        "📞 *Contact Information:*",
        f"Name: {_or_na(order.customer_name)}",
        f"Email: {_or_na(order.customer_email)}",
        f"Phone: {_or_na(address.get('phone'))}",
        "",
        "📍 *Delivery Address:*",
        f"{_or_na(address.get('street'))}, {_or_na(address.get('city'))}, "
        f"{_or_na(address.get('state'))} {_or_na(address.get('zip_code'))}",
    ]
    if order.notes:
        lines += ["", "📝 *Notes:*", order.notes]
    lines += ["", "---", f"*Order placed via {STORE_NAME} E-commerce*"]

    return "\n".join(lines)


def build_link(message: str, phone_number: str | None = None) -> str:
    number = phone_number or WHATSAPP_PHONE_NUMBER
    return f"{WHATSAPP_BASE_URL.rstrip('/')}/{number}?text={quote(message, safe=_URI_SAFE)}"
