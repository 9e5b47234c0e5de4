from types import SimpleNamespace
from urllib.parse import unquote

from app.services import message_composer
from app.services.message_composer import build_link, compose, format_amount


def make_order(**overrides):
    fields = dict(
        order_number="EA20260301123456042",
        customer_name="Ana Silva",
        customer_email="ana@example.com",
        total_amount=2300,
        payment_method="cash_on_delivery",
        notes=None,
        shipping_address={
            "street": "Rua da Missão 12",
            "city": "Luanda",
            "state": "Luanda",
            "zip_code": "1000",
            "phone": "244923000111",
        },
        items=[
            SimpleNamespace(name="Keyboard", quantity=1, price=800, line_total=800),
            SimpleNamespace(name="Mouse", quantity=3, price=500, line_total=1500),
        ],
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_format_amount_groups_thousands():
    assert format_amount(800) == "800 Kz"
    assert format_amount(1250000) == "1,250,000 Kz"


def test_compose_lists_items_and_totals():
    message = compose(make_order())

    assert message.startswith("🛒 *New Order from Ana Silva*")
    assert "• Keyboard x1 - 800 Kz = 800 Kz" in message
    assert "• Mouse x3 - 500 Kz = 1,500 Kz" in message
    assert "Order Number: EA20260301123456042" in message
    assert "Total Amount: 2,300 Kz" in message
    assert "Phone: 244923000111" in message
    assert "Rua da Missão 12, Luanda, Luanda 1000" in message
    assert message.endswith("*Order placed via Esperança de Amor E-commerce*")


def test_compose_is_deterministic():
    order = make_order()
    assert compose(order) == compose(order)


def test_notes_section_only_when_present():
    assert "*Notes:*" not in compose(make_order())
    assert "📝 *Notes:*\nLeave at the gate" in compose(make_order(notes="Leave at the gate"))


def test_missing_contact_fields_render_as_na():
    message = compose(make_order(customer_name=None, customer_email=None, shipping_address={}))

    assert "*New Order from Customer*" in message
    assert "Email: N/A" in message
    assert "Phone: N/A" in message


def test_build_link_encodes_like_uri_component():
    link = build_link("Hi *there*\n& bye (ok)!")

    assert link == "https://wa.me/244922706107?text=Hi%20*there*%0A%26%20bye%20(ok)!"


def test_build_link_round_trips_message():
    message = compose(make_order())
    link = build_link(message, phone_number="244900000000")

    prefix = "https://wa.me/244900000000?text="
    assert link.startswith(prefix)
    assert unquote(link[len(prefix):]) == message


def test_build_link_respects_base_url(monkeypatch):
    monkeypatch.setattr(message_composer, "WHATSAPP_BASE_URL", "https://api.whatsapp.com/send/")

    assert build_link("x", "1").startswith("https://api.whatsapp.com/send/1?text=x")
