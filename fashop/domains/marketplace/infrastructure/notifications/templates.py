"""
SMS message templates (French, plain GSM text).
"""

from decimal import Decimal
from typing import Any

from fashop.domains.marketplace.application.ports import NotificationTemplate


def format_price(price: Decimal | int | float) -> str:
    """Short GNF amount for SMS: ``1.5M GNF``, ``150k GNF``, ``900 GNF``."""
    value = Decimal(str(price))
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M GNF"
    if value >= 1000:
        return f"{value / 1000:.0f}k GNF"
    return f"{value:.0f} GNF"


def _new_order(data: dict[str, Any]) -> str:
    lines = "\n".join(f"- {item['name']} x{item['quantity']} ({item['sku']})" for item in data.get("items", []))
    order_number = data["order_number"]
    return (
        f"FASHOP - Nouvelle commande {order_number}\n"
        f"Bonjour {data.get('supplier_name', '')},\n"
        f"{lines}\n"
        f"Montant: {format_price(data.get('amount', 0))}\n"
        f"Livraison: {data.get('delivery_city') or 'Conakry'}\n"
        f"Repondez OUI {order_number} pour confirmer ou NON {order_number} si indisponible."
    )


def _order_confirmed(data: dict[str, Any]) -> str:
    name = data.get("customer_name")
    greeting = f"Bonjour {name}, votre" if name else "Votre"
    return (
        f"FASHOP - {greeting} commande {data['order_number']} "
        f"({format_price(data.get('total', 0))}) est confirmee. "
        "Livraison sous 24-48h. Merci de votre confiance!"
    )


def _low_stock(data: dict[str, Any]) -> str:
    return (
        f"FASHOP - Stock faible\n"
        f"Produit: {data['product_name']} ({data.get('sku', '')})\n"
        f"Stock actuel: {data['stock']} / minimum: {data['min_stock']}\n"
        "Pensez a reapprovisionner."
    )


_RENDERERS = {
    NotificationTemplate.NEW_ORDER: _new_order,
    NotificationTemplate.ORDER_CONFIRMED: _order_confirmed,
    NotificationTemplate.LOW_STOCK: _low_stock,
}


def render_message(template_type: NotificationTemplate, data: dict[str, Any]) -> str:
    """Render ``template_type`` with ``data`` into the SMS body."""
    return _RENDERERS[template_type](data)
