"""Order confirmation template: sent to the customer once an order is placed.

The body ends with a plain-text invoice so the customer has a full record of
what was charged.
"""


def _money(currency, amount) -> str:
    return f"{currency} {float(amount or 0):,.2f}"


class OrderConfirmationTemplate:
    notification_type = "order_confirmation"

    @staticmethod
    def render_invoice(context: dict) -> str:
        currency = context.get("currency", "KES")
        lines = [
            f"INVOICE #{context.get('order_number', 'N/A')}",
            f"Date: {context.get('placed_on', '')}",
            "",
        ]
        for item in context.get("items", []):
            lines.append(
                f"  {item['name']} ({item['size']}) x{item['quantity']} @ "
                f"{_money(currency, item['unit_price'])} = {_money(currency, item['line_total'])}"
            )
        lines.extend(
            [
                "",
                f"  Subtotal: {_money(currency, context.get('subtotal'))}",
                f"  Shipping: {_money(currency, context.get('shipping_cost'))}",
                f"  Tax:      {_money(currency, context.get('tax'))}",
                f"  Total:    {_money(currency, context.get('total'))}",
                "",
                f"Payment method: {str(context.get('payment_method', '')).upper()}"
                f" ({context.get('payment_status', 'pending')})",
            ]
        )
        return "\n".join(lines)

    @classmethod
    def render(cls, context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        store_name = context.get("store_name", "Rerendet Coffee")
        address = context.get("shipping_address", {})
        return {
            "subject": f"Order Confirmation - #{order_number}",
            "body": (
                f"Hi {context.get('first_name') or 'there'},\n\n"
                f"Thank you for your order! Order #{order_number} has been received and confirmed.\n\n"
                f"Shipping to: {address.get('street', '')}, {address.get('city', '')}, "
                f"{address.get('county', '')}, {address.get('country', '')}\n\n"
                f"{cls.render_invoice(context)}\n\n"
                f"Track your order at {context.get('dashboard_url', '')}\n\n"
                f"Thank you for shopping with {store_name}!"
            ),
        }
