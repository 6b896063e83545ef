"""Order status template: sent to the customer when an admin moves the order."""


class OrderStatusTemplate:
    notification_type = "order_status"

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        status = context.get("status", "")
        tracking_number = context.get("tracking_number")

        headline = "Shipped" if status == "shipped" else "Update"
        body = (
            f"Hi {context.get('first_name') or 'there'},\n\n"
            f"Your order #{order_number} is now {status}.\n"
        )
        if context.get("message"):
            body += f"\n{context['message']}\n"
        if tracking_number:
            body += f"\nTracking number: {tracking_number}\n"
        body += f"\nThank you for shopping with {context.get('store_name', 'Rerendet Coffee')}!"

        return {"subject": f"Order {headline} - #{order_number}", "body": body}
