"""Low stock alert template: internal notification to the store admin."""


class LowStockAlertTemplate:
    notification_type = "low_stock_alert"

    @staticmethod
    def render(context: dict) -> dict:
        name = context.get("name", "N/A")
        return {
            "subject": f"[Low Stock] {name}",
            "body": (
                f"Low stock alert for {name}\n\n"
                f"Product ID: {context.get('product_id', 'N/A')}\n"
                f"Current Stock: {context.get('current_stock', 0)}\n"
                f"Alert Threshold: {context.get('low_stock_threshold', 0)}\n\n"
                "Please restock soon."
            ),
        }
