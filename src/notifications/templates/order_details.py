"""Order details template, sent once an order has been paid.

Orders containing physical products get a notice about shipping and a
"Mark as Delivered" link the buyer follows when the package arrives.
"""

from notifications.types import NotificationType


class OrderDetailsTemplate:
    notification_type = NotificationType.ORDER_DETAILS.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        lines = context.get("lines", [])
        amount = context.get("amount", "0.00")
        discount = context.get("discount_percentage") or 0
        delivery_url = context.get("delivery_url")

        text_lines = [f"- {line['name']} x{line['quantity']} @ ${line['price']}" for line in lines]
        html_rows = "".join(
            f"<tr><td>{line['name']}</td><td>{line['quantity']}</td><td>${line['price']}</td></tr>" for line in lines
        )

        body = f"Thanks for your purchase! Here are the details of order #{order_id}:\n\n"
        body += "\n".join(text_lines)
        if discount:
            body += f"\n\nDiscount applied: {discount}%"
        body += f"\nTotal: ${amount}\n"

        html = (
            f"<h2>Order #{order_id}</h2>"
            "<table><tr><th>Product</th><th>Qty</th><th>Price</th></tr>"
            f"{html_rows}</table>"
            f"<p><strong>Total: ${amount}</strong></p>"
        )

        if delivery_url:
            body += (
                "\nYour order includes physical products that will be shipped to you. "
                f"Once it arrives, confirm the delivery here:\n{delivery_url}\n"
            )
            html += (
                "<p>Your order includes physical products that will be shipped to you.</p>"
                f'<p><a href="{delivery_url}">Mark as Delivered</a></p>'
            )

        return {"subject": f"GameVault order #{order_id}", "body": body, "html": html}
