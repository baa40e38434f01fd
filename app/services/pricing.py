# app/services/pricing.py

FREE_SHIPPING_THRESHOLD = 100
FLAT_SHIPPING_COST = 10
TAX_RATE = 0.10


def calculate_order_totals(subtotal: float) -> dict:
    subtotal = round(subtotal, 2)

    # SHIPPING RULE: strictly above the threshold ships free
    shipping_cost = 0 if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_COST
    tax = round(subtotal * TAX_RATE, 2)
    discount = 0

    total_amount = round(subtotal + shipping_cost + tax - discount, 2)

    return {
        "subtotal": subtotal,
        "shipping_cost": shipping_cost,
        "tax": tax,
        "discount": discount,
        "total_amount": total_amount,
    }
