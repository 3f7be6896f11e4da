from typing import Optional

from booking_quotes.domain.pricing.models import Coupon
from booking_quotes.domain.pricing.money import clamp_percent, percent_of_minor, to_minor


def compute_discount_minor(coupon: Optional[Coupon], pre_discount_total_minor: int) -> int:
    if coupon is None or pre_discount_total_minor <= 0:
        return 0
    if coupon.kind == "percent":
        discount = percent_of_minor(pre_discount_total_minor, clamp_percent(coupon.magnitude))
    else:
        discount = to_minor(coupon.magnitude)
    return -min(max(discount, 0), pre_discount_total_minor)


def discount_label(coupon: Coupon) -> str:
    if coupon.code:
        return f"Discount ({coupon.code})"
    return "Discount"
