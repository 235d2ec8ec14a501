"""UPI deep link and QR code for paying a single monthly fee."""
from dataclasses import dataclass
from urllib.parse import quote, urlencode

from feeledger.errors import ValidationError
from feeledger.models.fees import PAID
from feeledger.services.calendar import month_name

QR_IMAGE_URL = "https://api.qrserver.com/v1/create-qr-code/"


@dataclass
class PaymentLink:
    upi_link: str
    qr_code_url: str
    description: str
    amount: int


def build_payment_link(student, fee, upi_id, payee_name) -> PaymentLink:
    if fee.status == PAID:
        raise ValidationError("Fee is already paid")

    description = f"{student.name} - {month_name(fee.month).capitalize()} {fee.year} Fee"
    upi_link = "upi://pay?" + urlencode(
        {"pa": upi_id, "pn": payee_name, "am": fee.amount, "cu": "INR", "tn": description},
        quote_via=quote,
        safe="@",
    )
    qr_code_url = QR_IMAGE_URL + "?" + urlencode({"size": "200x200", "data": upi_link}, quote_via=quote)
    return PaymentLink(upi_link=upi_link, qr_code_url=qr_code_url, description=description, amount=fee.amount)
