from decimal import ROUND_HALF_UP, Decimal

from django import forms

from .integrations import RegistrationRequest

MIN_AMOUNT = Decimal("1")
MAX_AMOUNT = Decimal("10000")
AMOUNT_MESSAGE = "Amount must be between ₹1 and ₹10000"

REQUIRED_FIELDS = ("amount", "purpose", "buyer_name", "buyer_email", "buyer_phone")

REGISTRATION_TYPES = [("solo", "Solo"), ("group", "Group")]


class PaymentRequestForm(forms.Form):
    """Registration fields forwarded to the payment gateway.

    Fields are declared in the order they are checked, so the first entry of
    ``errors`` is the one reported to the caller.
    """

    buyer_email = forms.RegexField(
        regex=r"^[^\s@]+@[^\s@]+\.[^\s@]+$",
        max_length=254,
        error_messages={"invalid": "Invalid email format", "max_length": "Invalid email format"},
    )
    buyer_phone = forms.RegexField(
        regex=r"^[0-9]{10}$",
        error_messages={"invalid": "Phone number must be 10 digits"},
    )
    amount = forms.DecimalField(
        min_value=MIN_AMOUNT,
        max_value=MAX_AMOUNT,
        error_messages={"invalid": AMOUNT_MESSAGE, "min_value": AMOUNT_MESSAGE, "max_value": AMOUNT_MESSAGE},
    )
    purpose = forms.CharField(
        max_length=255,
        error_messages={"max_length": "Purpose must be at most 255 characters"},
    )
    buyer_name = forms.CharField(
        max_length=100,
        error_messages={"max_length": "Name must be at most 100 characters"},
    )
    redirect_url = forms.URLField(
        required=False,
        assume_scheme="https",
        max_length=2000,
        error_messages={"invalid": "Invalid redirect_url", "max_length": "Invalid redirect_url"},
    )
    registration_type = forms.ChoiceField(
        choices=REGISTRATION_TYPES,
        required=False,
        error_messages={"invalid_choice": "registration_type must be 'solo' or 'group'"},
    )
    participant_details = forms.JSONField(required=False)

    def clean_amount(self):
        return self.cleaned_data["amount"].quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def clean_participant_details(self):
        details = self.cleaned_data.get("participant_details")
        if details in (None, ""):
            return None
        if not isinstance(details, dict) or not all(
            isinstance(k, str) and isinstance(v, (str, int, float)) and not isinstance(v, bool)
            for k, v in details.items()
        ):
            raise forms.ValidationError("participant_details must map names to text or numbers")
        return details

    def first_error(self) -> str:
        for messages in self.errors.values():
            return messages[0]
        return ""

    def to_registration(self) -> RegistrationRequest:
        data = self.cleaned_data
        return RegistrationRequest(
            amount=data["amount"],
            purpose=data["purpose"],
            buyer_name=data["buyer_name"],
            buyer_email=data["buyer_email"],
            buyer_phone=data["buyer_phone"],
            redirect_url=data.get("redirect_url") or None,
            registration_type=data.get("registration_type") or None,
            participant_details=data.get("participant_details"),
        )
