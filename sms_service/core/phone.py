BD_MOBILE_PATTERN = r"^(?:\+?88)?01[3-9]\d{8}$"


def normalize_bangladeshi_phone(phone: str) -> str:
    text = str(phone or "").strip()
    digits = "".join(ch for ch in text if ch.isdigit())
    if not digits:
        raise ValueError("phone must contain digits")

    # Already carries the 88 country prefix: 88 + 11 local digits.
    if digits.startswith("88"):
        if len(digits) != 13:
            raise ValueError("phone must be in format 8801XXXXXXXXX")
        return digits

    # Local number without country prefix: 01 + 9 digits.
    if len(digits) == 11 and digits.startswith("01"):
        return f"88{digits}"

    raise ValueError("phone must be in format 8801XXXXXXXXX")
