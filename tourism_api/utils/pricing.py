from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")

# Numeric(10, 2) columns hold at most 8 integer digits
MAX_AMOUNT = Decimal("100000000")


def calculate_booking_price(event, number_of_people: int) -> Decimal:
    # Event price is per person
    total = Decimal(str(event.price)) * number_of_people
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_decimal(value) -> Decimal:
    """Parse a form value as a 2-place decimal. Raises ValueError on junk
    or on amounts too large to store."""
    try:
        number = Decimal(str(value).strip())
    except ArithmeticError:
        raise ValueError(f"not a number: {value!r}")
    if not number.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    try:
        number = number.quantize(CENTS, rounding=ROUND_HALF_UP)
    except ArithmeticError:
        raise ValueError(f"number out of range: {value!r}")
    if abs(number) >= MAX_AMOUNT:
        raise ValueError(f"number out of range: {value!r}")
    return number
