"""
Formatting utilities.
"""


def format_currency(amount: int, currency: str = "USD") -> str:
    """
    Format an integer amount as currency.

    Args:
        amount: The amount in whole units.
        currency: Currency code (default USD).

    Returns:
        Formatted currency string.
    """
    symbols = {
        "USD": "$",
        "MXN": "MX$",
        "GTQ": "Q",
        "HNL": "L",
        "NIO": "C$",
        "CRC": "₡",
        "EUR": "€",
    }
    symbol = symbols.get(currency, currency + " ")
    return f"{symbol}{amount:,}"


def format_percent(value: float, decimals: int = 1) -> str:
    """
    Format a fraction as a signed percentage.

    Args:
        value: The fraction (0.07 -> +7.0%).
        decimals: Number of decimal places.

    Returns:
        Formatted percentage string.
    """
    return f"{value * 100:+.{decimals}f}%"
