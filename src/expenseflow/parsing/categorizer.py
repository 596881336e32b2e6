"""Keyword-based expense categorization for Indonesian and English text."""
from typing import Tuple

from ..categories import DEFAULT_CATEGORY

FOOD_KEYWORDS = (
    "makan", "minum", "kopi", "teh", "nasi", "ayam", "soto", "bakso", "mie",
    "gado", "rendang", "sate", "gudeg", "warteg", "padang", "jawa", "sunda",
    "es", "jus", "air", "minuman", "makanan", "sarapan", "lunch", "dinner",
    "snack", "cemilan", "gorengan", "bakar", "rebus", "goreng", "tumis",
)

TRANSPORT_KEYWORDS = (
    "ojek", "gojek", "grab", "taxi", "bus", "busway", "transjakarta", "kereta",
    "krl", "mrt", "bensin", "solar", "pertamax", "parkir", "tol", "motor",
    "mobil", "angkot", "mikrolet", "bajaj", "becak",
)

SHOPPING_KEYWORDS = (
    "beli", "belanja", "shopping", "mall", "toko", "warung", "minimarket",
    "supermarket", "pasar", "baju", "celana", "sepatu", "tas", "dompet",
    "hp", "handphone", "laptop", "elektronik", "kosmetik", "skincare",
)

BILLS_KEYWORDS = (
    "listrik", "air", "pdam", "internet", "wifi", "pulsa", "token", "pln",
    "indihome", "telkom", "xl", "telkomsel", "indosat", "three", "smartfren",
    "tagihan", "bayar", "pembayaran", "cicilan", "kredit", "pinjaman",
)

ENTERTAINMENT_KEYWORDS = (
    "nonton", "bioskop", "cinema", "film", "movie", "game", "gaming", "karaoke",
    "ktv", "billiard", "bowling", "gym", "fitness", "spa", "massage", "pijat",
    "wisata", "liburan", "vacation", "hotel", "penginapan", "tiket",
)

# Checked in this order; the first table with a hit wins, so a message
# mentioning both food and transport is Food.
KEYWORD_TABLES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Food", FOOD_KEYWORDS),
    ("Transport", TRANSPORT_KEYWORDS),
    ("Shopping", SHOPPING_KEYWORDS),
    ("Bills", BILLS_KEYWORDS),
    ("Entertainment", ENTERTAINMENT_KEYWORDS),
)


def categorize(text: str) -> str:
    """Return the first category whose keywords occur as substrings of text."""
    if not text or not isinstance(text, str):
        return DEFAULT_CATEGORY

    lowered = text.lower()
    for category, keywords in KEYWORD_TABLES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_CATEGORY
