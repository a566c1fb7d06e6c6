import math
from typing import Optional


STAR_RATINGS = {"ONE": 1, "TWO": 2, "THREE": 3, "FOUR": 4, "FIVE": 5}

SENTIMENTS = ("all", "positive", "negative")
ANSWERED = ("all", "replied", "unreplied")

DEFAULT_PAGE_SIZE = 10


def star_to_int(star: Optional[str]) -> int:
    return STAR_RATINGS.get((star or "").upper(), 0)


def account_path(account_name: str) -> str:
    account_name = account_name.strip()
    return account_name if account_name.startswith("accounts/") else f"accounts/{account_name}"


def build_parent_path(account_name: str, location_name: str) -> str:
    """
    Devuelve siempre accounts/{a}/locations/{l}. Acepta:
    - "accounts/1/locations/2" (se usa tal cual)
    - "locations/2" (se combina con la cuenta)
    - "2" (id suelto)
    """
    location_name = location_name.strip()
    if "accounts/" in location_name and "locations/" in location_name:
        return location_name
    if location_name.startswith("locations/"):
        return f"{account_path(account_name)}/{location_name}"
    return f"{account_path(account_name)}/locations/{location_name}"


def to_review_card(review: dict) -> dict:
    """Review de Google (v4) -> forma plana que pinta el front."""
    reviewer = review.get("reviewer") or {}
    reply = review.get("reviewReply") or None
    return {
        "id": review.get("reviewId"),
        "customerName": reviewer.get("displayName") or "",
        "customerAvatar": reviewer.get("profilePhotoUrl"),
        "reviewDate": review.get("createTime"),
        "rating": star_to_int(review.get("starRating")),
        "comment": review.get("comment") or "",
        "isReplied": bool(reply),
        "replyDate": reply.get("updateTime") if reply else None,
        "reply": (reply.get("comment") or "") if reply else "",
    }


def sentiment_of(card: dict) -> str:
    return "positive" if card["rating"] >= 4 else "negative"


def filter_reviews(
    cards: list[dict],
    search: Optional[str] = None,
    sentiment: str = "all",
    answered: str = "all",
) -> list[dict]:
    results = list(cards)

    term = (search or "").strip().lower()
    if term:
        results = [
            c for c in results
            if term in c["customerName"].lower() or term in c["comment"].lower()
        ]

    if sentiment != "all":
        results = [c for c in results if sentiment_of(c) == sentiment]

    if answered != "all":
        want_replied = answered == "replied"
        results = [c for c in results if c["isReplied"] == want_replied]

    return results


def paginate(items: list, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> dict:
    total = len(items)
    start = (page - 1) * page_size
    return {
        "items": items[start:start + page_size],
        "total": total,
        "page": page,
        "pageSize": page_size,
        "totalPages": math.ceil(total / page_size) if total else 0,
    }
