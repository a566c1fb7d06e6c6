from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from gbp.client import GOOGLE_REVIEWS_LIST_URL, GBPClient
from gbp.errors import AuthenticationRequired, GBPError, InvalidRequest, ProviderError
from gbp.reviews import ANSWERED, SENTIMENTS, build_parent_path, filter_reviews, paginate, to_review_card
from gbp.tokens import token_preview
from .deps import get_access_token, get_http_client, require_access_token

router = APIRouter(prefix="/api", tags=["gbp"])

BUSINESS_TYPES = ("debug", "accounts", "locations", "reviews", "connection-status")

RECONNECT = "Authentication failed. Please reconnect your Google account."
NO_REVIEWS = "No reviews found for this location or reviews access may be restricted"
RESTRICTED_REVIEWS = "Reviews access is restricted for this location"

FEED_PAGE_SIZE = 50
FEED_MAX_REVIEWS = 3000
FEED_MAX_PAGES = FEED_MAX_REVIEWS // FEED_PAGE_SIZE


def _items(data: dict, key: str) -> dict:
    items = data.get(key) or []
    return {key: items, "total": len(items)}


def _safe_json(r: httpx.Response) -> dict:
    try:
        return r.json() or {}
    except ValueError:
        return {}


# =========================
# Operaciones
# =========================

async def debug_token(gbp: GBPClient) -> dict:
    r = await gbp.token_info()
    if r.is_success:
        return {
            "tokenInfo": _safe_json(r),
            "accessToken": token_preview(gbp.access_token),
            "connectionStatus": "connected",
        }

    print("[gbp] token info error:", r.status_code, (r.text or "")[:500])
    return {
        "error": "Failed to get token info",
        "status": r.status_code,
        "details": r.text,
        "connectionStatus": "invalid_token",
    }


async def list_accounts(gbp: GBPClient) -> dict:
    r = await gbp.list_accounts()
    if not r.is_success:
        raise ProviderError(f"Failed to fetch accounts: {r.status_code} - {r.text}", r.status_code)
    return _items(_safe_json(r), "accounts")


async def list_locations(gbp: GBPClient, account_name: Optional[str]) -> dict:
    if not account_name:
        raise InvalidRequest("accountName is required for locations")

    result = await gbp.list_locations(account_name)
    r = result.response
    if not result.ok:
        print("[gbp] all locations endpoints failed:", r.status_code)
        raise ProviderError(f"Failed to fetch locations: {r.status_code} - {r.text}", r.status_code)

    print(f"[gbp] ✅ locations from {result.label} (attempt {result.attempts})")
    return {**_items(_safe_json(r), "locations"), "source": result.label}


def _recover_reviews_status(r: httpx.Response, parent: str, url: str) -> dict:
    """
    Traduce los fallos conocidos de la API v4 de reseñas:
    404 -> sin reseñas, 403 -> restringido (ambos lista vacía), 401 -> reconectar.
    """
    if r.status_code == 404:
        print("[gbp] reviews not found for", parent)
        return {"reviews": [], "total": 0, "message": NO_REVIEWS}

    if r.status_code == 403:
        print("[gbp] reviews access forbidden for", parent)
        return {"reviews": [], "total": 0, "message": RESTRICTED_REVIEWS}

    if r.status_code == 401:
        print("[gbp] reviews authentication failed for", parent)
        raise AuthenticationRequired(RECONNECT)

    raise ProviderError(
        f"Failed to fetch reviews: {r.status_code} - {r.text}",
        r.status_code,
        url=url,
        parentPath=parent,
    )


def _parent_or_400(account_name: Optional[str], location_name: Optional[str]) -> str:
    if not location_name:
        raise InvalidRequest("locationName is required for reviews")
    if not account_name:
        raise InvalidRequest("accountName is required for reviews")
    return build_parent_path(account_name, location_name)


async def list_reviews(
    gbp: GBPClient,
    account_name: Optional[str],
    location_name: Optional[str],
    page_token: Optional[str] = None,
) -> dict:
    parent = _parent_or_400(account_name, location_name)
    url = GOOGLE_REVIEWS_LIST_URL.format(parent=parent)
    print("[gbp] parent path for v4 reviews API:", parent)

    r = await gbp.list_reviews(parent, page_token=page_token)
    if not r.is_success:
        return _recover_reviews_status(r, parent, url)

    data = _safe_json(r)
    out = {**_items(data, "reviews"), "parentPath": parent, "url": url}
    if data.get("nextPageToken"):
        out["nextPageToken"] = data["nextPageToken"]
    return out


async def collect_reviews(gbp: GBPClient, parent: str) -> tuple[list[dict], Optional[str]]:
    """
    Recorre las páginas de reseñas hasta que no hay nextPageToken.
    Corta también si el token se repite o se llega a FEED_MAX_PAGES.
    """
    url = GOOGLE_REVIEWS_LIST_URL.format(parent=parent)
    raw_reviews: list[dict] = []
    message = None
    page_token = None

    for _ in range(FEED_MAX_PAGES):
        r = await gbp.list_reviews(parent, page_token=page_token, page_size=FEED_PAGE_SIZE)
        if not r.is_success:
            # 404/403 en la primera página = sin reseñas; en las siguientes nos quedamos con lo que hay
            message = _recover_reviews_status(r, parent, url)["message"]
            break

        data = _safe_json(r)
        raw_reviews.extend(data.get("reviews") or [])

        next_token = data.get("nextPageToken")
        if not next_token or next_token == page_token or len(raw_reviews) >= FEED_MAX_REVIEWS:
            break
        page_token = next_token
    else:
        print(f"[gbp] ⚠️ review feed {parent}: stopped after {FEED_MAX_PAGES} pages")

    return raw_reviews, message


def _unexpected_error(label: str, error: str, e: Exception) -> JSONResponse:
    print(f"[gbp] ❌ {label} error:", repr(e))
    return JSONResponse(status_code=500, content={"error": error, "details": str(e)})


# =========================
# Rutas
# =========================

@router.get("/business")
async def business(
    request: Request,
    type: Optional[str] = None,
    accountName: Optional[str] = None,
    locationName: Optional[str] = None,
    pageToken: Optional[str] = None,
    http: httpx.AsyncClient = Depends(get_http_client),
):
    try:
        extra = {"connected": False} if type == "connection-status" else {}
        access_token = require_access_token(request, **extra)

        print("[gbp] request type:", type, "account:", accountName, "location:", locationName)
        gbp = GBPClient(http, access_token)

        if type == "debug":
            return await debug_token(gbp)
        if type == "accounts":
            return await list_accounts(gbp)
        if type == "locations":
            return await list_locations(gbp, accountName)
        if type == "reviews":
            return await list_reviews(gbp, accountName, locationName, pageToken)
        if type == "connection-status":
            return {"connected": True}

        raise InvalidRequest(
            f"Invalid type parameter. Use: {', '.join(BUSINESS_TYPES[:-1])}, or {BUSINESS_TYPES[-1]}"
        )
    except GBPError:
        raise
    except Exception as e:
        return _unexpected_error("business API", "Failed to fetch business data", e)


@router.get("/business/review-feed")
async def review_feed(
    accountName: Optional[str] = None,
    locationName: Optional[str] = None,
    search: Optional[str] = None,
    sentiment: str = Query("all"),
    answered: str = Query("all"),
    page: int = Query(1, ge=1),
    pageSize: int = Query(10, ge=1, le=100),
    access_token: str = Depends(get_access_token),
    http: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Reseñas ya mapeadas para el front (rating 1..5, reply...), filtradas y paginadas.
    Recorre todas las páginas de Google.
    """
    try:
        if sentiment not in SENTIMENTS:
            raise InvalidRequest(f"sentiment must be one of: {', '.join(SENTIMENTS)}")
        if answered not in ANSWERED:
            raise InvalidRequest(f"answered must be one of: {', '.join(ANSWERED)}")

        parent = _parent_or_400(accountName, locationName)
        raw_reviews, message = await collect_reviews(GBPClient(http, access_token), parent)

        cards = [to_review_card(rv) for rv in raw_reviews]
        filtered = filter_reviews(cards, search=search, sentiment=sentiment, answered=answered)
        result = paginate(filtered, page=page, page_size=pageSize)
        print(f"[gbp] review feed {parent}: {len(cards)} loaded, {result['total']} after filters")

        out = {
            "reviews": result.pop("items"),
            **result,
            "parentPath": parent,
        }
        if message:
            out["message"] = message
        return out
    except GBPError:
        raise
    except Exception as e:
        return _unexpected_error("review feed", "Failed to fetch reviews", e)


class ReplyPayload(BaseModel):
    reviewId: str
    comment: str
    accountName: str
    locationName: str


@router.put("/google-business-reply")
async def submit_reply(
    payload: ReplyPayload,
    access_token: str = Depends(get_access_token),
    http: httpx.AsyncClient = Depends(get_http_client),
):
    try:
        review_id = payload.reviewId.strip()
        comment = payload.comment.strip()
        if not review_id:
            raise InvalidRequest("reviewId is required")
        if not comment:
            raise InvalidRequest("Reply text cannot be empty")

        parent = _parent_or_400(payload.accountName, payload.locationName)
        print("[gbp] submitting reply for review", review_id, "at", parent)

        r = await GBPClient(http, access_token).update_reply(parent, review_id, comment)
        if r.status_code == 401:
            raise AuthenticationRequired(RECONNECT)
        if not r.is_success:
            raise ProviderError(f"Failed to submit reply: {r.status_code} - {r.text}", r.status_code)

        return {"success": True, "reply": _safe_json(r)}
    except GBPError:
        raise
    except Exception as e:
        return _unexpected_error("reply", "Failed to submit reply", e)
