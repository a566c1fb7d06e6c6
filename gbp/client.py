from typing import Optional
from urllib.parse import urlencode

import httpx

from .fallback import Candidate, ProbeResult, first_success


GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_TOKENINFO_URL = "https://www.googleapis.com/oauth2/v1/tokeninfo"

GOOGLE_ACCOUNTS_URL = "https://mybusinessaccountmanagement.googleapis.com/v1/accounts"
GOOGLE_BUSINESS_INFO_LOCATIONS_URL = "https://mybusinessbusinessinformation.googleapis.com/v1/{account}/locations"
GOOGLE_ACCOUNT_MGMT_LOCATIONS_URL = "https://mybusinessaccountmanagement.googleapis.com/v1/{account}/locations"

# Reviews (GBP v4, legacy)
GOOGLE_REVIEWS_LIST_URL = "https://mybusiness.googleapis.com/v4/{parent}/reviews"
GOOGLE_REVIEW_REPLY_URL = "https://mybusiness.googleapis.com/v4/{parent}/reviews/{review_id}/reply"

MINIMAL_READ_MASK = "name,title"


def build_auth_url(client_id: str, redirect_uri: str, scopes: str) -> str:
    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": scopes,
        "access_type": "offline",
        "prompt": "consent",  # para conseguir refresh_token siempre
        "include_granted_scopes": "true",
    }
    return GOOGLE_AUTH_URL + "?" + urlencode(params)


async def exchange_code(
    http: httpx.AsyncClient,
    *,
    code: str,
    client_id: str,
    client_secret: str,
    redirect_uri: str,
) -> httpx.Response:
    # redirect_uri tiene que ser exactamente el mismo que se usó en /auth
    data = {
        "client_id": client_id,
        "client_secret": client_secret,
        "code": code,
        "grant_type": "authorization_code",
        "redirect_uri": redirect_uri,
    }
    return await http.post(
        GOOGLE_TOKEN_URL,
        data=data,
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )


class GBPClient:
    """Llamadas a las APIs de Google Business Profile con un access_token ya validado."""

    def __init__(self, http: httpx.AsyncClient, access_token: str):
        self.http = http
        self.access_token = access_token

    @property
    def headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

    async def get(self, url: str, params: Optional[dict] = None) -> httpx.Response:
        r = await self.http.get(url, headers=self.headers, params=params or None)
        print("🟣 GOOGLE GET:", r.status_code, url, "params=", params)
        return r

    async def token_info(self) -> httpx.Response:
        return await self.http.get(GOOGLE_TOKENINFO_URL, params={"access_token": self.access_token})

    async def list_accounts(self) -> httpx.Response:
        return await self.get(GOOGLE_ACCOUNTS_URL)

    def location_candidates(self, account_name: str) -> list[Candidate]:
        business_info_url = GOOGLE_BUSINESS_INFO_LOCATIONS_URL.format(account=account_name)
        account_mgmt_url = GOOGLE_ACCOUNT_MGMT_LOCATIONS_URL.format(account=account_name)
        return [
            Candidate("business-information", lambda: self.get(business_info_url)),
            Candidate(
                "business-information (readMask)",
                lambda: self.get(business_info_url, params={"readMask": MINIMAL_READ_MASK}),
            ),
            Candidate("account-management", lambda: self.get(account_mgmt_url)),
        ]

    async def list_locations(self, account_name: str) -> ProbeResult:
        return await first_success(self.location_candidates(account_name))

    async def list_reviews(
        self,
        parent: str,
        page_token: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> httpx.Response:
        params = {}
        if page_size:
            params["pageSize"] = page_size
        if page_token:
            params["pageToken"] = page_token
        return await self.get(GOOGLE_REVIEWS_LIST_URL.format(parent=parent), params=params)

    async def update_reply(self, parent: str, review_id: str, comment: str) -> httpx.Response:
        url = GOOGLE_REVIEW_REPLY_URL.format(parent=parent, review_id=review_id)
        r = await self.http.put(url, headers=self.headers, json={"comment": comment})
        print("🟣 GOOGLE PUT:", r.status_code, url)
        return r
