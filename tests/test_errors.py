from gbp.errors import AuthenticationRequired, GBPError, InvalidRequest, ProviderError


def test_provider_error_payload_is_message_plus_extra():
    e = ProviderError("Failed to fetch reviews: 503 - down", 503, url="https://x", parentPath="accounts/1/locations/2")

    assert e.status_code == 503
    assert e.to_payload() == {
        "error": "Failed to fetch reviews: 503 - down",
        "url": "https://x",
        "parentPath": "accounts/1/locations/2",
    }
    assert not hasattr(e, "body")


def test_default_status_codes():
    assert GBPError("boom").status_code == 500
    assert AuthenticationRequired("login", connected=False).to_payload() == {"error": "login", "connected": False}
    assert InvalidRequest("bad").status_code == 400
