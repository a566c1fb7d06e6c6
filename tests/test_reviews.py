import pytest

from gbp.reviews import (
    build_parent_path,
    filter_reviews,
    paginate,
    star_to_int,
    to_review_card,
)


@pytest.mark.parametrize(
    "star, expected",
    [("ONE", 1), ("TWO", 2), ("THREE", 3), ("FOUR", 4), ("FIVE", 5), ("five", 5)],
)
def test_star_to_int(star, expected):
    assert star_to_int(star) == expected


@pytest.mark.parametrize("star", ["STAR_RATING_UNSPECIFIED", "", None, "6"])
def test_star_to_int_unknown_is_zero(star):
    assert star_to_int(star) == 0


@pytest.mark.parametrize(
    "account, location, expected",
    [
        ("accounts/1", "accounts/1/locations/2", "accounts/1/locations/2"),
        ("accounts/9", "accounts/1/locations/2", "accounts/1/locations/2"),
        ("accounts/1", "locations/2", "accounts/1/locations/2"),
        ("1", "locations/2", "accounts/1/locations/2"),
        ("accounts/1", "2", "accounts/1/locations/2"),
        ("1", "2", "accounts/1/locations/2"),
    ],
)
def test_build_parent_path(account, location, expected):
    assert build_parent_path(account, location) == expected


def test_review_card_with_reply():
    card = to_review_card({
        "reviewId": "r1",
        "reviewer": {"displayName": "Ana", "profilePhotoUrl": "https://img/ana.png"},
        "starRating": "FOUR",
        "comment": "Muy bien",
        "createTime": "2024-05-01T10:00:00Z",
        "reviewReply": {"comment": "Gracias", "updateTime": "2024-05-02T10:00:00Z"},
    })
    assert card == {
        "id": "r1",
        "customerName": "Ana",
        "customerAvatar": "https://img/ana.png",
        "reviewDate": "2024-05-01T10:00:00Z",
        "rating": 4,
        "comment": "Muy bien",
        "isReplied": True,
        "replyDate": "2024-05-02T10:00:00Z",
        "reply": "Gracias",
    }


def test_review_card_without_comment_or_reply():
    card = to_review_card({"reviewId": "r2", "reviewer": {"displayName": "Luis"}, "starRating": "ONE"})
    assert card["comment"] == ""
    assert card["isReplied"] is False
    assert card["replyDate"] is None
    assert card["reply"] == ""
    assert card["rating"] == 1


@pytest.fixture
def cards():
    return [
        {"id": "a", "customerName": "Ana Pérez", "comment": "Great coffee", "rating": 5, "isReplied": True},
        {"id": "b", "customerName": "Bob", "comment": "Cold food", "rating": 2, "isReplied": False},
        {"id": "c", "customerName": "Carla", "comment": "ok", "rating": 4, "isReplied": False},
        {"id": "d", "customerName": "Dan", "comment": "", "rating": 0, "isReplied": True},
    ]


def test_filter_by_search_matches_name_or_comment(cards):
    assert [c["id"] for c in filter_reviews(cards, search="COFFEE")] == ["a"]
    assert [c["id"] for c in filter_reviews(cards, search="bob")] == ["b"]


def test_filter_by_sentiment(cards):
    assert [c["id"] for c in filter_reviews(cards, sentiment="positive")] == ["a", "c"]
    assert [c["id"] for c in filter_reviews(cards, sentiment="negative")] == ["b", "d"]


def test_filter_by_reply_status(cards):
    assert [c["id"] for c in filter_reviews(cards, answered="replied")] == ["a", "d"]
    assert [c["id"] for c in filter_reviews(cards, answered="unreplied")] == ["b", "c"]


def test_filters_combine(cards):
    result = filter_reviews(cards, search="o", sentiment="positive", answered="unreplied")
    assert [c["id"] for c in result] == ["c"]


def test_filter_all_returns_copy(cards):
    result = filter_reviews(cards)
    assert result == cards
    assert result is not cards


def test_paginate():
    items = list(range(23))
    page = paginate(items, page=3, page_size=10)
    assert page["items"] == [20, 21, 22]
    assert page["total"] == 23
    assert page["totalPages"] == 3


def test_paginate_out_of_range_and_empty():
    assert paginate(list(range(5)), page=4, page_size=10)["items"] == []
    empty = paginate([], page=1)
    assert empty["totalPages"] == 0
    assert empty["items"] == []
