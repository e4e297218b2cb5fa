import pytest

from supa_admin.app.domain.models.user import BulkActionResult, User, UserChanges, UserFilters


def test_merge_empty_partial_is_identity() -> None:
    filters = UserFilters(search="ana", role="admin", page=2, limit=5)

    assert filters.merge({}) is filters
    assert filters.merge(None) is filters
    assert filters.merge(UserFilters()) is filters


def test_merge_is_shallow_overwrite() -> None:
    filters = UserFilters(search="ana", role="admin", page=2, limit=5)

    merged = filters.merge({"role": "user", "page": 1})

    assert merged == UserFilters(search="ana", role="user", page=1, limit=5)
    assert filters.role == "admin"


def test_merge_rejects_unknown_keys() -> None:
    with pytest.raises(ValueError):
        UserFilters().merge({"sort": "name"})


def test_effective_page_and_limit_fallbacks() -> None:
    assert UserFilters(page=0, limit=-3).effective_page == 1
    assert UserFilters(page=0, limit=-3).effective_limit == 10
    assert UserFilters(page=3, limit=25).effective_limit == 25


def test_with_status_keeps_identity() -> None:
    user = User(id="u1", name="Ana", email="a@demo.com", status="inactive")

    updated = user.with_status("active")

    assert updated.id == "u1"
    assert updated.status == "active"
    assert user.status == "inactive"


def test_user_changes_is_empty() -> None:
    assert UserChanges().is_empty()
    assert not UserChanges(role="admin").is_empty()


def test_bulk_action_result_counts() -> None:
    result = BulkActionResult(
        outcomes=[
            {"user_id": "a", "result": "success"},
            {"user_id": "b", "result": "error", "code": "HTTP_ERROR"},
            {"user_id": "c", "result": "success"},
        ]
    )

    assert (result.total, result.succeeded, result.failed) == (3, 2, 1)
    assert result.succeeded_ids == ["a", "c"]
