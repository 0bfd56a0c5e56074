"""Tests for relpr.core.config module."""

from __future__ import annotations

import pytest

from relpr.core.config import (
    DEFAULT_API_URL,
    Credentials,
    RunConfig,
    build_run_config,
    load_credentials,
)
from relpr.core.model import BranchPair, RepositoryRef
from relpr.core.result import Err, Ok


def _config(**overrides: object) -> Ok[RunConfig] | Err:
    values: dict[str, object] = {
        "owner": "acme",
        "base": "main",
        "head": "release",
        "repositories": ["svc-a", "svc-b"],
        "reviewers": ["alice"],
    }
    values.update(overrides)
    return build_run_config(**values)  # type: ignore[arg-type]


class TestLoadCredentials:
    def test_token_from_environment(self) -> None:
        result = load_credentials({"GITHUB_TOKEN": "ghp_abc"})
        assert result == Ok(Credentials(token="ghp_abc", api_url=DEFAULT_API_URL))

    def test_missing_token(self) -> None:
        result = load_credentials({})
        assert isinstance(result, Err)
        assert result.error.kind == "credentials"
        assert "GITHUB_TOKEN" in result.error.message

    def test_blank_token_is_missing(self) -> None:
        assert isinstance(load_credentials({"GITHUB_TOKEN": "   "}), Err)

    def test_api_url_override_drops_trailing_slash(self) -> None:
        result = load_credentials(
            {"GITHUB_TOKEN": "t", "GITHUB_API_URL": "https://ghe.example.com/api/v3/"}
        )
        assert isinstance(result, Ok)
        assert result.value.api_url == "https://ghe.example.com/api/v3"

    def test_repr_hides_token(self) -> None:
        assert "secret" not in repr(Credentials(token="secret"))


class TestBuildRunConfig:
    def test_valid(self) -> None:
        result = _config()
        assert isinstance(result, Ok)
        config = result.value
        assert config.owner == "acme"
        assert config.branches == BranchPair(base="main", head="release")
        assert config.repositories == (
            RepositoryRef(owner="acme", name="svc-a"),
            RepositoryRef(owner="acme", name="svc-b"),
        )
        assert config.reviewers == ("alice",)
        assert config.base == "main"
        assert config.head == "release"

    def test_duplicates_keep_first_occurrence(self) -> None:
        result = _config(repositories=["svc-b", "svc-a", "svc-b"], reviewers=["bob", "bob"])
        assert isinstance(result, Ok)
        assert result.value.repository_names == ["svc-b", "svc-a"]
        assert result.value.reviewers == ("bob",)

    def test_empty_reviewers_allowed(self) -> None:
        result = _config(reviewers=[])
        assert isinstance(result, Ok)
        assert result.value.reviewers == ()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"owner": ""},
            {"base": ""},
            {"head": " "},
            {"repositories": []},
            {"repositories": ["", "  "]},
            {"base": "main", "head": "main"},
            {"repositories": ["acme/svc-a"]},
        ],
    )
    def test_invalid_arguments(self, overrides: dict[str, object]) -> None:
        result = _config(**overrides)
        assert isinstance(result, Err)
        assert result.error.kind == "arguments"

    def test_frozen(self) -> None:
        result = _config()
        assert isinstance(result, Ok)
        with pytest.raises(AttributeError):
            result.value.owner = "other"  # type: ignore[misc]


class TestRepositoryRef:
    def test_equal_by_value(self) -> None:
        assert RepositoryRef(owner="acme", name="svc-a") == RepositoryRef("acme", "svc-a")
        assert RepositoryRef("acme", "svc-a") != RepositoryRef("other", "svc-a")
