"""Unit tests for raw-content URL resolution."""

import pytest

from shared.repository import (
    ConfigurationMissing,
    InvalidReference,
    resolve_raw_url,
    repository_reference,
)

REFERENCE = "https://github.com/octocat/Hello-World.git"


class TestResolveRawUrl:
    """Tests for resolve_raw_url."""

    def test_resolves_readme(self):
        url = resolve_raw_url(REFERENCE, "main", "README.md")
        assert url == "https://raw.githubusercontent.com/octocat/Hello-World/main/README.md"

    def test_nested_path_is_kept(self):
        url = resolve_raw_url(REFERENCE, "dev", "src/pkg/module.py")
        assert url == "https://raw.githubusercontent.com/octocat/Hello-World/dev/src/pkg/module.py"

    def test_deterministic(self):
        assert resolve_raw_url(REFERENCE, "main", "a.txt") == resolve_raw_url(REFERENCE, "main", "a.txt")

    def test_strips_four_character_suffix(self):
        url = resolve_raw_url("https://example.com/owner/repoXXXX", "main", "f")
        assert url == "https://raw.githubusercontent.com/owner/repo/main/f"

    def test_extra_segments_are_ignored(self):
        url = resolve_raw_url("https://github.com/octocat/Hello-World.git/tree/x", "main", "f")
        assert url == "https://raw.githubusercontent.com/octocat/Hello-World/main/f"

    def test_custom_host(self):
        url = resolve_raw_url(REFERENCE, "main", "f", host="http://127.0.0.1:8000/")
        assert url == "http://127.0.0.1:8000/octocat/Hello-World/main/f"

    @pytest.mark.parametrize("reference,branch", [
        ("", "main"),
        (REFERENCE, ""),
        ("", ""),
    ])
    def test_missing_configuration(self, reference, branch):
        with pytest.raises(ConfigurationMissing) as exc_info:
            resolve_raw_url(reference, branch, "README.md")
        assert exc_info.value.message == "the gitRef or branch is not initialized"

    @pytest.mark.parametrize("reference", [
        "octocat/Hello-World",
        "https://github.com/octocat",
        "a/b/c/d",
    ])
    def test_too_few_segments(self, reference):
        with pytest.raises(InvalidReference) as exc_info:
            resolve_raw_url(reference, "main", "README.md")
        assert exc_info.value.message == "The github ref is invalid"

    def test_name_shorter_than_suffix(self):
        with pytest.raises(InvalidReference):
            resolve_raw_url("https://github.com/octocat/.git", "main", "README.md")


class TestRepositoryReference:
    """Tests for repository_reference."""

    def test_owner_and_name(self):
        assert repository_reference("octocat/Hello-World") == REFERENCE

    def test_round_trips_through_resolver(self):
        reference = repository_reference("octocat/Hello-World")
        url = resolve_raw_url(reference, "main", "README.md")
        assert url.endswith("/octocat/Hello-World/main/README.md")

    def test_custom_github_url(self):
        assert repository_reference("o/n", github_url="http://git.local/") == "http://git.local/o/n.git"

    @pytest.mark.parametrize("path", ["", "octocat", "octocat/", "/Hello-World", "a/b/c"])
    def test_rejects_malformed_paths(self, path):
        with pytest.raises(InvalidReference):
            repository_reference(path)
