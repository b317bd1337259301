"""Tests for pagewright.routing.paths — ordering and wildcard helpers."""

import pytest

from pagewright.routing.paths import (
    compare_paths,
    join_url,
    path_segments,
    path_sort_key,
    segment_count,
    specificity,
    to_platform_pattern,
    with_leading_slash,
)


class TestComparePaths:
    def test_fewer_segments_first(self) -> None:
        assert compare_paths("/a", "/a/b") < 0
        assert compare_paths("/a/b", "/a") > 0

    def test_ties_broken_lexicographically(self) -> None:
        assert compare_paths("/b", "/c") < 0
        assert compare_paths("/c", "/b") > 0

    def test_equal_paths(self) -> None:
        assert compare_paths("/same", "/same") == 0

    def test_depth_beats_alphabet(self) -> None:
        assert compare_paths("/z", "/a/a") < 0

    def test_sort_key_agrees_with_comparator(self) -> None:
        paths = ["/robots.txt", "/images/a.png", "/a", "/images/*", "/favicon.ico"]
        assert sorted(paths, key=path_sort_key) == [
            "/a",
            "/favicon.ico",
            "/robots.txt",
            "/images/*",
            "/images/a.png",
        ]

    def test_deterministic(self) -> None:
        paths = ["/c/d", "/a", "/b/c", "/b"]
        assert sorted(paths, key=path_sort_key) == sorted(reversed(paths), key=path_sort_key)


class TestSpecificity:
    def test_wildcard_not_counted(self) -> None:
        assert specificity("/api/**") == specificity("/api")
        assert specificity("/api/*") == 2

    def test_deeper_is_more_specific(self) -> None:
        assert specificity("/api/v1/**") > specificity("/api/**")

    def test_segment_count_counts_leading_empty(self) -> None:
        assert segment_count("/a/b") == 3


class TestWildcards:
    @pytest.mark.parametrize(
        ("pattern", "expected"),
        [
            ("/api/**", "/api/*"),
            ("/**", "/*"),
            ("/about", "/about"),
            ("/api/*", "/api/*"),
        ],
    )
    def test_to_platform_pattern(self, pattern: str, expected: str) -> None:
        assert to_platform_pattern(pattern) == expected


class TestUrlHelpers:
    def test_join_url(self) -> None:
        assert join_url("/images", "*") == "/images/*"
        assert join_url("/images/", "/*") == "/images/*"
        assert join_url("", "a") == "a"

    def test_path_segments(self) -> None:
        assert path_segments("/images/icons/") == ("images", "icons")
        assert path_segments("/") == ()
        assert path_segments(None) == ()

    def test_with_leading_slash(self) -> None:
        assert with_leading_slash("robots.txt") == "/robots.txt"
        assert with_leading_slash("/robots.txt") == "/robots.txt"
