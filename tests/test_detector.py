"""
Tests for application-type detection.
"""

import pytest

from uiauto_web.detector import detect_application_type, glob_to_regex, matches_file_pattern
from uiauto_web.repository import FALLBACK_STRATEGY, StrategyRepository


class TestFilePatterns:
    """Tests for glob-style file name patterns."""

    @pytest.mark.parametrize("name,pattern,expected", [
        ("binary-tree-demo.html", "*tree*", True),
        ("BST_Insert.html", "*bst*", True),
        ("stack.html", "*queue*", False),
        ("a.b.html", "a.b*", True),
        ("axb.html", "a.b*", False),
        ("my-linked-list.html", "*linked*list*", True),
    ])
    def test_matches(self, name, pattern, expected):
        assert matches_file_pattern(name, pattern) is expected

    def test_regex_is_unanchored(self):
        """'tree' without stars should still match inside a longer name."""
        assert glob_to_regex("tree").search("binary-tree-demo.html")


class TestDetectApplicationType:
    """Tests for detect_application_type."""

    def test_file_pattern_wins(self, bst_repo):
        assert detect_application_type(bst_repo, "binary-tree-demo.html") == "binary_search_tree"

    def test_keyword_pass(self, bst_repo):
        """No pattern matches, so the page text decides."""
        html = "<h1>Stack</h1><button>Push</button>"
        assert detect_application_type(bst_repo, "demo-3.html", html) == "stack"

    def test_keyword_is_case_insensitive(self, bst_repo):
        html = "<title>Binary Search Tree visualizer</title>"
        assert detect_application_type(bst_repo, "page.html", html) == "binary_search_tree"

    def test_patterns_before_keywords(self, bst_repo):
        """A file-pattern match on a later strategy beats a keyword match on an earlier one."""
        html = "binary search tree"
        assert detect_application_type(bst_repo, "stack-demo.html", html) == "stack"

    def test_fallback(self, bst_repo):
        assert detect_application_type(bst_repo, "graph.html", "<p>nodes and edges</p>") == FALLBACK_STRATEGY

    def test_result_is_always_a_strategy_key(self, bst_repo):
        for name in ["x.html", "tree.html", "stack.html", ""]:
            assert bst_repo.has_strategy(detect_application_type(bst_repo, name))

    def test_default_repo_only_has_fallback(self):
        repo = StrategyRepository.default()
        assert detect_application_type(repo, "bst.html", "binary search tree") == FALLBACK_STRATEGY

    def test_sample_file_order(self, sample_strategies_path):
        repo = StrategyRepository(str(sample_strategies_path))
        assert detect_application_type(repo, "binary-tree-demo.html") == "binary_search_tree"
        assert detect_application_type(repo, "circular-queue.html") == "stack_queue"
        assert detect_application_type(repo, "bubble.html", "Bubble Sort demo") == "sorting"
