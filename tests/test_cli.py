"""
Tests for the non-browser CLI commands.
"""

from uiauto_web.cli import _resolve_timing_options, main


class TestValidate:
    def test_valid_file(self, sample_strategies_path, capsys):
        assert main(["validate", "--strategies", str(sample_strategies_path)]) == 0
        out = capsys.readouterr().out
        assert "Strategy file is valid" in out
        assert "Strategies: 5" in out

    def test_invalid_file(self, write_strategies, capsys):
        path = write_strategies({"element_selectors": {}})
        assert main(["validate", "-c", str(path)]) == 2
        assert "invalid" in capsys.readouterr().err


class TestListStrategies:
    def test_lists_strategies_and_roles(self, sample_strategies_path, capsys):
        assert main(["list-strategies", "-c", str(sample_strategies_path)]) == 0
        out = capsys.readouterr().out
        assert "binary_search_tree" in out
        assert "patterns: *bst*, *tree*, *binary-search*" in out
        assert "insert_button" in out

    def test_missing_file_lists_fallback(self, tmp_path, capsys):
        assert main(["list-strategies", "-c", str(tmp_path / "none.json")]) == 0
        assert "general_interactive" in capsys.readouterr().out


class TestDetect:
    def test_detect_by_name_and_content(self, sample_strategies_path, tmp_path, capsys):
        html_dir = tmp_path / "html"
        html_dir.mkdir()
        (html_dir / "demo.html").write_text("<h2>Merge Sort</h2>", encoding="utf-8")
        code = main([
            "detect", "-c", str(sample_strategies_path), "--html-dir", str(html_dir),
            "binary-tree-demo.html", "demo.html", "graph.html",
        ])
        assert code == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert lines[-3:] == [
            "binary-tree-demo.html\tbinary_search_tree",
            "demo.html\tsorting",
            "graph.html\tgeneral_interactive",
        ]


class TestTimingOptions:
    def test_presets_exclusive(self, sample_strategies_path, capsys):
        code = main(["run", "-c", str(sample_strategies_path), "--ci", "--fast"])
        assert code == 1
        assert "mutually exclusive" in capsys.readouterr().err

    def test_timeout_overrides(self):
        class Args:
            ci = False
            fast = True
            slow = False
            timeout = 5000

        preset, overrides = _resolve_timing_options(Args())
        assert preset == "fast"
        assert overrides == {"default_timeout": 5000, "navigation_timeout": 5000}
