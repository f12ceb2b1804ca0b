"""
Tests for strategy file loading, validation and step parsing.
"""

import pytest

from uiauto_web.exceptions import ConfigError
from uiauto_web.repository import FALLBACK_STRATEGY, StrategyRepository
from uiauto_web.steps import (ClickStep, HandleAlertStep, InputSequenceStep,
                              InputStep, ScreenshotStep, parse_step)


class TestStrictLoad:
    """Tests for StrategyRepository(path)."""

    def test_loads_sample_file(self, sample_strategies_path):
        """The shipped sample file should be valid."""
        repo = StrategyRepository(str(sample_strategies_path))
        assert repo.list_strategies()[0] == "binary_search_tree"
        assert FALLBACK_STRATEGY in repo.list_strategies()
        assert repo.selectors_for("insert_button")[0] == "#insert-btn"
        assert repo.is_fallback is False

    def test_preserves_file_order(self, write_strategies):
        """Strategy order must follow the file, not alphabetical order."""
        path = write_strategies({"test_strategies": {"zeta": {}, "alpha": {}, "mid": {}}})
        repo = StrategyRepository(str(path))
        assert repo.list_strategies() == ["zeta", "alpha", "mid", FALLBACK_STRATEGY]

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            StrategyRepository(str(tmp_path / "nope.json"))
        assert "not found" in str(exc_info.value)

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{ not json", encoding="utf-8")
        with pytest.raises(ConfigError) as exc_info:
            StrategyRepository(str(path))
        assert "Invalid JSON" in str(exc_info.value)

    def test_unknown_action_rejected(self, write_strategies):
        """Schema validation should reject steps with unknown actions."""
        path = write_strategies({
            "test_strategies": {
                "s": {"test_sequences": [{"description": "d", "steps": [{"action": "drag"}]}]}
            }
        })
        with pytest.raises(ConfigError) as exc_info:
            StrategyRepository(str(path))
        assert "schema validation failed" in str(exc_info.value)

    def test_click_without_target_rejected(self, write_strategies):
        path = write_strategies({
            "test_strategies": {
                "s": {"test_sequences": [{"description": "d", "steps": [{"action": "click"}]}]}
            }
        })
        with pytest.raises(ConfigError):
            StrategyRepository(str(path))

    def test_yaml_file_supported(self, tmp_path):
        path = tmp_path / "strategies.yaml"
        path.write_text(
            "test_strategies:\n"
            "  heap:\n"
            "    description: Heap demo\n"
            "    file_patterns: ['*heap*']\n"
            "element_selectors:\n"
            "  insert_button: ['#push']\n",
            encoding="utf-8",
        )
        repo = StrategyRepository(str(path))
        assert repo.get_strategy("heap").description == "Heap demo"
        assert repo.selectors_for("insert_button") == ["#push"]

    def test_settings_exposed(self, sample_strategies_path):
        repo = StrategyRepository(str(sample_strategies_path))
        settings = repo.settings
        assert settings["timing_settings"]["after_click_wait"] == 500
        assert settings["error_handling"]["capture_error_screenshots"] is True


class TestLenientLoad:
    """Tests for StrategyRepository.load fallback behaviour."""

    def test_missing_file_falls_back(self, tmp_path):
        """Should substitute the default strategy instead of raising."""
        repo = StrategyRepository.load(str(tmp_path / "missing.json"))
        assert repo.is_fallback is True
        assert repo.list_strategies() == [FALLBACK_STRATEGY]
        assert repo.get_strategy(FALLBACK_STRATEGY).test_sequences == ()

    def test_invalid_file_falls_back(self, tmp_path, caplog):
        path = tmp_path / "broken.json"
        path.write_text("[1, 2", encoding="utf-8")
        with caplog.at_level("ERROR", logger="uiauto_web"):
            repo = StrategyRepository.load(str(path))
        assert repo.is_fallback is True
        assert "Could not load strategy file" in caplog.text

    def test_valid_file_logged(self, sample_strategies_path, caplog):
        with caplog.at_level("INFO", logger="uiauto_web"):
            repo = StrategyRepository.load(str(sample_strategies_path))
        assert repo.is_fallback is False
        assert "Loaded strategy file" in caplog.text

    def test_unknown_strategy_raises(self):
        repo = StrategyRepository.default()
        with pytest.raises(ConfigError):
            repo.get_strategy("graph")


class TestParseStep:
    """Tests for parse_step typed records."""

    def test_each_action_maps_to_its_type(self):
        assert parse_step({"action": "input", "target": "t", "value": 5}) == InputStep(target="t", value=5)
        assert parse_step({"action": "click", "target": "b"}) == ClickStep(target="b")
        assert parse_step({"action": "screenshot"}) == ScreenshotStep(name=None)
        assert parse_step({"action": "handle_alert", "screenshot": "x"}) == HandleAlertStep(screenshot="x")

    def test_input_sequence_fields(self):
        step = parse_step({
            "action": "input_sequence",
            "target": "number_input",
            "values": [1, 2],
            "click_after_each": "insert_button",
            "screenshot_after_each": True,
            "name_pattern": "ins_{index}_{value}",
        })
        assert isinstance(step, InputSequenceStep)
        assert step.values == (1, 2)
        assert step.shot_name(2, 1) == "ins_1_2"

    def test_default_sequence_shot_name(self):
        step = parse_step({"action": "input_sequence", "target": "t", "values": ["a"]})
        assert step.shot_name("a", 0) == "sequence_0"

    def test_unknown_action(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_step({"action": "hover", "target": "x"}, where="s[0]")
        assert "unknown action 'hover'" in str(exc_info.value)

    def test_missing_value(self):
        with pytest.raises(ConfigError):
            parse_step({"action": "input", "target": "x"})

    def test_empty_input_value_is_kept(self):
        """An empty string clears the field; it is a valid value."""
        assert parse_step({"action": "input", "target": "t", "value": ""}) == InputStep(target="t", value="")


class TestEmptyInputValue:
    def test_file_with_empty_value_loads(self, write_strategies):
        path = write_strategies({
            "test_strategies": {
                "stack": {
                    "file_patterns": ["*stack*"],
                    "test_sequences": [
                        {"description": "clear", "steps": [{"action": "input", "target": "text_input", "value": ""}]}
                    ],
                }
            }
        })
        repo = StrategyRepository.load(str(path))
        assert repo.is_fallback is False
        assert repo.list_strategies() == ["stack", FALLBACK_STRATEGY]
        step = repo.get_strategy("stack").test_sequences[0].steps[0]
        assert step == InputStep(target="text_input", value="")
