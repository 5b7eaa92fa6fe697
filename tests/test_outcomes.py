import json

import pytest
import formula_app.core.outcomes as oc
from formula_app.core.outcomes import FormulaOutcome


# ----------------------------
# Helpers (fake payloads)
# ----------------------------

def valid_rules_payload():
    return {
        "multipliers": {"Fail": 0.0, "Partial": 0.5, "Normal": 1.0, "Bonus": 2.0},
        "thresholds_by_level": {
            "0": {"Fail": 0.4, "Partial": 0.6, "Normal": 0.9},
            "5": {"Fail": 0.1, "Partial": 0.2, "Normal": 0.5},
        },
    }


# ----------------------------
# Parsing / lookups
# ----------------------------

def test_from_dict_parses_and_queries_work():
    rules = oc.OutcomeRules.from_dict(valid_rules_payload())

    assert rules.levels() == (0, 5)
    assert rules.multiplier(FormulaOutcome.BONUS) == 2.0
    assert rules.thresholds_for(0) == (0.4, 0.6, 0.9)

    # levels without a row reuse the highest row below them
    assert rules.tier_for(4) == 0
    assert rules.tier_for(5) == 5
    assert rules.tier_for(50) == 5
    assert rules.outcome_for(3, 0.5) is FormulaOutcome.PARTIAL
    assert rules.outcome_for(7, 0.5) is FormulaOutcome.BONUS


def test_default_rules_match_published_table():
    rules = oc.DEFAULT_RULES
    assert rules.levels() == (0, 1, 2)
    assert rules.thresholds_for(0) == (0.25, 0.50, 0.95)
    assert rules.thresholds_for(1) == (0.25, 0.45, 0.95)
    assert rules.thresholds_for(2) == (0.15, 0.30, 0.85)
    assert rules.thresholds_for(3) == (0.15, 0.30, 0.85)
    assert {o: rules.multiplier(o) for o in FormulaOutcome} == {
        FormulaOutcome.FAIL: 0.0,
        FormulaOutcome.PARTIAL: 0.75,
        FormulaOutcome.NORMAL: 1.0,
        FormulaOutcome.BONUS: 1.1,
    }


def test_to_dict_round_trips():
    rules = oc.OutcomeRules.from_dict(valid_rules_payload())
    again = oc.OutcomeRules.from_dict(rules.to_dict())
    assert again == rules


def test_rules_are_immutable():
    rules = oc.DEFAULT_RULES
    with pytest.raises(TypeError):
        rules.multipliers[FormulaOutcome.BONUS] = 5.0


@pytest.mark.parametrize("chance", [-0.1, 1.0, 1.5])
def test_outcome_for_rejects_out_of_range_chance(chance):
    with pytest.raises(ValueError):
        oc.DEFAULT_RULES.outcome_for(0, chance)


def test_negative_level_raises():
    with pytest.raises(oc.LevelOutOfRange):
        oc.DEFAULT_RULES.thresholds_for(-1)


# ----------------------------
# Validation
# ----------------------------

def test_invalid_type_raises():
    with pytest.raises(oc.InvalidRulesError):
        oc.OutcomeRules.from_dict("not-a-dict")


def test_missing_multiplier_raises():
    data = valid_rules_payload()
    del data["multipliers"]["Bonus"]
    with pytest.raises(oc.InvalidRulesError) as e:
        oc.OutcomeRules.from_dict(data)
    assert "Bonus" in str(e.value)


def test_negative_multiplier_raises():
    data = valid_rules_payload()
    data["multipliers"]["Partial"] = -0.5
    with pytest.raises(oc.InvalidRulesError):
        oc.OutcomeRules.from_dict(data)


def test_missing_level_zero_raises():
    data = valid_rules_payload()
    del data["thresholds_by_level"]["0"]
    with pytest.raises(oc.InvalidRulesError) as e:
        oc.OutcomeRules.from_dict(data)
    assert "level 0" in str(e.value)


def test_missing_threshold_raises():
    data = valid_rules_payload()
    del data["thresholds_by_level"]["5"]["Normal"]
    with pytest.raises(oc.InvalidRulesError):
        oc.OutcomeRules.from_dict(data)


@pytest.mark.parametrize("row", [
    {"Fail": 0.6, "Partial": 0.4, "Normal": 0.9},   # descending
    {"Fail": 0.1, "Partial": 0.4, "Normal": 1.5},   # above 1
    {"Fail": "x", "Partial": 0.4, "Normal": 0.9},   # not a number
])
def test_bad_threshold_rows_raise(row):
    data = valid_rules_payload()
    data["thresholds_by_level"]["5"] = row
    with pytest.raises(oc.InvalidRulesError):
        oc.OutcomeRules.from_dict(data)


def test_negative_level_key_raises():
    data = valid_rules_payload()
    data["thresholds_by_level"]["-1"] = {"Fail": 0.1, "Partial": 0.2, "Normal": 0.3}
    with pytest.raises(oc.InvalidRulesError):
        oc.OutcomeRules.from_dict(data)


# ----------------------------
# IO
# ----------------------------

def test_load_rules_from_explicit_path(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps(valid_rules_payload()), encoding="utf-8")
    rules = oc.load_rules(path)
    assert rules.levels() == (0, 5)


def test_load_rules_missing_file_raises(tmp_path):
    with pytest.raises(RuntimeError):
        oc.load_rules(tmp_path / "missing.json")


def test_load_rules_invalid_json_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(RuntimeError):
        oc.load_rules(path)


def test_default_rules_come_from_packaged_json():
    """DEFAULT_RULES is read from assets/rules/formula_outcomes.json."""
    from formula_app import paths
    assert paths.outcome_rules_json().is_file()
    assert oc.load_rules() == oc.DEFAULT_RULES


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_multiplier_raises(value):
    data = valid_rules_payload()
    data["multipliers"]["Bonus"] = value
    with pytest.raises(oc.InvalidRulesError) as e:
        oc.OutcomeRules.from_dict(data)
    assert "finite" in str(e.value)


@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_non_finite_threshold_raises(value):
    data = valid_rules_payload()
    data["thresholds_by_level"]["5"]["Normal"] = value
    with pytest.raises(oc.InvalidRulesError):
        oc.OutcomeRules.from_dict(data)


def test_load_rules_rejects_nan_literal(tmp_path):
    # json.load accepts the NaN / Infinity literals
    path = tmp_path / "nan.json"
    text = json.dumps(valid_rules_payload()).replace('"Bonus": 2.0', '"Bonus": NaN')
    path.write_text(text, encoding="utf-8")
    with pytest.raises(oc.InvalidRulesError):
        oc.load_rules(path)


def test_duplicate_level_keys_raise():
    data = valid_rules_payload()
    data["thresholds_by_level"]["00"] = {"Fail": 0.1, "Partial": 0.2, "Normal": 0.3}
    with pytest.raises(oc.InvalidRulesError) as e:
        oc.OutcomeRules.from_dict(data)
    assert "Duplicate" in str(e.value)
