"""Tests for the rule-based classifier."""
import math

import pytest

from sleepcoach import InvalidObservation, Observation, classify
from sleepcoach import advice as adv


class TestSleepMessage:
    """First matching branch wins for (quality, hours)."""

    @pytest.mark.parametrize("quality,hours,expected", [
        (2, 7.0, adv.SLEEP_POOR_QUALITY),
        (1, 10.0, adv.SLEEP_POOR_QUALITY),
        (2, 6.9, adv.SLEEP_TOO_SHORT),
        (1, 0.0, adv.SLEEP_TOO_SHORT),
        (4, 5.9, adv.SLEEP_GOOD_BUT_SHORT),
        (5, 0.0, adv.SLEEP_GOOD_BUT_SHORT),
        (4, 7.0, adv.SLEEP_EXCELLENT),
        (5, 9.0, adv.SLEEP_EXCELLENT),
        (4, 6.0, adv.SLEEP_BALANCED),
        (5, 6.5, adv.SLEEP_BALANCED),
        (3, 4.0, adv.SLEEP_BALANCED),
        (3, 8.0, adv.SLEEP_BALANCED),
    ])
    def test_branches(self, quality, hours, expected):
        assert adv.sleep_message(quality, hours) == expected


class TestConcentrationMessage:

    @pytest.mark.parametrize("concentration,hours,expected", [
        (2, 5.9, adv.CONC_SLEEP_DEFICIT),
        (1, 0.0, adv.CONC_SLEEP_DEFICIT),
        (2, 7.0, adv.CONC_LOW_DESPITE_SLEEP),
        (1, 12.0, adv.CONC_LOW_DESPITE_SLEEP),
        (4, 7.0, adv.CONC_IDEAL),
        (5, 8.5, adv.CONC_IDEAL),
        (4, 5.9, adv.CONC_HIGH_BUT_SHORT),
        (2, 6.0, adv.CONC_STANDARD),
        (2, 6.9, adv.CONC_STANDARD),
        (4, 6.5, adv.CONC_STANDARD),
        (3, 3.0, adv.CONC_STANDARD),
        (3, 9.0, adv.CONC_STANDARD),
    ])
    def test_branches(self, concentration, hours, expected):
        assert adv.concentration_message(concentration, hours) == expected


class TestOverallAdvice:

    def test_total_four_short_sleep_uses_duration_branch(self):
        assert adv.overall_advice(2, 2, 5.9) == adv.OVERALL_DURATION_FIRST

    def test_total_four_enough_sleep_reviews_routines(self):
        assert adv.overall_advice(1, 3, 6.0) == adv.OVERALL_REVIEW_ROUTINES

    def test_total_two(self):
        assert adv.overall_advice(1, 1, 8.0) == adv.OVERALL_REVIEW_ROUTINES

    @pytest.mark.parametrize("quality,concentration", [(2, 3), (3, 3), (4, 3), (5, 2)])
    def test_balanced_range(self, quality, concentration):
        assert adv.overall_advice(quality, concentration, 7.0) == adv.OVERALL_BALANCED

    @pytest.mark.parametrize("quality,concentration", [(4, 4), (3, 5), (5, 5)])
    def test_total_above_seven(self, quality, concentration):
        assert adv.overall_advice(quality, concentration, 3.0) == adv.OVERALL_VERY_GOOD


class TestPriorityAndCategory:

    @pytest.mark.parametrize("q,c,h,expected", [
        (2, 5, 9.0, "high"),
        (5, 1, 9.0, "high"),
        (5, 5, 5.9, "high"),
        (4, 4, 7.0, "low"),
        (5, 5, 24.0, "low"),
        (3, 4, 7.0, "medium"),
        (4, 4, 6.5, "medium"),
    ])
    def test_priority(self, q, c, h, expected):
        assert adv.priority_for(q, c, h) == expected

    @pytest.mark.parametrize("q,c,h,expected", [
        (2, 1, 8.0, "sleep"),
        (4, 1, 5.0, "sleep"),
        (3, 2, 7.0, "concentration"),
        (5, 1, 6.0, "concentration"),
        (3, 3, 6.0, "overall"),
        (5, 5, 9.0, "overall"),
    ])
    def test_category(self, q, c, h, expected):
        assert adv.category_for(q, c, h) == expected


class TestClassify:

    def test_poor_quality_despite_seven_hours(self, make_obs):
        res = classify(make_obs(2, 3, 7))
        assert adv.SLEEP_POOR_QUALITY in res.message
        assert adv.SLEEP_TOO_SHORT not in res.message
        assert res.priority == "high"
        assert res.category == "sleep"

    def test_excellent_and_ideal(self, make_obs):
        res = classify(make_obs(4, 4, 7))
        assert adv.SLEEP_EXCELLENT in res.message
        assert adv.CONC_IDEAL in res.message
        assert res.priority == "low"
        assert res.category == "overall"

    def test_message_layout(self, make_obs):
        res = classify(make_obs(4, 4, 7))
        assert res.message == (
            f"{adv.OVERALL_VERY_GOOD}\n\n[About sleep]\n{adv.SLEEP_EXCELLENT}"
            f"\n\n[About concentration]\n{adv.CONC_IDEAL}"
        )

    def test_total_score_boundaries(self, make_obs):
        assert classify(make_obs(2, 2, 8)).message.startswith(adv.OVERALL_REVIEW_ROUTINES)
        assert classify(make_obs(4, 4, 8)).message.startswith(adv.OVERALL_VERY_GOOD)
        assert classify(make_obs(3, 4, 8)).message.startswith(adv.OVERALL_BALANCED)

    def test_deterministic(self, make_obs):
        a = classify(make_obs(3, 2, 6.5))
        b = classify(make_obs(3, 2, 6.5))
        assert a == b
        assert a.model_dump_json() == b.model_dump_json()

    def test_every_valid_input_yields_enumerated_tags(self):
        for q in range(1, 6):
            for c in range(1, 6):
                for h in (0, 5.5, 6, 6.5, 7, 7.5, 24):
                    res = classify({"sleep_quality_score": q, "concentration_score": c,
                                    "sleep_duration_hours": h})
                    assert res.message
                    assert res.category in {"sleep", "concentration", "overall"}
                    assert res.priority in {"high", "medium", "low"}

    def test_accepts_wire_names(self):
        res = classify({"sleeping_score": 4, "con_score": 4, "sleeping_time": 7})
        assert res.priority == "low"

    def test_accepts_integer_hours(self):
        obs = Observation.from_payload({"sleeping_score": 3, "con_score": 3, "sleeping_time": 7})
        assert obs.sleep_duration_hours == 7.0


class TestValidation:

    @pytest.mark.parametrize("field,value", [
        ("sleep_quality_score", 0),
        ("sleep_quality_score", 6),
        ("concentration_score", -1),
        ("concentration_score", 2.5),
        ("sleep_quality_score", "3"),
        ("sleep_quality_score", True),
        ("sleep_duration_hours", -0.1),
        ("sleep_duration_hours", 24.01),
        ("sleep_duration_hours", math.nan),
        ("sleep_duration_hours", math.inf),
        ("sleep_duration_hours", None),
    ])
    def test_out_of_bounds_is_rejected(self, field, value):
        payload = {"sleep_quality_score": 3, "concentration_score": 3, "sleep_duration_hours": 7}
        payload[field] = value
        with pytest.raises(InvalidObservation) as exc:
            classify(payload)
        assert [e["field"] for e in exc.value.errors] == [field]

    def test_missing_field(self):
        with pytest.raises(InvalidObservation):
            classify({"sleep_quality_score": 3, "concentration_score": 3})

    def test_non_mapping(self):
        with pytest.raises(InvalidObservation) as exc:
            classify([3, 3, 7])
        assert exc.value.errors[0]["field"] == "observation"

    def test_constructed_instance_is_rechecked(self):
        obs = Observation.model_construct(sleep_quality_score=9, concentration_score=3, sleep_duration_hours=7.0)
        with pytest.raises(InvalidObservation) as exc:
            classify(obs)
        assert exc.value.errors == [
            {"field": "sleep_quality_score", "value": 9, "reason": "must be between 1 and 5"}
        ]

    def test_error_is_a_value_error(self):
        assert issubclass(InvalidObservation, ValueError)

    def test_integral_float_score_is_accepted(self):
        obs = Observation.from_payload({"sleeping_score": 3.0, "con_score": 4, "sleeping_time": 7})
        assert obs.sleep_quality_score == 3
        assert isinstance(obs.sleep_quality_score, int)

    def test_edges_are_valid(self):
        assert classify({"sleep_quality_score": 1, "concentration_score": 5, "sleep_duration_hours": 0}).message
        assert classify({"sleep_quality_score": 5, "concentration_score": 1, "sleep_duration_hours": 24}).message
