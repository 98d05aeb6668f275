# tests/test_domain_scoring.py
import pytest

from app.domain.errors import ValidationError
from app.domain.policies import ScoringPolicy
from app.domain.scoring import (
    compute_overall,
    credit_score_to_sub_score,
    default_score_model,
    derive_score_model,
    income_ratio_to_sub_score,
)
from app.domain.types import DIMENSION_ORDER, Dimension, SubScores


def test_all_max_is_100_and_all_zero_is_0():
    assert compute_overall(SubScores.uniform(100)) == 100
    assert compute_overall(SubScores.uniform(0)) == 0


def test_missing_sub_scores_count_as_neutral():
    assert compute_overall(SubScores()) == 50
    partial = SubScores(payment_history=100)
    # 20% of the weight moves from 50 to 100
    assert compute_overall(partial) == 60


def test_overall_is_weighted_by_the_table():
    s = SubScores.uniform(0).merged({Dimension.credit_score: 100, Dimension.references: 100})
    assert compute_overall(s) == 20


@pytest.mark.parametrize("dim", DIMENSION_ORDER)
def test_raising_one_sub_score_never_lowers_overall(dim):
    base = SubScores.uniform(37)
    prev = compute_overall(base)
    for v in range(38, 101, 7):
        cur = compute_overall(base.merged({dim: v}))
        assert cur >= prev
        prev = cur


def test_half_points_round_up():
    # 5% * 10 = 0.5 -> 1
    s = SubScores.uniform(0).merged({Dimension.promptness: 10})
    assert compute_overall(s) == 1


def test_out_of_range_sub_score_rejected():
    with pytest.raises(ValidationError):
        SubScores(credit_score=101)
    with pytest.raises(ValidationError):
        SubScores(payment_history=-1)
    with pytest.raises(ValidationError):
        SubScores(promptness=True)


def test_default_model_is_neutral():
    m = default_score_model(7)
    assert m.tenant_id == 7
    assert m.overall == 50
    assert m.active is True
    assert m.scoring_method == "default"
    assert all(m.sub_scores.get(d) == 50 for d in DIMENSION_ORDER)


def test_alternate_policy_changes_overall():
    weights = {d: 0 for d in DIMENSION_ORDER}
    weights[Dimension.payment_history] = 100
    policy = ScoringPolicy(score_weights=weights)

    m = derive_score_model(1, SubScores(payment_history=90, credit_score=0), policy=policy)
    assert m.overall == 90


def test_policy_weights_must_sum_to_100():
    weights = {d: 10 for d in DIMENSION_ORDER}
    with pytest.raises(ValidationError):
        ScoringPolicy(score_weights=weights)


def test_scoring_method_selects_the_weight_table():
    s = SubScores(credit_score=100, payment_history=0)

    assert compute_overall(s) == 48
    assert compute_overall(s, method="basic") == 70
    assert compute_overall(s, method="credit-only") == 100
    assert derive_score_model(1, s, scoring_method="credit-only").overall == 100


def test_every_method_spans_0_to_100():
    policy = ScoringPolicy()
    for method in policy.scoring_methods:
        assert compute_overall(SubScores.uniform(0), policy, method) == 0
        assert compute_overall(SubScores.uniform(100), policy, method) == 100


def test_unknown_scoring_method_rejected():
    with pytest.raises(ValidationError):
        derive_score_model(1, SubScores(), scoring_method="whatever")


def test_credit_score_maps_300_900_onto_0_100():
    assert credit_score_to_sub_score(300) == 0
    assert credit_score_to_sub_score(600) == 50
    assert credit_score_to_sub_score(680) == 63
    assert credit_score_to_sub_score(900) == 100
    # clamped
    assert credit_score_to_sub_score(250) == 0
    assert credit_score_to_sub_score(1000) == 100


def test_income_ratio_bands():
    rent = 100000
    assert income_ratio_to_sub_score(350000, rent) == 100
    assert income_ratio_to_sub_score(300000, rent) == 90
    assert income_ratio_to_sub_score(299999, rent) == 75
    assert income_ratio_to_sub_score(200000, rent) == 60
    assert income_ratio_to_sub_score(150000, rent) == 40
    assert income_ratio_to_sub_score(149999, rent) == 37
    assert income_ratio_to_sub_score(100000, rent) == 25
    assert income_ratio_to_sub_score(None, rent) is None
    assert income_ratio_to_sub_score(300000, 0) is None


def test_explicit_none_resets_a_sub_score():
    s = SubScores.uniform(80).merged({Dimension.references: None})
    assert s.references is None
    assert s.credit_score == 80
