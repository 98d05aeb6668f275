# app/domain/recommendations.py
from __future__ import annotations

from dataclasses import dataclass

from .errors import ValidationError
from .parsing import div_round_half_up
from .policies import DEFAULT_POLICY, STANDARD_METHOD, ScoringPolicy
from .types import (
    DIMENSION_ORDER,
    PRIORITY_RANK,
    ActionableItem,
    Dimension,
    ImprovementPlan,
    ItemStatus,
    Priority,
    RecommendationItem,
    ScoreImprovements,
    ScoreModel,
)

# dimension -> (message, action items)
RECOMMENDATION_COPY: dict[Dimension, tuple[str, tuple[str, ...]]] = {
    Dimension.payment_history: (
        "Your payment history is holding your score back",
        (
            "Pay rent in full by the due date every month",
            "Set up automatic rent payments",
            "Bring any overdue balance current",
        ),
    ),
    Dimension.credit_score: (
        "Improve your credit score",
        (
            "Keep credit utilization below 30%",
            "Dispute any errors on your credit report",
            "Avoid opening new credit lines before applying",
        ),
    ),
    Dimension.income_stability: (
        "Strengthen your income-to-rent ratio",
        (
            "Upload recent pay stubs or tax returns",
            "Target properties with rent under a third of your income",
            "Add a co-signer for higher-rent applications",
        ),
    ),
    Dimension.rental_history: (
        "Build a stronger rental history",
        (
            "Upload previous lease agreements",
            "Ask past landlords to confirm your tenancy",
        ),
    ),
    Dimension.employment_stability: (
        "Show stable employment",
        (
            "Add your current employer and start date",
            "Upload an employment verification letter",
        ),
    ),
    Dimension.identity_verification: (
        "Finish verifying your identity",
        (
            "Upload a government-issued photo ID",
            "Confirm your email address and phone number",
        ),
    ),
    Dimension.references: (
        "Add references to your profile",
        (
            "Add a reference from a previous landlord",
            "Add a professional reference",
        ),
    ),
    Dimension.application_quality: (
        "Complete your rental application profile",
        (
            "Fill in every section of your profile",
            "Attach supporting documents to your applications",
        ),
    ),
    Dimension.promptness: (
        "Pay rent earlier in the cycle",
        (
            "Schedule payments a few days before the due date",
            "Turn on payment reminders",
        ),
    ),
    Dimension.eviction_history: (
        "Address eviction records",
        (
            "Upload documentation for any resolved eviction case",
            "Provide a clearance letter from the landlord involved",
        ),
    ),
    Dimension.criminal_check: (
        "Complete your background check",
        (
            "Authorize a background check",
            "Provide context documents for any flagged record",
        ),
    ),
}


@dataclass(frozen=True)
class Theme:
    title: str
    description: str
    timeframe: str
    difficulty: str
    dimensions: tuple[Dimension, ...]


THEMES: tuple[Theme, ...] = (
    Theme(
        title="Boost payment reliability",
        description="Show landlords that rent arrives in full and on time.",
        timeframe="3-6 months",
        difficulty="medium",
        dimensions=(Dimension.payment_history, Dimension.promptness),
    ),
    Theme(
        title="Strengthen your financial profile",
        description="Lift the credit and income signals landlords weigh most.",
        timeframe="6-12 months",
        difficulty="hard",
        dimensions=(Dimension.credit_score, Dimension.income_stability, Dimension.employment_stability),
    ),
    Theme(
        title="Build your rental track record",
        description="Document a history of responsible tenancies.",
        timeframe="3-6 months",
        difficulty="medium",
        dimensions=(Dimension.rental_history, Dimension.references, Dimension.eviction_history),
    ),
    Theme(
        title="Complete your verification",
        description="Quick wins: finish the checks and profile sections landlords look for.",
        timeframe="1-2 weeks",
        difficulty="easy",
        dimensions=(Dimension.identity_verification, Dimension.application_quality, Dimension.criminal_check),
    ),
)


@dataclass(frozen=True)
class CatalogItem:
    name: str
    dimension: Dimension
    priority: Priority
    complete_at: int  # sub-score at or above which the item counts as done
    description: str
    estimated_time: str
    link: str


ACTION_CATALOG: tuple[CatalogItem, ...] = (
    CatalogItem(
        "Complete identity verification", Dimension.identity_verification, Priority.high, 90,
        "Verify your identity with a government-issued photo ID.", "5-10 minutes", "/security",
    ),
    CatalogItem(
        "Run a credit check", Dimension.credit_score, Priority.high, 70,
        "Share a soft-pull credit report so landlords see your current standing.", "10 minutes",
        "/tenant/credit-check",
    ),
    CatalogItem(
        "Set up automatic rent payments", Dimension.payment_history, Priority.high, 80,
        "Automatic payments keep every rent payment on time.", "15 minutes", "/tenant/payments",
    ),
    CatalogItem(
        "Verify your income", Dimension.income_stability, Priority.medium, 70,
        "Upload pay stubs or tax returns to confirm your income-to-rent ratio.", "1-2 days", "/profile",
    ),
    CatalogItem(
        "Add employment details", Dimension.employment_stability, Priority.medium, 70,
        "Add your employer, role and start date.", "10 minutes", "/profile",
    ),
    CatalogItem(
        "Add a positive landlord reference", Dimension.references, Priority.medium, 70,
        "Invite a previous landlord to vouch for your tenancy.", "1 week", "/profile",
    ),
    CatalogItem(
        "Upload past lease documents", Dimension.rental_history, Priority.medium, 70,
        "Previous leases prove the length and quality of your rental history.", "30 minutes", "/documents",
    ),
    CatalogItem(
        "Complete your application profile", Dimension.application_quality, Priority.low, 80,
        "Fill in every profile section used by rental applications.", "20 minutes", "/profile",
    ),
    CatalogItem(
        "Pay rent before the due date", Dimension.promptness, Priority.low, 80,
        "Paying a few days early lifts your promptness score.", "Ongoing", "/tenant/payments",
    ),
    CatalogItem(
        "Authorize a background check", Dimension.criminal_check, Priority.low, 80,
        "Consent to a standard background check.", "5 minutes", "/security",
    ),
    CatalogItem(
        "Submit a landlord clearance letter", Dimension.eviction_history, Priority.low, 80,
        "A clearance letter documents that past tenancies ended cleanly.", "1 week", "/documents",
    ),
)


class RecommendationEngine:
    """Turns a ScoreModel into prioritised, explainable improvement advice."""

    def __init__(self, policy: ScoringPolicy = DEFAULT_POLICY) -> None:
        self.policy = policy

    def impact(self, dim: Dimension, current: int, target: int = 100, *, method: str = STANDARD_METHOD) -> int:
        """Overall-score points gained by moving `dim` from `current` to `target` under `method`."""
        gap = target - current
        if gap <= 0:
            return 0
        return div_round_half_up(self.policy.weight(dim, method) * gap, 100)

    def recommendations(self, score: ScoreModel) -> list[RecommendationItem]:
        out: list[RecommendationItem] = []
        for dim in DIMENSION_ORDER:
            value = score.sub_scores.effective(dim, self.policy.neutral_sub_score)
            if value >= self.policy.recommendation_threshold(dim):
                continue
            message, actions = RECOMMENDATION_COPY[dim]
            out.append(
                RecommendationItem(
                    type=self.policy.priority_for(value),
                    dimension=dim,
                    message=message,
                    action_items=actions,
                    impact=self.impact(dim, value, method=score.scoring_method),
                )
            )
        out.sort(key=lambda r: (-r.impact, DIMENSION_ORDER.index(r.dimension)))
        return out

    def improvement_plans(self, recommendations: list[RecommendationItem]) -> list[ImprovementPlan]:
        plans: list[tuple[int, ImprovementPlan]] = []
        for idx, theme in enumerate(THEMES):
            recs = [r for r in recommendations if r.dimension in theme.dimensions]
            if not recs:
                continue
            steps: list[str] = []
            for r in recs:
                steps.extend(s for s in r.action_items if s not in steps)
            plans.append(
                (
                    idx,
                    ImprovementPlan(
                        title=theme.title,
                        description=theme.description,
                        timeframe=theme.timeframe,
                        difficulty=theme.difficulty,
                        steps=tuple(steps),
                        potential_increase=sum(r.impact for r in recs),
                    ),
                )
            )
        plans.sort(key=lambda p: (-p[1].potential_increase, p[0]))
        return [p for _, p in plans]

    def checklist(self, score: ScoreModel) -> list[ActionableItem]:
        """The whole action catalog with each item's status, in catalog order."""
        out: list[ActionableItem] = []
        for item in ACTION_CATALOG:
            value = score.sub_scores.effective(item.dimension, self.policy.neutral_sub_score)
            done = value >= item.complete_at
            impact = 0 if done else self.impact(
                item.dimension, value, target=item.complete_at, method=score.scoring_method
            )
            out.append(
                ActionableItem(
                    name=item.name,
                    status=ItemStatus.complete if done else ItemStatus.incomplete,
                    priority=item.priority,
                    impact=impact,
                    description=item.description,
                    estimated_time=item.estimated_time,
                    link=item.link,
                )
            )
        return out

    def actionable_items(self, score: ScoreModel) -> list[ActionableItem]:
        ranked = [
            (idx, a)
            for idx, a in enumerate(self.checklist(score))
            if a.status == ItemStatus.incomplete and a.impact > 0
        ]
        ranked.sort(key=lambda r: (PRIORITY_RANK[r[1].priority], -r[1].impact, r[0]))
        return [a for _, a in ranked]

    def analyze(self, score: ScoreModel | None) -> ScoreImprovements:
        if score is None:
            raise ValidationError("tenant has no score to analyze")
        recs = self.recommendations(score)
        return ScoreImprovements(
            recommendations=recs,
            improvement_plans=self.improvement_plans(recs),
            actionable_items=self.actionable_items(score),
        )
