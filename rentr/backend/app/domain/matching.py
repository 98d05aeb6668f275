# app/domain/matching.py
from __future__ import annotations

from typing import Callable, Iterable

from .address import same_place
from .errors import ValidationError
from .parsing import div_round_half_up, normalize_tag
from .policies import DEFAULT_POLICY, ScoringPolicy
from .types import (
    MatchBreakdown,
    MatchDimension,
    PropertyMatch,
    PropertySnapshot,
    ScoreModel,
    TenantPreferences,
)


def format_money(minor_units: int) -> str:
    dollars, cents = divmod(int(minor_units), 100)
    if cents:
        return f"${dollars:,}.{cents:02d}"
    return f"${dollars:,}"


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


class CompatibilityEngine:
    """
    Scores how well each property fits a tenant's stated preferences.

    Every dimension is an integer 0-100; the overall match is their weighted
    sum. Explanations are emitted for dimensions below the "good" threshold in
    the fixed dimension order, so identical inputs give identical output.
    """

    def __init__(self, policy: ScoringPolicy = DEFAULT_POLICY) -> None:
        self.policy = policy

    # ---- dimensions -------------------------------------------------------

    def price_match(self, prefs: TenantPreferences, prop: PropertySnapshot) -> int:
        budget = prefs.budget
        if budget is None:
            return self.policy.no_budget_score
        if prop.rent <= budget:
            return 100

        # linear from 100 at budget to 0 at budget * (1 + max_overage_pct%)
        over = prop.rent - budget
        span = budget * self.policy.max_overage_pct
        remaining = 100 * span - 10000 * over
        if remaining <= 0:
            return 0
        return div_round_half_up(remaining, span)

    def location_match(self, prefs: TenantPreferences, prop: PropertySnapshot) -> int:
        city, region = prefs.city, prefs.region
        if not city and not region:
            return self.policy.no_location_preference_score

        if city:
            if same_place(city, prop.city) and (not region or same_place(region, prop.region)):
                return 100
            if region and same_place(region, prop.region):
                return self.policy.same_region_score
            return 0

        return 100 if same_place(region, prop.region) else 0

    def amenities_match(self, prefs: TenantPreferences, prop: PropertySnapshot) -> int:
        wanted = {normalize_tag(a) for a in prefs.amenities}
        if not wanted:
            return 100
        offered = {normalize_tag(a) for a in prop.amenities}
        return div_round_half_up(100 * len(wanted & offered), len(wanted))

    def size_match(self, prefs: TenantPreferences, prop: PropertySnapshot) -> int:
        penalty = 0
        if prefs.min_bedrooms is not None:
            short = prefs.min_bedrooms - (prop.bedrooms or 0)
            if short > 0:
                penalty += short * self.policy.bedroom_shortfall_penalty
        # unknown square footage is not penalised
        if prefs.min_square_feet is not None and prop.square_feet is not None:
            short = prefs.min_square_feet - prop.square_feet
            if short > 0:
                penalty += _ceil_div(short, 100) * self.policy.sqft_shortfall_penalty
        return max(0, 100 - penalty)

    def availability_match(self, prefs: TenantPreferences, prop: PropertySnapshot) -> int:
        delay = self._delay_days(prefs, prop)
        if delay <= 0:
            return 100
        weeks = _ceil_div(delay, 7)
        return max(0, 100 - weeks * self.policy.weekly_delay_penalty)

    @staticmethod
    def _delay_days(prefs: TenantPreferences, prop: PropertySnapshot) -> int:
        if prefs.move_in is None or prop.available_date is None:
            return 0
        return (prop.available_date - prefs.move_in).days

    # ---- explanations -----------------------------------------------------

    def _explain_price(self, prefs: TenantPreferences, prop: PropertySnapshot) -> str:
        if prefs.budget is None:
            return f"Rent of {format_money(prop.rent)} could not be compared: no budget stated"
        over_pct = div_round_half_up(100 * (prop.rent - prefs.budget), prefs.budget)
        return f"Rent of {format_money(prop.rent)} is {over_pct}% over your {format_money(prefs.budget)} budget"

    def _explain_location(self, prefs: TenantPreferences, prop: PropertySnapshot) -> str:
        where = f"{prop.city}, {prop.region}"
        if not prefs.city and not prefs.region:
            return f"{where}: no preferred location stated"
        if prefs.city and prefs.region and same_place(prefs.region, prop.region):
            return f"{where} is in {prefs.region} but not in your preferred city {prefs.city}"
        return f"{where} is outside your preferred area"

    def _explain_amenities(self, prefs: TenantPreferences, prop: PropertySnapshot) -> str:
        offered = {normalize_tag(a) for a in prop.amenities}
        missing = sorted({normalize_tag(a) for a in prefs.amenities} - offered)
        return f"Missing requested amenities: {', '.join(missing)}"

    def _explain_size(self, prefs: TenantPreferences, prop: PropertySnapshot) -> str:
        parts: list[str] = []
        beds = prop.bedrooms or 0
        if prefs.min_bedrooms is not None and beds < prefs.min_bedrooms:
            parts.append(f"Has {_plural(beds, 'bedroom')}, you need at least {prefs.min_bedrooms}")
        if (
            prefs.min_square_feet is not None
            and prop.square_feet is not None
            and prop.square_feet < prefs.min_square_feet
        ):
            parts.append(f"{prop.square_feet:,} sq ft is below your {prefs.min_square_feet:,} sq ft minimum")
        return "; ".join(parts)

    def _explain_availability(self, prefs: TenantPreferences, prop: PropertySnapshot) -> str:
        weeks = _ceil_div(self._delay_days(prefs, prop), 7)
        return (
            f"Available {prop.available_date.isoformat()}, "
            f"{_plural(weeks, 'week')} after your move-in date of {prefs.move_in.isoformat()}"
        )

    # ---- public API -------------------------------------------------------

    def match_property(self, prefs: TenantPreferences, prop: PropertySnapshot) -> PropertyMatch:
        scorers: dict[MatchDimension, Callable[[TenantPreferences, PropertySnapshot], int]] = {
            MatchDimension.price: self.price_match,
            MatchDimension.location: self.location_match,
            MatchDimension.amenities: self.amenities_match,
            MatchDimension.size: self.size_match,
            MatchDimension.availability: self.availability_match,
        }
        explainers: dict[MatchDimension, Callable[[TenantPreferences, PropertySnapshot], str]] = {
            MatchDimension.price: self._explain_price,
            MatchDimension.location: self._explain_location,
            MatchDimension.amenities: self._explain_amenities,
            MatchDimension.size: self._explain_size,
            MatchDimension.availability: self._explain_availability,
        }

        scores = {dim: scorers[dim](prefs, prop) for dim in MatchDimension}

        total = sum(self.policy.match_weights[dim] * scores[dim] for dim in MatchDimension)
        explanation = tuple(
            explainers[dim](prefs, prop)
            for dim in MatchDimension
            if scores[dim] < self.policy.good_match_threshold
        )

        return PropertyMatch(
            property_id=prop.id,
            match_percentage=div_round_half_up(total, 100),
            breakdown=MatchBreakdown(
                price_match=scores[MatchDimension.price],
                location_match=scores[MatchDimension.location],
                amenities_match=scores[MatchDimension.amenities],
                size_match=scores[MatchDimension.size],
                availability_match=scores[MatchDimension.availability],
            ),
            explanation=explanation,
        )

    def match_properties(
        self,
        score_model: ScoreModel | None,
        preferences: TenantPreferences | None,
        properties: Iterable[PropertySnapshot],
    ) -> list[PropertyMatch]:
        """
        Rank `properties` for a tenant: match_percentage desc, then property id asc.

        The tenant must already have a score; the match itself is driven by
        the stated preferences.
        """
        if score_model is None:
            raise ValidationError("tenant has no score; create a default score before matching")

        props = list(properties)
        if not props:
            raise ValidationError("no properties to match")

        prefs = preferences or TenantPreferences()
        matches = [self.match_property(prefs, p) for p in props]
        matches.sort(key=lambda m: (-m.match_percentage, m.property_id))
        return matches
