"""
Pattern Scorer: ranks candidate patterns and selects the winner.

Score = count + depth + diversity + child richness (+ table bonus) (+ anchor
penalty). A hard diversity gate sinks any pattern whose samples repeat
near-identical text (typical of navigation menus) regardless of item count.

All weights below are fixed constants; the behavior scenarios in the test
suite are defined relative to them.
"""

import math
import re
from typing import Optional

from .schemas import AnalyzerOptions, CandidatePattern, ScoreBreakdown, ScoredPattern

IDEAL_DOM_DEPTH = 4
DEPTH_WEIGHT = 2
MAX_DEPTH_SCORE = 10
COUNT_WEIGHT = 10
DIVERSITY_WEIGHT = 15
CHILD_WEIGHT = 20
CHILD_SATURATION = 3          # avg children at which the child score maxes out
TABLE_ROW_BONUS = 25
TABLE_SELECTOR_BONUS = 15
ANCHOR_PENALTY = -15

DIVERSITY_GATE = 0.2
GATED_SCORE = -100.0
NEUTRAL_DIVERSITY = 0.5       # used when no sample carries text
DIVERSITY_SAMPLES = 10
DIVERSITY_TEXT_LENGTH = 50

LEADING_TAG_PATTERN = re.compile(r'^([a-zA-Z][\w-]*)')


def normalize_sample_text(text: str) -> str:
    """Collapse whitespace, lowercase, cap length."""
    return re.sub(r'\s+', ' ', text or '').strip().lower()[:DIVERSITY_TEXT_LENGTH]


def diversity_score(pattern: CandidatePattern) -> float:
    """Fraction of unique normalized sample texts; 0.5 when nothing has text."""
    texts = [normalize_sample_text(sample.text) for sample in pattern.samples[:DIVERSITY_SAMPLES]]
    texts = [text for text in texts if text]
    if not texts:
        return NEUTRAL_DIVERSITY
    return len(set(texts)) / len(texts)


def selector_tag(selector: str) -> str:
    match = LEADING_TAG_PATTERN.match(selector.strip())
    return match.group(1).lower() if match else ''


def table_bonus(selector: str) -> float:
    tag = selector_tag(selector)
    if tag == 'tr' and '.' in selector:
        return TABLE_ROW_BONUS
    if 'table' in selector or 'tbody' in selector:
        return TABLE_SELECTOR_BONUS
    return 0


class PatternScorer:
    """Multi-factor scoring with a hard diversity gate."""

    def score_pattern(self, pattern: CandidatePattern, options: AnalyzerOptions) -> tuple[float, ScoreBreakdown]:
        """Score one pattern; the breakdown mirrors every term that was added."""
        diversity = diversity_score(pattern)
        if diversity < DIVERSITY_GATE:
            return GATED_SCORE, ScoreBreakdown(diversity=diversity, gated=True)

        breakdown = ScoreBreakdown(diversity=diversity)
        breakdown.count_score = math.log(pattern.count) * COUNT_WEIGHT if pattern.count > 0 else 0.0
        breakdown.depth_score = max(0, MAX_DEPTH_SCORE - abs(pattern.depth - IDEAL_DOM_DEPTH) * DEPTH_WEIGHT)
        breakdown.diversity_bonus = diversity * DIVERSITY_WEIGHT

        if pattern.samples:
            avg_children = sum(s.child_count for s in pattern.samples) / len(pattern.samples)
        else:
            avg_children = 0.0
        breakdown.child_score = min(avg_children / CHILD_SATURATION, 1) * CHILD_WEIGHT

        if options.prefer_table:
            breakdown.table_bonus = table_bonus(pattern.selector)
        if selector_tag(pattern.selector) == 'a':
            breakdown.anchor_penalty = ANCHOR_PENALTY

        score = (
            breakdown.count_score
            + breakdown.depth_score
            + breakdown.diversity_bonus
            + breakdown.child_score
            + breakdown.table_bonus
            + breakdown.anchor_penalty
        )
        return score, breakdown

    def score(self, patterns: list[CandidatePattern], options: AnalyzerOptions) -> list[ScoredPattern]:
        """
        Score and rank patterns.

        Patterns deeper than options.max_depth are discarded first. The result
        is sorted by descending score; ties keep discovery order.
        """
        scored = []
        for pattern in patterns:
            if pattern.depth > options.max_depth:
                continue
            score, breakdown = self.score_pattern(pattern, options)
            scored.append(ScoredPattern(
                pattern=pattern,
                score=score,
                diversity=breakdown.diversity,
                gated=breakdown.gated,
                breakdown=breakdown if options.diagnostics else None
            ))

        # sorted() is stable, so equal scores stay in discovery order
        return sorted(scored, key=lambda s: s.score, reverse=True)

    def select_best(self, scored: list[ScoredPattern]) -> Optional[ScoredPattern]:
        """Top-ranked pattern that is not gated, or None."""
        for candidate in scored:
            if not candidate.gated:
                return candidate
        return None
