"""
Test specifications for the Field Synthesizers

Helpers that derive task fields from partial textual evidence.

Acceptance Criteria:
- "(2 hours)" → 120, "(45 minutes)" → 45, absent → 60
- Category keywords are checked in a fixed order; content wins ties
- Difficulty is a pure function of (phase, week)
- Instruction checklists come from a fixed keyword lookup
- Success metrics are never empty
- Seed lists are capped at five entries

Edge Cases:
- Zero-length time annotations fall back to the default
- Titles longer than 60 characters are cut with an ellipsis
"""

from playbook_extractor.models import Difficulty, ResourceType, TaskCategory
from playbook_extractor.synthesizers import (
    ANALYZE_STEPS,
    ENGAGE_STEPS,
    GENERIC_STEPS,
    UPLOAD_STEPS,
    build_platform_specific,
    classify_category,
    determine_difficulty,
    extract_resources,
    extract_success_metrics,
    extract_title,
    parse_time_estimate,
    synthesize_instructions,
    title_from_block,
)


class TestTimeEstimate:
    """Parenthetical time annotations."""

    def test_hours_converted_to_minutes(self):
        """'(2 hours)' is 120 minutes."""
        assert parse_time_estimate("Upload your first video (2 hours)") == (120, False)

    def test_minutes(self):
        """'(45 minutes)' is 45 minutes."""
        assert parse_time_estimate("Reply to comments (45 minutes)") == (45, False)

    def test_fractional_hours(self):
        """'(1.5 hrs)' rounds to 90 minutes."""
        assert parse_time_estimate("Edit (1.5 hrs)") == (90, False)

    def test_absent_defaults(self):
        """No annotation gives the default and marks it synthesized."""
        assert parse_time_estimate("Upload a short") == (60, True)

    def test_zero_defaults(self):
        """Non-positive estimates fall back to the default."""
        assert parse_time_estimate("Rest (0 minutes)") == (60, True)


class TestTitles:
    """Title derivation."""

    def test_strips_time_and_cuts_sentence(self):
        """Time annotations are removed and the first sentence kept."""
        assert extract_title("Upload your first video (2 hours). Then relax.") == (
            "Upload your first video"
        )

    def test_truncates_long_titles(self):
        """Titles over 60 characters get an ellipsis."""
        title = extract_title("A" * 80)
        assert title == "A" * 60 + "..."

    def test_strips_markup(self):
        """Bold markers do not appear in titles."""
        assert extract_title("**Film** a teaser") == "Film a teaser"

    def test_title_from_block_uses_first_line(self):
        """Whole-body titles come from the first non-blank line."""
        assert title_from_block("\n- Plan the week. Carefully.\nMore text") == "Plan the week"


class TestInstructions:
    """Keyword-dispatched instruction checklists."""

    def test_upload(self):
        """'upload' yields the upload checklist."""
        assert synthesize_instructions("Upload your first video") == UPLOAD_STEPS

    def test_engage(self):
        """'engage' yields the community checklist."""
        assert synthesize_instructions("Engage with viewers") == ENGAGE_STEPS

    def test_analyze(self):
        """'analyze' yields the analytics checklist."""
        assert synthesize_instructions("Analyze last week") == ANALYZE_STEPS

    def test_generic(self):
        """Anything else yields five generic steps."""
        steps = synthesize_instructions("Brainstorm names")
        assert steps == GENERIC_STEPS
        assert len(steps) == 5


class TestCategory:
    """Keyword-priority category classification."""

    def test_content_before_analytics(self):
        """A text with 'upload' and 'analyze' is content."""
        result = classify_category("Upload the video, then analyze the results")
        assert result.result == TaskCategory.CONTENT
        assert not result.defaulted

    def test_each_category(self):
        """Each keyword group maps to its category."""
        assert classify_category("Install OBS").result == TaskCategory.TECHNICAL
        assert classify_category("Respond to fans").result == TaskCategory.COMMUNITY
        assert classify_category("Check the data").result == TaskCategory.ANALYTICS
        assert classify_category("Pitch a sponsor").result == TaskCategory.MONETIZATION

    def test_default_content(self):
        """No keyword defaults to content and says so."""
        result = classify_category("Take a break")
        assert result.result == TaskCategory.CONTENT
        assert result.defaulted


class TestDifficulty:
    """Difficulty from roadmap position."""

    def test_mapping(self):
        """Phase/week pairs map to fixed difficulties."""
        assert determine_difficulty(1, 1) == Difficulty.BEGINNER
        assert determine_difficulty(1, 2) == Difficulty.BEGINNER
        assert determine_difficulty(1, 3) == Difficulty.INTERMEDIATE
        assert determine_difficulty(2, 1) == Difficulty.INTERMEDIATE
        assert determine_difficulty(2, 3) == Difficulty.ADVANCED
        assert determine_difficulty(3, 1) == Difficulty.ADVANCED


class TestPlatformSpecific:
    """Seed lists merged with labelled sentences."""

    def test_appends_labelled_sentences(self):
        """Tip and mistake sentences follow the seeds."""
        body = "Tip: batch record your videos. Avoid: buying gear first."
        result = build_platform_specific(body, ["seed tip"], ["seed practice"], ["seed mistake"])
        assert result.tips == ["seed tip", "batch record your videos"]
        assert result.best_practices == ["seed practice"]
        assert result.common_mistakes == ["seed mistake", "buying gear first"]

    def test_capped_at_five(self):
        """No list grows past five entries."""
        seeds = [f"seed {n}" for n in range(5)]
        result = build_platform_specific("Tip: one more thing", seeds, seeds, seeds)
        assert result.tips == seeds
        assert len(result.best_practices) == 5


class TestSuccessMetrics:
    """Numeric success metrics."""

    def test_four_patterns(self):
        """Subscriber, view, engagement and watch-time targets are found."""
        metrics = extract_success_metrics(
            "Get 100 subscribers and 1,000 views with 5% CTR and 4000 hours of watch time"
        )
        assert [(m.metric, m.target) for m in metrics] == [
            ("subscribers", "100"),
            ("views", "1,000"),
            ("engagement_rate", "5%"),
            ("watch_time", "4000 hours"),
        ]
        assert not any(m.synthesized for m in metrics)

    def test_completion_fallback(self):
        """No numeric target yields one synthesized completion metric."""
        metrics = extract_success_metrics("Write a script")
        assert len(metrics) == 1
        assert metrics[0].metric == "completion"
        assert metrics[0].target == "100%"
        assert metrics[0].synthesized

    def test_duplicates_collapsed(self):
        """Repeated targets appear once."""
        metrics = extract_success_metrics("Hit 50 followers. Really, 50 followers.")
        assert len(metrics) == 1


class TestResources:
    """Tool mentions and keyword resources."""

    def test_tool_and_guide(self):
        """'using <Tool> to' is a tool; 'guide' adds a guide resource."""
        resources = extract_resources("Record using OBS Studio to capture. Follow the guide.")
        assert [(r.type, r.title) for r in resources] == [
            (ResourceType.TOOL, "OBS Studio"),
            (ResourceType.GUIDE, "Best Practices Guide"),
        ]
        assert resources[1].synthesized

    def test_known_tools(self):
        """Configured tool names found in the text become tools."""
        resources = extract_resources("Edit in davinci resolve", known_tools=["DaVinci Resolve"])
        assert [r.title for r in resources] == ["DaVinci Resolve"]

    def test_no_resources(self):
        """Plain text has no resources."""
        assert extract_resources("Go for a walk") == []
