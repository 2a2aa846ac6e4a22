"""
Test specifications for Task extraction and niche variants

Day blocks become Tasks; labelled analytics/engagement/technical lists become
Tasks shaped by a task profile. Cross-platform documents expand every task
into niche variants.

Acceptance Criteria:
- Every non-empty day block yields at least one Task
- Instructions and success metrics are never empty
- "Day 1 / Upload your first video (2 hours)" on youtube → 120 minutes,
  content, beginner, upload checklist
- Cross-platform tasks yield one variant per configured niche (max 3)
- Manufactured fields are listed in ``synthesized``

Edge Cases:
- Block without list markers → one task from the whole body
- Niche without an adaptation entry → no variant for it
- Explicit sub-items replace the synthesized checklist
"""

from playbook_extractor.config import ExtractorConfig
from playbook_extractor.context import RunContext
from playbook_extractor.models import Difficulty, PlatformScope, TaskCategory
from playbook_extractor.sections import SectionSegmenter
from playbook_extractor.synthesizers import ANALYZE_STEPS, GENERIC_STEPS, UPLOAD_STEPS
from playbook_extractor.tasks import TaskExtractor
from playbook_extractor.variants import VariantExpander


# Test fixtures
FIRST_UPLOAD = "Day 1\n- Upload your first video (2 hours)\n"

PROSE_DAY = "Day 2\nSpend the afternoon planning thumbnails for next week.\n"

EXPLICIT_STEPS = """Day 1
- Upload your trailer
  - Film a 60 second intro
  - Export in 1080p
"""

TWO_DAYS = """Day 1
- **Channel art:** design a banner (45 minutes)
Day 2
- Analyze your first week of data
"""

ANALYTICS_DOC = """## Tracking

Weekly Analytics Tasks:
- Review click-through rate on new uploads
- Compare retention across videos

Daily Analytics Tasks:
- Check real-time views
"""

ENGAGEMENT_DOC = """Community Activities:
- Reply to the first ten comments every morning
"""

TECHNICAL_DOC = """Equipment Requirements:
- Install OBS Studio and configure scenes
"""


def extract(text, scope, config=None, ctx=None):
    config = config or ExtractorConfig()
    sections = SectionSegmenter().segment(text, scope)
    return TaskExtractor(config).extract(sections, scope, ctx or RunContext())


class TestDayBlockTasks:
    """Tasks from day blocks."""

    def test_first_upload_scenario(self):
        """The canonical first-upload day produces the expected task."""
        tasks = extract(FIRST_UPLOAD, PlatformScope.YOUTUBE)
        assert len(tasks) == 1
        task = tasks[0]
        assert task.time_estimate == 120
        assert task.category == TaskCategory.CONTENT
        assert task.difficulty == Difficulty.BEGINNER
        assert task.instructions == UPLOAD_STEPS
        assert len(task.instructions) == 5
        assert task.title == "Upload your first video"
        assert task.day_range == "Day 1"

    def test_identity_fields(self):
        """Ids, roadmap id and platform derive from the scope."""
        task = extract(FIRST_UPLOAD, PlatformScope.YOUTUBE)[0]
        assert task.id == "youtube_task_1"
        assert task.order_index == 1
        assert task.roadmap_id == "youtube_phase1_week1"
        assert task.platform == "youtube"
        assert task.niche == "general"

    def test_provenance(self):
        """Manufactured fields are tagged; parsed ones are not."""
        task = extract(FIRST_UPLOAD, PlatformScope.YOUTUBE)[0]
        assert "instructions" in task.synthesized
        assert "difficulty" in task.synthesized
        assert "successMetrics" in task.synthesized
        assert "niche" in task.synthesized
        assert "timeEstimate" not in task.synthesized
        assert "category" not in task.synthesized

    def test_platform_seed_lists(self):
        """Platform-specific lists start from the platform seeds."""
        task = extract(FIRST_UPLOAD, PlatformScope.TIKTOK)[0]
        assert task.platform_specific.tips == [
            "Use trending sounds",
            "Keep videos under 60 seconds",
            "Post during peak hours",
        ]
        assert len(task.platform_specific.best_practices) == 5
        assert len(task.platform_specific.common_mistakes) == 5

    def test_never_empty(self):
        """Instructions and success metrics always have entries."""
        task = extract(PROSE_DAY, PlatformScope.TWITCH)[0]
        assert task.instructions
        assert task.success_metrics
        assert task.success_metrics[0].metric == "completion"

    def test_body_without_list_markers(self):
        """A prose-only block becomes exactly one generic task."""
        tasks = extract(PROSE_DAY, PlatformScope.YOUTUBE)
        assert len(tasks) == 1
        assert tasks[0].title == "Spend the afternoon planning thumbnails for next week"
        assert tasks[0].instructions == GENERIC_STEPS
        assert tasks[0].time_estimate == 60
        assert "timeEstimate" in tasks[0].synthesized
        assert "category" in tasks[0].synthesized

    def test_explicit_sub_items(self):
        """Indented sub-items are the instruction list."""
        task = extract(EXPLICIT_STEPS, PlatformScope.YOUTUBE)[0]
        assert task.instructions == ["Film a 60 second intro", "Export in 1080p"]
        assert "instructions" not in task.synthesized

    def test_bold_label_title_and_counters(self):
        """Bold labels title the task; ids increase across blocks."""
        tasks = extract(TWO_DAYS, PlatformScope.YOUTUBE)
        assert [t.title for t in tasks] == ["Channel art", "Analyze your first week of data"]
        assert tasks[0].time_estimate == 45
        assert tasks[1].instructions == ANALYZE_STEPS
        assert tasks[1].category == TaskCategory.ANALYTICS
        assert [t.id for t in tasks] == ["youtube_task_1", "youtube_task_2"]

    def test_shared_context_continues_counters(self):
        """A context passed to two calls keeps counting."""
        ctx = RunContext()
        extract(FIRST_UPLOAD, PlatformScope.YOUTUBE, ctx=ctx)
        second = extract(FIRST_UPLOAD, PlatformScope.YOUTUBE, ctx=ctx)
        assert second[0].id == "youtube_task_2"


class TestVariants:
    """Niche variant expansion of cross-platform tasks."""

    def test_three_variants(self):
        """A cross-platform task yields one variant per default niche, capped at three."""
        tasks = extract(FIRST_UPLOAD, PlatformScope.ALL)
        assert len(tasks) == 3
        assert [t.niche for t in tasks] == ["gaming", "education", "lifestyle"]
        assert [t.title for t in tasks] == [
            "Gaming: Upload your first video",
            "Educational: Upload your first video",
            "Lifestyle: Upload your first video",
        ]
        assert len({t.id for t in tasks}) == 3
        assert tasks[0].id == "youtube_gaming_task_1"

    def test_variant_description_and_platform(self):
        """Variants append the niche example and use the fallback platform."""
        task = extract(FIRST_UPLOAD, PlatformScope.ALL)[0]
        assert task.platform == "youtube"
        assert task.roadmap_id == "all_phase1_week1"
        assert task.description.endswith("(e.g., gameplay videos, tutorials, reviews)")
        assert task.time_estimate == 120

    def test_variant_provenance(self):
        """Fields taken from the niche table are tagged on every variant."""
        for task in extract(FIRST_UPLOAD, PlatformScope.ALL):
            assert {"niche", "title", "description"} <= set(task.synthesized)
            assert task.synthesized.count("niche") == 1
            assert "timeEstimate" not in task.synthesized

    def test_variants_own_their_lists(self):
        """Editing one variant's platform lists leaves its siblings alone."""
        first, second, _ = extract(FIRST_UPLOAD, PlatformScope.ALL)
        assert first.platform_specific is not second.platform_specific
        first.platform_specific.tips.append("Stream the launch")
        assert "Stream the launch" not in second.platform_specific.tips

    def test_missing_adaptation_skipped(self):
        """Niches absent from the adaptation table produce no variant."""
        config = ExtractorConfig(platform_niches={"youtube": ["gaming", "pottery"]})
        tasks = extract(FIRST_UPLOAD, PlatformScope.ALL, config=config)
        assert [t.niche for t in tasks] == ["gaming"]

    def test_no_applicable_niches(self):
        """With no usable niche the base task passes through."""
        config = ExtractorConfig(platform_niches={"youtube": []})
        tasks = extract(FIRST_UPLOAD, PlatformScope.ALL, config=config)
        assert len(tasks) == 1
        assert tasks[0].niche == "general"

    def test_platform_scope_passes_through(self):
        """Platform-scoped tasks are not expanded."""
        task = extract(FIRST_UPLOAD, PlatformScope.YOUTUBE)[0]
        expander = VariantExpander(ExtractorConfig())
        assert expander.expand(task, PlatformScope.YOUTUBE) == [task]


class TestProfiledTasks:
    """Tasks from labelled analytics, engagement and technical lists."""

    def test_analytics_tasks(self):
        """Analytics lists use the frequency as day range and time bucket."""
        tasks = TaskExtractor(ExtractorConfig()).extract_analytics(
            ANALYTICS_DOC, PlatformScope.YOUTUBE, RunContext()
        )
        assert len(tasks) == 3
        weekly = tasks[0]
        assert weekly.title == "Weekly Analytics: Review click-through rate on new uploads"
        assert weekly.day_range == "Weekly"
        assert weekly.time_estimate == 60
        assert weekly.category == TaskCategory.ANALYTICS
        assert weekly.roadmap_id == "analytics_optimization"
        assert weekly.difficulty == Difficulty.INTERMEDIATE
        assert weekly.instructions[2] == "Review click-through rate on new uploads"
        assert [r.title for r in weekly.resources] == [
            "youtube Analytics",
            "Analytics Best Practices",
        ]
        assert tasks[2].time_estimate == 15
        assert tasks[2].metadata["frequency"] == "Daily"

    def test_engagement_tasks(self):
        """Engagement lists produce recurring community tasks."""
        tasks = TaskExtractor(ExtractorConfig()).extract_engagement(
            ENGAGEMENT_DOC, PlatformScope.TWITCH, RunContext()
        )
        assert len(tasks) == 1
        task = tasks[0]
        assert task.title == "Engagement: Reply to the first ten comments every morning"
        assert task.time_estimate == 30
        assert task.category == TaskCategory.COMMUNITY
        assert task.difficulty == Difficulty.BEGINNER
        assert [m.metric for m in task.success_metrics] == ["comments_replied", "engagement_rate"]
        assert all(m.synthesized for m in task.success_metrics)
        assert task.metadata["recurring"] is True

    def test_technical_tasks(self):
        """Technical lists pick up known tools as resources."""
        tasks = TaskExtractor(ExtractorConfig()).extract_technical(
            TECHNICAL_DOC, PlatformScope.YOUTUBE, RunContext()
        )
        task = tasks[0]
        assert task.title == "Equipment Setup: Install OBS Studio and configure scenes"
        assert task.day_range == "Day 1-2"
        assert task.time_estimate == 120
        assert task.category == TaskCategory.TECHNICAL
        assert [r.title for r in task.resources] == ["OBS Studio"]

    def test_profiled_tasks_expand_for_all_scope(self):
        """Cross-platform profiled tasks get niche variants too."""
        tasks = TaskExtractor(ExtractorConfig()).extract_engagement(
            ENGAGEMENT_DOC, PlatformScope.ALL, RunContext()
        )
        assert len(tasks) == 3
        assert tasks[0].title.startswith("Gaming: Engagement:")
