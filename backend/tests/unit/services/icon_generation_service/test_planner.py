"""Tests for the variation planner."""

from iconset.models.generate import GenerationRequest
from iconset.services.icon_generation_service.planner import VariationPlanner


class TestVariationPlanner:
    def test_plans_four_tasks_in_index_order(self, options):
        planner = VariationPlanner(options)
        tasks = planner.plan(GenerationRequest(prompt="Toys", style=1), base_seed=100)

        assert [t.index for t in tasks] == [0, 1, 2, 3]
        assert [t.seed for t in tasks] == [100, 101, 102, 103]

    def test_full_prompt_layout_with_colors(self, options):
        planner = VariationPlanner(options)
        request = GenerationRequest(
            prompt="Toys", style=1, brand_colors=("#FF5733", "#C70039")
        )
        first = planner.plan(request, base_seed=0)[0]

        assert first.full_prompt == (
            "Toys icon, variation 1, primary subject, "
            "simple flat icon design, minimal, clean lines, solid colors, "
            "professional icon style, "
            "using these exact colors: #FF5733, #C70039, maintain color consistency, "
            "512x512, icon design, white background, centered, high quality"
        )

    def test_color_clause_omitted_without_colors(self, options):
        planner = VariationPlanner(options)
        tasks = planner.plan(GenerationRequest(prompt="Toys", style=4), base_seed=0)

        assert all("using these exact colors" not in t.full_prompt for t in tasks)
        assert all("neon style" in t.full_prompt for t in tasks)
        assert tasks[3].full_prompt.startswith("Toys icon, variation 4, unique perspective")

    def test_planning_is_repeatable(self, options):
        planner = VariationPlanner(options)
        request = GenerationRequest(prompt="Rocket", style=3, brand_colors=("#000",))
        assert planner.plan(request, 7) == planner.plan(request, 7)
