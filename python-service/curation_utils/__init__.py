"""
Curation utilities module for budget parsing, directive building and output sanitization.
"""

from curation_utils.budget_helpers import (
    classify_budget_band,
    compute_central_value,
    get_idea_count,
    parse_budget,
)
from curation_utils.curation_helpers import (
    build_curation_directive,
    build_curation_prompt,
    get_curation_settings,
    get_gemini_config,
)
from curation_utils.sanitize_helpers import (
    remove_markdown_code_blocks,
    sanitize_generation_output,
)

__all__ = [
    "parse_budget",
    "compute_central_value",
    "classify_budget_band",
    "get_idea_count",
    "build_curation_directive",
    "build_curation_prompt",
    "get_curation_settings",
    "get_gemini_config",
    "remove_markdown_code_blocks",
    "sanitize_generation_output",
]
