"""
Prompt template tests
"""

import json

import pytest

from core.templates import (
    SOP_GENERATION_GUIDE,
    TemplateNotFound,
    get_template,
    guide_sections,
    list_templates,
)
from tools.mcp_server import sop_guide_document


class TestTemplates:

    def test_known_templates(self):
        assert list_templates() == ["sop-generation-guide", "sop-analysis", "workflow-creation"]
        for name in list_templates():
            assert get_template(name).strip()

    def test_unknown_template(self):
        with pytest.raises(TemplateNotFound, match="Available: sop-generation-guide"):
            get_template("missing")

    def test_guide_sections(self):
        text = "# Title\n## first part\nbody\n### nested\n## SECOND PART\n"
        assert guide_sections(text) == ["First Part", "Second Part"]

    def test_guide_has_sections(self):
        assert guide_sections(SOP_GENERATION_GUIDE)


class TestGuideResource:

    def test_document(self):
        document = json.loads(sop_guide_document())

        assert document["resource_type"] == "sop-generation-guide"
        assert document["content"] == SOP_GENERATION_GUIDE
        assert document["metadata"]["content_type"] == "markdown"
        assert document["metadata"]["sections"] == guide_sections(SOP_GENERATION_GUIDE)
