"""Tests for the tagged-section parser."""

from shifai.prompts import REPORT_SECTIONS
from shifai.report_parser import parse_sections

WELL_FORMED = """CLINICAL SUMMARY:
Patient reports recurring lower back pain.

TIMELINE ANALYSIS:
Started three days ago after lifting.

RISK ASSESSMENT: Moderate.

RECOMMENDATIONS:
- Rest and gentle stretching
- Follow up in one week
"""


class TestParseSections:
    def test_well_formed_output(self):
        sections = parse_sections(WELL_FORMED, REPORT_SECTIONS)
        assert sections["summary"] == "Patient reports recurring lower back pain."
        assert sections["timeline"] == "Started three days ago after lifting."
        assert sections["risk"] == "Moderate."
        assert sections["recommendations"] == (
            "- Rest and gentle stretching\n- Follow up in one week"
        )

    def test_markdown_decorated_headers(self):
        text = (
            "**1. CLINICAL SUMMARY**\nStable.\n"
            "## Timeline Analysis:\nTwo episodes.\n"
            "### 3) Risk Assessment\nLow.\n"
            "- **RECOMMENDATIONS:** Routine follow-up."
        )
        sections = parse_sections(text, REPORT_SECTIONS)
        assert sections["summary"] == "Stable."
        assert sections["timeline"] == "Two episodes."
        assert sections["risk"] == "Low."
        assert sections["recommendations"] == "Routine follow-up."

    def test_prose_is_not_a_header(self):
        text = "CLINICAL SUMMARY:\nRecommendations include rest and fluids.\n"
        sections = parse_sections(text, REPORT_SECTIONS)
        assert sections["summary"] == "Recommendations include rest and fluids."
        assert sections["recommendations"] is None

    def test_missing_sections_are_none(self):
        sections = parse_sections("CLINICAL SUMMARY:\nStable.", REPORT_SECTIONS)
        assert sections["summary"] == "Stable."
        assert sections["timeline"] is None
        assert sections["risk"] is None
        assert sections["recommendations"] is None

    def test_no_headers(self):
        sections = parse_sections("The patient seems fine.", REPORT_SECTIONS)
        assert set(sections) == {"summary", "timeline", "risk", "recommendations"}
        assert all(body is None for body in sections.values())

    def test_preamble_discarded(self):
        text = "Here is the report you asked for.\nCLINICAL SUMMARY:\nStable."
        assert parse_sections(text, REPORT_SECTIONS)["summary"] == "Stable."

    def test_empty_body_is_none(self):
        text = "CLINICAL SUMMARY:\n\nTIMELINE ANALYSIS:\nOne episode."
        sections = parse_sections(text, REPORT_SECTIONS)
        assert sections["summary"] is None
        assert sections["timeline"] == "One episode."

    def test_repeated_header_restarts_section(self):
        text = "RISK ASSESSMENT:\nDraft.\nRISK ASSESSMENT:\nFinal."
        assert parse_sections(text, REPORT_SECTIONS)["risk"] == "Final."

    def test_out_of_order_headers(self):
        text = "RECOMMENDATIONS:\nRest.\nCLINICAL SUMMARY:\nStable."
        sections = parse_sections(text, REPORT_SECTIONS)
        assert sections["recommendations"] == "Rest."
        assert sections["summary"] == "Stable."

    def test_none_text(self):
        assert parse_sections(None, REPORT_SECTIONS)["summary"] is None

    def test_dash_separated_headers(self):
        text = (
            "Clinical Summary - Stable patient.\n"
            "Timeline Analysis – Two episodes this week.\n"
            "Recommendations -\nRest."
        )
        sections = parse_sections(text, REPORT_SECTIONS)
        assert sections["summary"] == "Stable patient."
        assert sections["timeline"] == "Two episodes this week."
        assert sections["recommendations"] == "Rest."

    def test_parenthetical_header_keeps_qualifier(self):
        text = "Risk Assessment (Moderate):\nRecurring back pain.\n**Clinical Summary (brief)**"
        sections = parse_sections(text, REPORT_SECTIONS)
        assert sections["risk"] == "Moderate\nRecurring back pain."
        assert sections["summary"] == "brief"
