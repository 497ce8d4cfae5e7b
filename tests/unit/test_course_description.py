"""
Unit tests for the course-description extractor.

Run: pytest tests/unit/test_course_description.py -v
"""
from textbook.extraction.course_description import parse_course_description

DOCUMENT = """## Course Title
**Widget Engineering Fundamentals**

## Subtitle
From first sketch to production widget.

## Target Audience
Engineers who build widgets.

## Prerequisites
Basic algebra.

## Topics Covered
- Chapter 1: Widget Basics
- Chapter 2: Widget Assembly
* Gear Trains

## Learning Outcomes
1. Remember: List the parts of a widget.
2. Understand: Explain how widgets fit together.
"""


class TestParseCourseDescription:
    def test_sections_extracted(self):
        description = parse_course_description(DOCUMENT, "Widgets", 3)

        assert description.title == "Widget Engineering Fundamentals"
        assert description.subtitle == "From first sketch to production widget."
        assert description.target_audience == "Engineers who build widgets."
        assert description.prerequisites == "Basic algebra."
        assert description.topics == ["Widget Basics", "Widget Assembly", "Gear Trains"]
        assert description.learning_outcomes == [
            "List the parts of a widget.",
            "Explain how widgets fit together.",
        ]
        assert description.raw_markdown == DOCUMENT

    def test_topics_padded_to_chapter_count(self):
        description = parse_course_description(DOCUMENT, "Widgets", 5)

        assert len(description.topics) == 5
        assert description.topics[3:] == ["Chapter 4", "Chapter 5"]

    def test_unstructured_output_falls_back_to_topic(self):
        description = parse_course_description("Sorry, I cannot help.", "Widgets", 2)

        assert description.title == "Widgets"
        assert description.subtitle == ""
        assert description.topics == ["Chapter 1", "Chapter 2"]
        assert description.learning_outcomes == []
