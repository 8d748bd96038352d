"""
Tests for locating the node array in service responses.
"""

import pytest

from conceptgraph.extraction.exceptions import MalformedResponseError
from conceptgraph.extraction.response_parser import parse_node_list, strip_code_fences


class TestParseNodeList:
    """Tests for parse_node_list."""

    def test_plain_array(self):
        nodes = parse_node_list('[{"id": "a", "label": "A", "type": "main"}]')
        assert nodes == [{"id": "a", "label": "A", "type": "main"}]

    def test_code_fenced_array(self):
        """Markdown fences around the payload are ignored."""
        content = '```json\n[{"id": "a", "label": "A", "type": "main"}]\n```'
        assert parse_node_list(content)[0]["id"] == "a"

    def test_prose_around_array(self):
        content = 'Here is the mindmap:\n[{"id": "a", "label": "A"}]\nHope this helps [really].'
        assert parse_node_list(content) == [{"id": "a", "label": "A"}]

    def test_skips_bracketed_prose_before_payload(self):
        """A bracket that does not open an object array is skipped."""
        content = 'Notes [draft] and [1, 2]: [{"id": "x", "label": "X"}]'
        assert parse_node_list(content) == [{"id": "x", "label": "X"}]

    def test_truncated_array_is_salvaged(self):
        """A response cut off mid-object keeps every complete object."""
        content = (
            '[{"id": "a", "label": "A", "type": "main", "connections": ["b"]},'
            ' {"id": "b", "label": "B", "type": "secondary", "connections": []},'
            ' {"id": "c", "label": "C", "ty'
        )
        nodes = parse_node_list(content)
        assert [n["id"] for n in nodes] == ["a", "b"]

    def test_non_dict_entries_are_kept_for_validation(self):
        nodes = parse_node_list('[{"id": "a", "label": "A"}, 42, "junk"]')
        assert nodes == [{"id": "a", "label": "A"}, 42, "junk"]

    @pytest.mark.parametrize("content", ["", "   ", "No JSON here at all.", '{"id": "a"}', "[1, 2, 3]"])
    def test_no_array_raises(self, content):
        with pytest.raises(MalformedResponseError):
            parse_node_list(content)


def test_strip_code_fences():
    assert strip_code_fences("```json\n[]\n```") == "\n[]\n"
