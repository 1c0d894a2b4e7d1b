"""Tests for HtmlToMarkdown, tag mappings and tag handlers."""

import json
import pytest

from markconv.HtmlToMarkdown import HtmlToMarkdown
from markconv.exceptions import MappingError
from markconv.tag_handlers import DEFAULT_HANDLERS, TagHandler
from markconv.tag_mapping import TagMapping, common_tag_mappings, load_tag_mappings


def _convert(html, mappings=None):
    return HtmlToMarkdown(mappings=mappings).convert(html)


class TestSpecialHandlers:
    """Test the fixed rewrites with no caller mappings."""

    @pytest.mark.parametrize("html, expected", [
        ("<blockquote>This is a quote</blockquote>", "> This is a quote"),
        ("<blockquote>Line1\nLine2</blockquote>", "> Line1\n> Line2"),
    ])
    def test_blockquote(self, html, expected):
        assert _convert(html) == expected

    @pytest.mark.parametrize("html", ["<hr>", "<hr/>", "<hr />", "<HR>"])
    def test_horizontal_rule(self, html):
        assert _convert(html) == "---"

    @pytest.mark.parametrize("html, expected", [
        ("<pre>code here</pre>", "```\ncode here\n```"),
        ("<pre><code>abc</code></pre>", "```\nabc\n```"),
    ])
    def test_pre_block(self, html, expected):
        assert _convert(html) == expected

    @pytest.mark.parametrize("html, expected", [
        ("<code>abc</code>", "`abc`"),
        ("Text <code>x</code> more", "Text `x` more"),
    ])
    def test_inline_code(self, html, expected):
        assert _convert(html) == expected

    @pytest.mark.parametrize("html, expected", [
        ("<sup>2</sup>", "^2^"),
        ("E = mc<sup>2</sup>", "E = mc^2^"),
        ("<sub>2</sub>", "~2~"),
        ("H<sub>2</sub>O", "H~2~O"),
    ])
    def test_superscript_and_subscript(self, html, expected):
        assert _convert(html) == expected

    def test_bold_tag(self):
        assert _convert("<bold>x</bold>") == "**x**"

    def test_unordered_list(self):
        assert _convert("<ul><li>One</li><li>Two</li></ul>") == "- One\n- Two"

    def test_ordered_list_renumbers(self):
        html = "<ol><li>One</li><li>Two</li><li>Three</li></ol>"
        md = _convert(html)
        assert md == "1. One\n2. Two\n3. Three"
        assert md.replace("\n", "") == "1. One2. Two3. Three"

    def test_each_ordered_list_starts_at_one(self):
        md = _convert("<ol><li>a</li></ol><ol><li>b</li></ol>")
        assert md == "1. a\n1. b"

    def test_table(self):
        html = "<table><tr><th>Name</th><th>Age</th></tr><tr><td>Tom</td><td>10</td></tr></table>"
        assert _convert(html) == "| Name | Age |\n| Tom | 10 |"

    def test_link(self):
        assert _convert('<a href="https://example.com" title="t">Example</a>') == "[Example](https://example.com)"

    @pytest.mark.parametrize("html", [
        '<img alt="logo" src="logo.png">',
        '<img src="logo.png" alt="logo" />',
    ])
    def test_image_any_attribute_order(self, html):
        assert _convert(html) == "![logo](logo.png)"

    def test_containers_stripped(self):
        assert _convert('<div class="x"><span>text</span></div>') == "text"

    def test_unknown_tags_keep_text(self):
        assert _convert("<custom-tag>inner</custom-tag> <x/>") == "inner"

    def test_empty(self):
        assert _convert("") == ""
        assert _convert(None) == ""


class TestMappings:
    """Test caller-supplied tag mappings."""

    def test_paired_mapping(self):
        mappings = [TagMapping('strong', '**', is_prefix=True, is_suffix=True)]
        assert _convert("<strong>b</strong>", mappings) == "**b**"

    def test_prefix_only_mapping(self):
        mappings = [TagMapping('h2', '## ', is_prefix=True)]
        assert _convert("<h2 id='a'>Title</h2>", mappings) == "## Title"

    def test_void_mapping(self):
        mappings = [TagMapping('br', '\n', requires_closing_tag=False)]
        assert _convert("a<br>b<br/>c", mappings) == "a\nb\nc"

    def test_mappings_run_in_list_order(self):
        mappings = [
            TagMapping('em', '_', is_prefix=True, is_suffix=True),
            TagMapping('em', '*', is_prefix=True, is_suffix=True),
        ]
        assert _convert("<em>x</em>", mappings) == "_x_"

    def test_special_mappings_are_skipped(self):
        mappings = [TagMapping('a', 'LINK', is_prefix=True, is_special=True)]
        assert _convert('<a href="u">t</a>', mappings) == "[t](u)"

    def test_mapping_matches_case_insensitively(self):
        mappings = [TagMapping('em', '*', is_prefix=True, is_suffix=True)]
        assert _convert("<EM>x</EM>", mappings) == "*x*"

    def test_common_mappings(self):
        md = _convert("<h1>T</h1><p>a <strong>b</strong> <em>c</em></p>", common_tag_mappings())
        assert md == "# T\na **b** *c*"

    def test_invalid_tag_name(self):
        with pytest.raises(MappingError):
            TagMapping('not a tag', '*')

    def test_from_dict(self):
        mapping = TagMapping.from_dict({'html_tag': 'i', 'markdown': '*', 'is_prefix': True, 'extra': 1})
        assert mapping.html_tag == 'i'
        assert mapping.is_prefix
        assert not mapping.is_suffix

    def test_from_dict_without_tag(self):
        with pytest.raises(MappingError):
            TagMapping.from_dict({'markdown': '*'})


class TestLoadTagMappings:
    """Test reading mapping files."""

    def test_load(self, tmp_path):
        path = tmp_path / "tags.json"
        path.write_text(json.dumps([
            {"html_tag": "strong", "markdown": "**", "is_prefix": True, "is_suffix": True},
            {"html_tag": "br", "markdown": "\n", "requires_closing_tag": False},
        ]), encoding='utf-8')
        mappings = load_tag_mappings(str(path))
        assert [m.html_tag for m in mappings] == ['strong', 'br']
        assert _convert("<strong>a</strong><br>b", mappings) == "**a**\nb"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "tags.json"
        path.write_text("{not json", encoding='utf-8')
        with pytest.raises(MappingError):
            load_tag_mappings(str(path))

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "tags.json"
        path.write_text('{"html_tag": "b"}', encoding='utf-8')
        with pytest.raises(MappingError):
            load_tag_mappings(str(path))


class TestHandlerRegistry:
    """Test the handler chain."""

    def test_default_order_ends_with_strip(self):
        assert type(DEFAULT_HANDLERS[0]).__name__ == 'BlockquoteHandler'
        assert type(DEFAULT_HANDLERS[-1]).__name__ == 'StripTagsHandler'

    def test_custom_handler_chain(self):
        class Shout(TagHandler):
            tags = ('shout',)

            def render(self, text):
                return text.replace('<shout>', '').replace('</shout>', '!')

        converter = HtmlToMarkdown(handlers=[Shout()] + DEFAULT_HANDLERS)
        assert converter.convert("<shout>hey</shout>") == "hey!"
        assert isinstance(converter.handler_for('SHOUT'), Shout)

    @pytest.mark.parametrize("tag, handler_name", [
        ('blockquote', 'BlockquoteHandler'),
        ('code', 'WrapHandler'),
        ('li', 'UnorderedListHandler'),
        ('td', 'TableHandler'),
        ('img', 'ImageHandler'),
        ('span', 'ContainerHandler'),
    ])
    def test_handler_for_tag(self, tag, handler_name):
        assert type(HtmlToMarkdown().handler_for(tag)).__name__ == handler_name

    def test_no_handler_for_unknown_tag(self):
        assert HtmlToMarkdown().handler_for('mark') is None

    def test_special_mapping_without_handler_is_applied(self):
        mappings = [TagMapping('mark', '==', is_prefix=True, is_suffix=True, is_special=True)]
        assert _convert("<mark>x</mark>", mappings) == "==x=="
