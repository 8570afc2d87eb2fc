"""Tests for question and review HTML rendering."""

from exam_app.core.markdown_math_renderer import MarkdownMathRenderer


class TestMarkdownMathRenderer:
    def test_empty_text_renders_placeholder(self):
        assert "No content provided" in MarkdownMathRenderer().render_fragment("   ")

    def test_raw_html_is_escaped_by_default(self):
        fragment = MarkdownMathRenderer().render_fragment("<script>alert(1)</script>")

        assert "<script>" not in fragment

    def test_question_document_lists_only_present_options(self, make_question):
        question = make_question(3, options=("**bold**", "plain", None, None))

        document = MarkdownMathRenderer().render_question(question, font_size=18)

        assert "<strong>bold</strong>" in document
        assert "A.</span>" in document
        assert "B.</span>" in document
        assert "C.</span>" not in document
        assert "font-size: 18pt" in document
        assert "mathjax" in document.lower()

    def test_review_highlights_correct_and_chosen(self, make_question):
        question = make_question(1, correct="a", explanation="Because *reasons*.")

        document = MarkdownMathRenderer().render_review(question, "b", position=4)

        assert '<li class="correct">' in document
        assert '<li class="chosen">' in document
        assert "<em>reasons</em>" in document
        assert "<title>Question 4</title>" in document

    def test_review_of_unattempted_question(self, make_question):
        document = MarkdownMathRenderer().render_review(make_question(1), None, position=1)

        assert "Not attempted" in document
        assert "Explanation" not in document

    def test_title_is_escaped(self):
        document = MarkdownMathRenderer().wrap_with_mathjax("<p>x</p>", title="A <b> & C")

        assert "<title>A &lt;b&gt; &amp; C</title>" in document
