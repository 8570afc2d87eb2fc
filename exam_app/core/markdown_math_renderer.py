"""Markdown + LaTeX rendering of questions for the Qt window and the web page.

Question text, options and explanations are converted to HTML with
markdown-it; MathJax typesets the math when the page is displayed, so the
desktop ``QWebEngineView`` and the browser page show the same markup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import html

from markdown_it import MarkdownIt

from exam_app.core.models import Question

_MATHJAX_SCRIPT = (
    "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
)

_EMPTY_FRAGMENT = "<p><em>No content provided.</em></p>"


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Turns questions written in markdown-with-math into HTML documents."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str | None) -> str:
        """Render a markdown string into an HTML fragment."""
        sanitized = (markdown_text or "").strip()
        if not sanitized:
            return _EMPTY_FRAGMENT
        return self._markdown.render(sanitized)

    def render_inline(self, markdown_text: str | None) -> str:
        """Render a single line (an option) without a wrapping paragraph."""
        return self._markdown.renderInline((markdown_text or "").strip())

    def render_question(self, question: Question, font_size: int = 14) -> str:
        """Full document with the question text followed by its lettered options."""
        rows = "".join(
            f'<li><span class="key">{key.upper()}.</span> {self.render_inline(question.option_text(key))}</li>'
            for key in question.available_keys()
        )
        body = f'{self.render_fragment(question.question_text)}<ul class="options">{rows}</ul>'
        return self.wrap_with_mathjax(body, title=f"Question {question.id}", font_size=font_size)

    def render_review(
        self,
        question: Question,
        chosen: str | None,
        position: int,
        font_size: int = 14,
    ) -> str:
        """Document for the post-submission review of one question.

        The correct option and the chosen option are highlighted and the
        explanation, when present, follows the options.
        """
        rows = []
        for key in question.available_keys():
            css = []
            if key == question.correct_option:
                css.append("correct")
            if key == chosen:
                css.append("chosen")
            rows.append(
                f'<li class="{" ".join(css)}"><span class="key">{key.upper()}.</span> '
                f"{self.render_inline(question.option_text(key))}</li>"
            )
        body = f'{self.render_fragment(question.question_text)}<ul class="options">{"".join(rows)}</ul>'
        if chosen is None:
            body += "<p><em>Not attempted.</em></p>"
        if question.explanation:
            body += f'<div class="explanation"><strong>Explanation</strong>{self.render_fragment(question.explanation)}</div>'
        return self.wrap_with_mathjax(body, title=f"Question {position}", font_size=font_size)

    def wrap_with_mathjax(self, body_html: str, title: str = "ExamQt", font_size: int = 14) -> str:
        """Wrap a fragment inside a minimal HTML document that loads MathJax."""

        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{html.escape(title)}</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; background: transparent; color: #111827; }}
      .question-html {{ font-size: {font_size}pt; line-height: 1.5; }}
      ul.options {{ list-style: none; padding-left: 0; }}
      ul.options li {{ padding: 0.3rem 0.5rem; border-radius: 0.4rem; margin-bottom: 0.25rem; }}
      ul.options .key {{ font-weight: bold; }}
      li.correct {{ background: #dcfce7; }}
      li.chosen:not(.correct) {{ background: #fee2e2; }}
      .explanation {{ border-top: 1px solid #e5e7eb; margin-top: 1rem; padding-top: 0.5rem; }}
    </style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['$','$']], displayMath: [['$$','$$']] }}, svg: {{ fontCache: 'global' }} }};
    </script>
    <script defer src=\"{_MATHJAX_SCRIPT}\"></script>
  </head>
  <body>
    <div class=\"question-html\">{body_html}</div>
  </body>
</html>"""


renderer = MarkdownMathRenderer()
# Shared by the Qt thread and the API thread; renders only read the parser.
