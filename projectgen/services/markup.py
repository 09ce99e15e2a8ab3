from __future__ import annotations
import re
import markdown

# Models like to emit LaTeX-ish chemistry; the PDF has no math renderer.
_REPLACEMENTS = [
    (re.compile(r"\\rightarrow"), "→"),
    (re.compile(r"C_3H_5"), "C3H5"),
    (re.compile(r"C_\{12\}H_\{25\}"), "C12H25"),
    (re.compile(r"_"), ""),
    (re.compile(r"[{}]"), ""),
]

def clean_markdown(text: str) -> str:
    for pattern, repl in _REPLACEMENTS:
        text = pattern.sub(repl, text)
    return text

def markdown_to_html(text: str) -> str:
    """
    Convert model markdown into an HTML fragment for the document body.
    """
    return markdown.markdown(clean_markdown(text), extensions=["tables", "sane_lists"], output_format="html")
