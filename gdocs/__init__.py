"""
Google Docs Markdown Insertion Package

This package appends markdown content to existing Google Docs through the
Docs API batchUpdate endpoint.
"""

from gdocs.markdown_parser import parse_markdown
from gdocs.preprocessing import preprocess_markdown
from gdocs.writing import InsertResult, MarkdownInserter, insert_markdown_to_doc

__all__ = [
    "insert_markdown_to_doc",
    "InsertResult",
    "MarkdownInserter",
    "parse_markdown",
    "preprocess_markdown",
]
