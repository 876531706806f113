"""Source tokenizing, comment classification and declaration parsing."""

from docplane.parsing.classifier import ClassifierState, CommentState, SourceClassifier
from docplane.parsing.header import parse_header
from docplane.parsing.tokenizer import (
    SourceTokenizer,
    Statement,
    split_comment,
    split_tokens,
    split_top_level,
)

__all__ = [
    "ClassifierState",
    "CommentState",
    "SourceClassifier",
    "SourceTokenizer",
    "Statement",
    "parse_header",
    "split_comment",
    "split_tokens",
    "split_top_level",
]
