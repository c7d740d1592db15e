from .base import AnnotationSource, ExecutorAnnotationSource, normalize_source_text
from .command_source import CommandAnnotationSource
from .examples import ExampleTable
from .http_source import HttpAnnotationSource
from .wire import decode_lint_json, decode_lint_response

__all__ = [
    "AnnotationSource",
    "CommandAnnotationSource",
    "ExampleTable",
    "ExecutorAnnotationSource",
    "HttpAnnotationSource",
    "decode_lint_json",
    "decode_lint_response",
    "normalize_source_text",
]
