from __future__ import annotations

from lintpad.settings_schema import NormalizedLintConfig
from lintpad.sources.base import AnnotationSource
from lintpad.sources.command_source import CommandAnnotationSource
from lintpad.sources.http_source import HttpAnnotationSource


def create_annotation_source(cfg: NormalizedLintConfig) -> AnnotationSource:
    if cfg.backend == "command":
        return CommandAnnotationSource(cfg.command, timeout_s=cfg.request_timeout_s)
    return HttpAnnotationSource(cfg.backend_url, timeout_s=cfg.request_timeout_s)
