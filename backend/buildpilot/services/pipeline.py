# buildpilot/services/pipeline.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from buildpilot.core import snippets

logger = logging.getLogger(__name__)

def splice(buffer: str, anchor: str, replacement: str) -> str:
    index = buffer.find(anchor)
    if index < 0:
        return buffer
    return buffer[:index] + replacement + buffer[index + len(anchor):]

def keywords(*words: str) -> Callable[[str], bool]:
    def predicate(utterance: str) -> bool:
        return any(word in utterance for word in words)

    return predicate

@dataclass(frozen=True)
class TransformationRule:
    name: str
    predicate: Callable[[str], bool]
    apply: Callable[[str], str]
    reply: str

@dataclass(frozen=True)
class PipelineResult:
    reply: str
    code: str
    rule: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.rule is not None

def _add_button(buffer: str) -> str:
    return splice(buffer, snippets.CONTAINER_CLOSE_ANCHOR, snippets.BUTTON_SNIPPET)

def _add_form(buffer: str) -> str:
    return splice(buffer, snippets.CONTAINER_CLOSE_ANCHOR, snippets.FORM_SNIPPET)

def _add_dark_mode(buffer: str) -> str:
    code = splice(buffer, snippets.APP_SIGNATURE_ANCHOR, snippets.DARK_MODE_STATE_SNIPPET)
    code = splice(code, snippets.ROOT_DIV_ANCHOR, snippets.DARK_MODE_ROOT_SNIPPET)
    code = splice(code, snippets.HEADING_ANCHOR, snippets.DARK_MODE_HEADING_SNIPPET)
    # the hook only compiles if useState is in scope
    if code != buffer and snippets.REACT_WITH_STATE_IMPORT not in code:
        code = splice(code, snippets.REACT_IMPORT_ANCHOR, snippets.REACT_WITH_STATE_IMPORT)
    return code

DEFAULT_RULES: Tuple[TransformationRule, ...] = (
    TransformationRule(
        name="button",
        predicate=keywords("button", "add button"),
        apply=_add_button,
        reply=snippets.BUTTON_REPLY,
    ),
    TransformationRule(
        name="form",
        predicate=keywords("form", "input"),
        apply=_add_form,
        reply=snippets.FORM_REPLY,
    ),
    TransformationRule(
        name="dark_mode",
        predicate=keywords("dark mode", "dark theme"),
        apply=_add_dark_mode,
        reply=snippets.DARK_MODE_REPLY,
    ),
)

class AssistantPipeline:
    # Pure: no I/O and no exceptions. No match yields the fallback reply and
    # the identical buffer.
    def __init__(
        self,
        rules: Sequence[TransformationRule] = DEFAULT_RULES,
        fallback_reply: str = snippets.FALLBACK_REPLY,
    ):
        self.rules = tuple(rules)
        self.fallback_reply = fallback_reply

    def match(self, utterance: str) -> Optional[TransformationRule]:
        lowered = utterance.strip().lower()
        for rule in self.rules:
            if rule.predicate(lowered):
                return rule
        return None

    def run(self, utterance: str, buffer: str) -> PipelineResult:
        try:
            rule = self.match(utterance) if utterance.strip() else None
            if rule is None:
                return PipelineResult(reply=self.fallback_reply, code=buffer)
            return PipelineResult(reply=rule.reply, code=rule.apply(buffer), rule=rule.name)
        except Exception:
            # a broken custom rule degrades to the guidance reply
            logger.exception("transformation rule failed for utterance %r", utterance)
            return PipelineResult(reply=self.fallback_reply, code=buffer)
