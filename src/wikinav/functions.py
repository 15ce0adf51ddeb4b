"""Parser functions and the registry that expands them inside page text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .navlist import LookupRequest, LookupResult, NavListErrorKind, lookup
from .titles import TitleNormalizer
from .urlformat import format_url
from .wiki.models import DocumentStore


logger = logging.getLogger(__name__)

TEMPLATE_NAMESPACE = "Template"
MAX_EXPANSION_PASSES = 40

_CALL_RE = re.compile(r"\{\{\s*#([^{}:|]+?)\s*(?::([^{}]*))?\}\}")

Callback = Callable[["PageContext", list[str]], str]


@dataclass(slots=True)
class PageContext:
    """The page a parser function is rendered on."""

    title: Optional[str] = None


class ParserFunctions:
    """Bind the navlist and urlformat functions to a document store."""

    def __init__(self, store: DocumentStore, *, normalizer: TitleNormalizer) -> None:
        self.store = store
        self.normalizer = normalizer

    def lookup(
        self,
        context: PageContext,
        template_name: str = "",
        action: str = "",
        lookup_value: str = "",
        flag: str = "",
    ) -> LookupResult:
        """Resolve a navlist lookup against the list kept on ``template_name``."""

        title = self.normalizer.normalize(template_name, default_namespace=TEMPLATE_NAMESPACE)
        if title is None:
            return LookupResult.failure(NavListErrorKind.INVALID_TEMPLATE_PARAMETER)

        document = self.store.fetch(title)
        if not document.exists:
            logger.debug("Template %s does not exist", title)
            return LookupResult.failure(NavListErrorKind.INVALID_TEMPLATE_NAME)

        request = LookupRequest(action=action, lookup_value=lookup_value, flag=flag)
        return lookup(
            document.raw_content,
            request,
            normalizer=self.normalizer,
            current_title=context.title,
        )

    def navlist(
        self,
        context: PageContext,
        template_name: str = "",
        action: str = "",
        lookup_value: str = "",
        flag: str = "",
    ) -> str:
        return self.lookup(context, template_name, action, lookup_value, flag).text

    def urlformat(self, context: PageContext, text: str = "") -> str:
        return format_url(text, current_title=context.title)


class FunctionRegistry:
    """Map magic words to callbacks and expand ``{{#name: ...}}`` calls."""

    def __init__(self) -> None:
        self._callbacks: dict[str, Callback] = {}

    def register(self, magic_word: str, callback: Callback) -> None:
        self._callbacks[magic_word.lower()] = callback

    def names(self) -> list[str]:
        return sorted(self._callbacks)

    def __contains__(self, magic_word: str) -> bool:
        return magic_word.lower() in self._callbacks

    def call(self, magic_word: str, context: PageContext, args: Iterable[str]) -> str:
        try:
            callback = self._callbacks[magic_word.lower()]
        except KeyError:
            raise KeyError(f"No parser function registered for {magic_word!r}") from None
        return callback(context, list(args))

    def expand(self, text: str, context: PageContext) -> str:
        """Replace registered function calls, innermost first.

        Calls to unknown functions are left as written.
        """

        def _replace(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in self:
                return match.group(0)
            raw_args = match.group(2)
            args = [] if raw_args is None else [arg.strip() for arg in raw_args.split("|")]
            return self.call(name, context, args)

        for passes in range(MAX_EXPANSION_PASSES):
            expanded = _CALL_RE.sub(_replace, text)
            if expanded == text:
                logger.debug("Expansion settled after %d pass(es)", passes)
                return expanded
            text = expanded
        logger.warning("Stopped expanding after %d passes", MAX_EXPANSION_PASSES)
        return text


def _positional(args: list[str], count: int) -> list[str]:
    """Pad or cut ``args`` to exactly ``count`` values."""

    return (args + [""] * count)[:count]


def create_registry(functions: ParserFunctions) -> FunctionRegistry:
    registry = FunctionRegistry()
    registry.register("navlist", lambda context, args: functions.navlist(context, *_positional(args, 4)))
    registry.register("urlformat", lambda context, args: functions.urlformat(context, *_positional(args, 1)))
    return registry
