"""Internationalization of violation messages.

Messages are looked up by their canonical English text. A Translator holds
three tables (tokens, messages and formats), each mapping the canonical
text to ``{"lang" | "lang-REGION": translation}``. Lookup tries the
region-specific entry first, then the language entry, and finally falls
back to the canonical English text itself.

An I18nContext binds a language and region to a Translator and is what
the engine and constraints receive. An I18nProvider produces contexts,
typically from an HTTP ``Accept-Language`` header.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from bodyguard import messages

DEFAULT_LANGUAGE = messages.LANG_EN
DEFAULT_REGION = ""

SUPPORTED_LANGUAGES = frozenset(messages.BUNDLED_LANGUAGES)

# Languages without their own tables borrow a close supported one.
DEFAULT_FALLBACK_LANGUAGES: Dict[str, str] = {
    "at": messages.LANG_DE,
    "ch": messages.LANG_DE,
    "lb": messages.LANG_FR,
    "ca": messages.LANG_ES,
    "gl": messages.LANG_ES,
    "pt": messages.LANG_ES,
    "sc": messages.LANG_IT,
    "co": messages.LANG_IT,
}

Table = Dict[str, Dict[str, str]]


def _lookup(table: Table, language: str, region: str, text: str) -> str:
    entry = table.get(text)
    if not entry:
        return text
    if region:
        translated = entry.get(f"{language}-{region}")
        if translated is not None:
            return translated
    return entry.get(language, text)


def _add(table: Table, language: str, text: str, translation: str, region: Optional[str]) -> None:
    key = f"{language}-{region.upper()}" if region else language
    table.setdefault(text, {})[key] = translation


class Translator:
    """Translation tables for tokens, messages and formats.

    Args:
        tokens: Token table (defaults to a copy of the bundled one)
        messages_table: Message table (defaults to a copy of the bundled one)
        formats: Format table (defaults to a copy of the bundled one)

    Examples:
        >>> t = Translator()
        >>> t.translate_message("fr", "", "Missing property")
        'Propriété manquante'
        >>> t.translate_format("de", "", "Value expected to be of type {0}", "Zeichenfolge")
        'Wert sollte vom Typ Zeichenfolge sein'
    """

    def __init__(
        self,
        tokens: Optional[Table] = None,
        messages_table: Optional[Table] = None,
        formats: Optional[Table] = None,
    ) -> None:
        self.tokens: Table = copy.deepcopy(messages.BUNDLED_TOKENS if tokens is None else tokens)
        self.messages: Table = copy.deepcopy(messages.BUNDLED_MESSAGES if messages_table is None else messages_table)
        self.formats: Table = copy.deepcopy(messages.BUNDLED_FORMATS if formats is None else formats)

    def translate_token(self, language: str, region: str, token: str) -> str:
        return _lookup(self.tokens, language, region, token)

    def translate_message(self, language: str, region: str, message: str) -> str:
        return _lookup(self.messages, language, region, message)

    def translate_format(self, language: str, region: str, fmt: str, *args: Any) -> str:
        """Translate a format string and substitute its positional arguments."""
        return _lookup(self.formats, language, region, fmt).format(*args)

    def add_token_translation(self, language: str, token: str, translation: str, region: Optional[str] = None) -> None:
        _add(self.tokens, language, token, translation, region)

    def add_message_translation(self, language: str, message: str, translation: str, region: Optional[str] = None) -> None:
        _add(self.messages, language, message, translation, region)

    def add_format_translation(self, language: str, fmt: str, translation: str, region: Optional[str] = None) -> None:
        _add(self.formats, language, fmt, translation, region)


@dataclass(frozen=True)
class I18nContext:
    """A language/region pair bound to a Translator.

    Attributes:
        language: Lowercase language code (e.g. "fr")
        region: Uppercase region code or "" (e.g. "CA")
        translator: The tables used for lookup
    """
    language: str = DEFAULT_LANGUAGE
    region: str = DEFAULT_REGION
    translator: Translator = field(default_factory=Translator, compare=False, repr=False)

    def translate_message(self, message: str) -> str:
        return self.translator.translate_message(self.language, self.region, message)

    def translate_format(self, fmt: str, *args: Any) -> str:
        return self.translator.translate_format(self.language, self.region, fmt, *args)

    def translate_token(self, token: str) -> str:
        return self.translator.translate_token(self.language, self.region, token)


def parse_accept_language(header: str) -> List[Tuple[str, str]]:
    """Parse an Accept-Language header into (language, region) pairs by preference.

    Entries are ordered by descending q-weight; entries with equal weight keep
    their header order. ``*`` and entries with ``q=0`` are dropped.

    Examples:
        >>> parse_accept_language("fr-CH, fr;q=0.9, en;q=0.8, *;q=0.5")
        [('fr', 'CH'), ('fr', ''), ('en', '')]
    """
    weighted: List[Tuple[float, int, str, str]] = []
    for position, part in enumerate(header.split(",")):
        part = part.strip()
        if not part:
            continue
        tag, _, params = part.partition(";")
        tag = tag.strip()
        weight = 1.0
        for param in params.split(";"):
            name, _, value = param.strip().partition("=")
            if name.strip().lower() == "q":
                try:
                    weight = float(value.strip())
                except ValueError:
                    weight = 0.0
        if tag == "*" or not tag or weight <= 0:
            continue
        language, _, region = tag.replace("_", "-").partition("-")
        region = region.split("-")[-1] if region else ""
        weighted.append((-weight, position, language.lower(), region.upper()))
    weighted.sort()
    return [(language, region) for _, _, language, region in weighted]


class I18nProvider:
    """Produces I18nContext values for validations.

    Attributes:
        translator: Translator shared by every context this provider creates
        default_language: Language used when nothing acceptable is requested
        default_region: Region paired with the default language
        fallback_languages: Mapping of unsupported language to supported language
        supported_languages: Languages the provider will select
    """

    def __init__(
        self,
        translator: Optional[Translator] = None,
        default_language: str = DEFAULT_LANGUAGE,
        default_region: str = DEFAULT_REGION,
        fallback_languages: Optional[Mapping[str, str]] = None,
        supported_languages: Optional[frozenset] = None,
    ) -> None:
        self.translator = translator or Translator()
        self.default_language = default_language
        self.default_region = default_region
        self.fallback_languages = dict(DEFAULT_FALLBACK_LANGUAGES if fallback_languages is None else fallback_languages)
        self.supported_languages = frozenset(SUPPORTED_LANGUAGES if supported_languages is None else supported_languages)

    def default_context(self) -> I18nContext:
        return I18nContext(self.default_language, self.default_region, self.translator)

    def context_for(self, language: str, region: str = "") -> I18nContext:
        """Create a context for an explicit language, applying fallbacks."""
        language = language.lower()
        if language not in self.supported_languages:
            language = self.fallback_languages.get(language, "")
            if language not in self.supported_languages:
                return self.default_context()
        return I18nContext(language, region.upper(), self.translator)

    def context_from_accept_language(self, header: Optional[str]) -> I18nContext:
        """Create a context from the most preferred supported Accept-Language entry."""
        if not header:
            return self.default_context()
        for language, region in parse_accept_language(header):
            if language in self.supported_languages:
                return I18nContext(language, region, self.translator)
            fallback = self.fallback_languages.get(language)
            if fallback in self.supported_languages:
                return I18nContext(fallback, region, self.translator)
        return self.default_context()

    def context_from_headers(self, headers: Mapping[str, Any]) -> I18nContext:
        """Create a context from a header mapping (header names are case-insensitive)."""
        for name, value in headers.items():
            if name.lower() == "accept-language":
                if isinstance(value, (list, tuple)):
                    value = ",".join(value)
                return self.context_from_accept_language(value)
        return self.default_context()


_default_provider = I18nProvider()


def get_default_i18n_provider() -> I18nProvider:
    return _default_provider


def set_default_i18n_provider(provider: Optional[I18nProvider]) -> None:
    """Replace the process-wide default provider (None restores a fresh one)."""
    global _default_provider
    _default_provider = provider if provider is not None else I18nProvider()


def resolve_i18n(i18n: Optional[I18nContext]) -> I18nContext:
    """Return i18n, or the default provider's default context when None."""
    if i18n is not None:
        return i18n
    return _default_provider.default_context()


__all__ = [
    "DEFAULT_LANGUAGE",
    "DEFAULT_REGION",
    "DEFAULT_FALLBACK_LANGUAGES",
    "SUPPORTED_LANGUAGES",
    "Translator",
    "I18nContext",
    "I18nProvider",
    "parse_accept_language",
    "get_default_i18n_provider",
    "set_default_i18n_provider",
    "resolve_i18n",
]
