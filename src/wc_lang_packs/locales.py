"""GlotPress locale metadata.

A static subset of the GlotPress locale definitions, keyed by WordPress
locale code (``wp_locale``). Lookups never fail: an unknown locale or
property yields an empty string.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class GPLocale:
    """A GlotPress locale definition."""

    wp_locale: str
    english_name: str
    native_name: str
    lang_code_iso_639_1: str = ""
    lang_code_iso_639_2: str = ""
    lang_code_iso_639_3: str = ""


# (wp_locale, english name, native name, ISO 639-1, ISO 639-2, ISO 639-3)
_LOCALE_ROWS = [
    ("ar", "Arabic", "العربية", "ar", "ara", "ara"),
    ("bg_BG", "Bulgarian", "Български", "bg", "bul", "bul"),
    ("ca", "Catalan", "Català", "ca", "cat", "cat"),
    ("cs_CZ", "Czech", "Čeština", "cs", "ces", "ces"),
    ("da_DK", "Danish", "Dansk", "da", "dan", "dan"),
    ("de_CH", "German (Switzerland)", "Deutsch (Schweiz)", "de", "deu", "deu"),
    ("de_DE", "German", "Deutsch", "de", "deu", "deu"),
    ("el", "Greek", "Ελληνικά", "el", "ell", "ell"),
    ("en_AU", "English (Australia)", "English (Australia)", "en", "eng", "eng"),
    ("en_CA", "English (Canada)", "English (Canada)", "en", "eng", "eng"),
    ("en_GB", "English (UK)", "English (UK)", "en", "eng", "eng"),
    ("es_AR", "Spanish (Argentina)", "Español de Argentina", "es", "spa", "spa"),
    ("es_ES", "Spanish (Spain)", "Español", "es", "spa", "spa"),
    ("es_MX", "Spanish (Mexico)", "Español de México", "es", "spa", "spa"),
    ("et", "Estonian", "Eesti", "et", "est", "est"),
    ("fa_IR", "Persian", "فارسی", "fa", "fas", "fas"),
    ("fi", "Finnish", "Suomi", "fi", "fin", "fin"),
    ("fr_CA", "French (Canada)", "Français du Canada", "fr", "fra", "fra"),
    ("fr_FR", "French (France)", "Français", "fr", "fra", "fra"),
    ("he_IL", "Hebrew", "עִבְרִית", "he", "heb", "heb"),
    ("hi_IN", "Hindi", "हिन्दी", "hi", "hin", "hin"),
    ("hr", "Croatian", "Hrvatski", "hr", "hrv", "hrv"),
    ("hu_HU", "Hungarian", "Magyar", "hu", "hun", "hun"),
    ("id_ID", "Indonesian", "Bahasa Indonesia", "id", "ind", "ind"),
    ("it_IT", "Italian", "Italiano", "it", "ita", "ita"),
    ("ja", "Japanese", "日本語", "ja", "jpn", "jpn"),
    ("ko_KR", "Korean", "한국어", "ko", "kor", "kor"),
    ("lt_LT", "Lithuanian", "Lietuvių kalba", "lt", "lit", "lit"),
    ("lv", "Latvian", "Latviešu valoda", "lv", "lav", "lav"),
    ("nb_NO", "Norwegian (Bokmål)", "Norsk bokmål", "nb", "nob", "nob"),
    ("nl_NL", "Dutch", "Nederlands", "nl", "nld", "nld"),
    ("pl_PL", "Polish", "Polski", "pl", "pol", "pol"),
    ("pt_BR", "Portuguese (Brazil)", "Português do Brasil", "pt", "por", "por"),
    ("pt_PT", "Portuguese (Portugal)", "Português", "pt", "por", "por"),
    ("ro_RO", "Romanian", "Română", "ro", "ron", "ron"),
    ("ru_RU", "Russian", "Русский", "ru", "rus", "rus"),
    ("sk_SK", "Slovak", "Slovenčina", "sk", "slk", "slk"),
    ("sl_SI", "Slovenian", "Slovenščina", "sl", "slv", "slv"),
    ("sr_RS", "Serbian", "Српски језик", "sr", "srp", "srp"),
    ("sv_SE", "Swedish", "Svenska", "sv", "swe", "swe"),
    ("th", "Thai", "ไทย", "th", "tha", "tha"),
    ("tr_TR", "Turkish", "Türkçe", "tr", "tur", "tur"),
    ("uk", "Ukrainian", "Українська", "uk", "ukr", "ukr"),
    ("vi", "Vietnamese", "Tiếng Việt", "vi", "vie", "vie"),
    ("zh_CN", "Chinese (China)", "简体中文", "zh", "zho", "zho"),
    ("zh_TW", "Chinese (Taiwan)", "繁體中文", "zh", "zho", "zho"),
]

LOCALES: dict[str, GPLocale] = {row[0]: GPLocale(*row) for row in _LOCALE_ROWS}

# Property names accepted by get_locale_prop, mapped to GPLocale attributes
LOCALE_PROPS = {
    "EnglishName": "english_name",
    "NativeName": "native_name",
    "LangCodeISO6391": "lang_code_iso_639_1",
    "LangCodeISO6392": "lang_code_iso_639_2",
    "LangCodeISO6393": "lang_code_iso_639_3",
}


def get_locale(locale: str) -> GPLocale | None:
    """Return the locale definition for a WordPress locale code, if known."""
    return LOCALES.get(locale)


def get_locale_prop(locale: str, prop: str) -> str:
    """Look up a single property of a locale.

    Args:
        locale: WordPress locale code (e.g. 'es_ES')
        prop: One of the keys of LOCALE_PROPS

    Returns:
        The property value, or an empty string for an unknown locale or property
    """
    definition = LOCALES.get(locale)
    attr = LOCALE_PROPS.get(prop)
    if definition is None or attr is None:
        return ""
    return getattr(definition, attr)
