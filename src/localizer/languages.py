"""
Language code to human-readable name lookup for translation prompts.
"""

LANGUAGE_NAMES = {
    "ro": "Romanian",
    "en": "English",
    "ru": "Russian",
    "de": "German",
    "fr": "French",
    "es": "Spanish",
    "it": "Italian",
    "pt": "Portuguese",
    "pt-br": "Brazilian Portuguese",
    "pt-pt": "European Portuguese",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "zh-cn": "Simplified Chinese",
    "zh-hans": "Simplified Chinese",
    "zh-tw": "Traditional Chinese",
    "zh-hant": "Traditional Chinese",
    "ar": "Arabic",
    "hi": "Hindi",
    "uk": "Ukrainian",
    "pl": "Polish",
    "nl": "Dutch",
    "sv": "Swedish",
    "no": "Norwegian",
    "nb": "Norwegian Bokmål",
    "da": "Danish",
    "fi": "Finnish",
    "tr": "Turkish",
    "he": "Hebrew",
    "th": "Thai",
    "vi": "Vietnamese",
    "hu": "Hungarian",
    "cs": "Czech",
    "sk": "Slovak",
    "bg": "Bulgarian",
    "el": "Greek",
    "hr": "Croatian",
    "sr": "Serbian",
    "sl": "Slovenian",
    "lt": "Lithuanian",
    "lv": "Latvian",
    "et": "Estonian",
    "id": "Indonesian",
    "ms": "Malay",
    "fa": "Persian",
    "bn": "Bengali",
    "ur": "Urdu",
    "ta": "Tamil",
    "sw": "Swahili",
    "ca": "Catalan",
    "es-419": "Latin American Spanish",
    "en-gb": "British English",
    "en-us": "American English",
    "fr-ca": "Canadian French",
}


def get_language_name(language_code: str) -> str:
    """Get human-readable language name from language code.

    Regional tags fall back to their base language; unknown codes are
    returned unchanged.
    """
    key = (language_code or "").strip().lower().replace("_", "-")
    if key in LANGUAGE_NAMES:
        return LANGUAGE_NAMES[key]
    base = key.split("-")[0]
    if base and base in LANGUAGE_NAMES:
        return LANGUAGE_NAMES[base]
    return language_code


def language_tag(language_code: str) -> str:
    """Tag used when text passes through untranslated, e.g. ``[FR]``."""
    return f"[{language_code.upper()}]"
