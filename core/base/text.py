"""
Bilingual text helpers (English / Arabic).

Django-free so the API client can use them when rendering history rows.
"""

SUPPORTED_LOCALES = ('en', 'ar')


def normalize_locale(locale):
    """'ar-SA' -> 'ar'; anything unsupported falls back to 'en'."""
    if not locale:
        return 'en'
    language = str(locale).replace('_', '-').split('-')[0].lower()
    return language if language in SUPPORTED_LOCALES else 'en'


def localized_text(text_en=None, text_ar=None, locale='en'):
    """Text in the requested language, falling back to the other one."""
    if normalize_locale(locale) == 'ar':
        return text_ar or text_en or ''
    return text_en or text_ar or ''
