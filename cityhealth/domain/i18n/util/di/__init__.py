from cityhealth.domain.i18n.util.di.provider import I18nProvider

__all__ = ["I18nProvider"]
