from cityhealth.domain.suggestion.util.di.provider import SuggestionProvider

__all__ = ["SuggestionProvider"]
