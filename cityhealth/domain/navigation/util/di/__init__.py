from cityhealth.domain.navigation.util.di.provider import NavigationProvider

__all__ = ["NavigationProvider"]
