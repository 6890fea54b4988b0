from cityhealth.domain.provider.util.di.provider import ProviderDirectoryProvider

__all__ = ["ProviderDirectoryProvider"]
