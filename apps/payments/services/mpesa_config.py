"""
M-Pesa gateway configuration.

Built once from Django settings and handed to PaymentService, so tests and
callers can swap in their own credentials without touching settings.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional

from django.conf import settings

from apps.common.exceptions import PaymentConfigurationError


class GatewayMode(str, Enum):
    SANDBOX = 'sandbox'
    LIVE = 'live'

    @classmethod
    def from_environment(cls, environment: str) -> 'GatewayMode':
        if (environment or '').lower() in ('live', 'production'):
            return cls.LIVE
        return cls.SANDBOX


@dataclass(frozen=True)
class ProviderCredentials:
    """Credentials for one mobile money carrier"""
    name: str
    base_url: str
    api_key: str = ''
    public_key: str = ''
    service_provider_code: str = ''
    mode: GatewayMode = GatewayMode.SANDBOX

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.public_key)

    @property
    def is_live(self) -> bool:
        return self.mode == GatewayMode.LIVE

    def ensure_usable(self):
        """Live mode cannot run without keys; sandbox never needs them"""
        if self.is_live and not self.has_credentials:
            raise PaymentConfigurationError(f"M-Pesa configuration missing for {self.name}")


@dataclass(frozen=True)
class MpesaConfig:
    providers: Dict[str, ProviderCredentials] = field(default_factory=dict)
    default_provider: str = 'vodacom'
    timeout: int = 30
    reference_prefix: str = 'MYSHOP'

    @classmethod
    def from_settings(cls) -> 'MpesaConfig':
        """
        Read provider credentials from settings.
        A provider without API key and public key is placed in sandbox mode.
        """
        requested_mode = GatewayMode.from_environment(settings.MPESA_ENVIRONMENT)
        providers = {}
        for name, values in settings.MPESA_PROVIDERS.items():
            credentials = ProviderCredentials(
                name=name,
                base_url=values.get('BASE_URL', ''),
                api_key=values.get('API_KEY', ''),
                public_key=values.get('PUBLIC_KEY', ''),
                service_provider_code=values.get('SERVICE_PROVIDER_CODE', ''),
            )
            mode = requested_mode if credentials.has_credentials else GatewayMode.SANDBOX
            providers[name] = replace(credentials, mode=mode)

        return cls(
            providers=providers,
            default_provider=settings.MPESA_DEFAULT_PROVIDER,
            timeout=settings.MPESA_REQUEST_TIMEOUT,
            reference_prefix=settings.PAYMENT_REFERENCE_PREFIX,
        )

    def for_provider(self, name: Optional[str] = None) -> ProviderCredentials:
        provider = name or self.default_provider
        try:
            return self.providers[provider]
        except KeyError:
            raise PaymentConfigurationError(f"Unknown M-Pesa provider: {provider}")
