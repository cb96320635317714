"""
FastAPI dependency injection.

Dependencies provide the settings, the provider client, and the analyst
service to route handlers. The provider client is a process-wide
singleton built once in the application lifespan and kept on
``app.state``; handlers receive it through Depends rather than reading
a module global.
"""

import logging
from typing import Annotated

from fastapi import Depends, Request

from ..config.settings import Settings, get_settings
from ..core.analysis.analyst import AdAnalyst, AnalystConfig, ProviderClient

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_provider_client(request: Request) -> ProviderClient:
    """Return the provider client created at startup."""
    client = getattr(request.app.state, "provider_client", None)
    if client is None:
        raise RuntimeError("Provider client is not initialized")
    return client


def get_analyst(
    settings: Annotated[Settings, Depends(get_settings)],
    provider: Annotated[ProviderClient, Depends(get_provider_client)],
) -> AdAnalyst:
    """
    Provide an AdAnalyst bound to the shared provider client.

    The analyst is stateless, so a new instance per request is cheap.
    """
    config = AnalystConfig(
        combined_max_tokens=settings.combined_max_tokens,
        visuals_max_tokens=settings.visuals_max_tokens,
        audio_max_tokens=settings.audio_max_tokens,
    )
    return AdAnalyst(provider=provider, config=config)


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

SettingsDep = Annotated[Settings, Depends(get_settings)]
AnalystDep = Annotated[AdAnalyst, Depends(get_analyst)]
