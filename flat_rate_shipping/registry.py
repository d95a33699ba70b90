"""
Provider registry: maps shipping provider names to stage classes.

Every stage exposes resolve(context, cart, previous_result) -> StageResult.
"""

from .flat_rate import FlatRateShippingStage, PACKAGE_NAME as FLAT_RATE

STAGE_REGISTRY: dict[str, type] = {
    FLAT_RATE: FlatRateShippingStage,
}


def get_stage(provider: str):
    """Returns an instance of the stage for a provider name, or raises ValueError."""
    if provider not in STAGE_REGISTRY:
        raise ValueError(
            f"No shipping rate stage registered for provider: {provider}. "
            f"Available: {list(STAGE_REGISTRY.keys())}"
        )
    return STAGE_REGISTRY[provider]()


def has_stage(provider: str) -> bool:
    """Check if a stage exists for a provider name."""
    return provider in STAGE_REGISTRY


def list_stages() -> list[str]:
    """List all registered provider names."""
    return list(STAGE_REGISTRY.keys())
