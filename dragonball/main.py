import logging

from dragonball.services.catalog_service import CharacterCatalogService
from dragonball.services.favorites import FirestoreFavoritesStore
from dragonball.services.favorites_view_model import FavoritesViewModel
from dragonball.settings import AppSettings, get_settings

# Configure logging
logging.basicConfig(
    level=get_settings().log_level_numeric,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _validate_environment(*, active_settings: AppSettings | None = None) -> None:
    """Log warnings for optional configuration that is missing."""

    configured = active_settings or get_settings()
    warnings = configured.optional_config_warnings()

    if warnings:
        logger.warning("=" * 60)
        logger.warning("Environment Configuration Warnings:")
        for warning in warnings:
            logger.warning("  • %s", warning)
        logger.warning("=" * 60)


def validate_environment() -> None:
    """Public wrapper so embedding applications can trigger configuration validation."""

    _validate_environment()


def create_favorites_view_model(
    active_settings: AppSettings | None = None,
) -> FavoritesViewModel:
    """Wire the Firestore store and the catalog client into a view model.

    Call :meth:`FavoritesViewModel.aclose` when the screen goes away to release
    the HTTP clients created here.
    """

    configured = active_settings or get_settings()
    _validate_environment(active_settings=configured)

    store = FirestoreFavoritesStore.from_settings(configured)
    catalog = CharacterCatalogService.from_settings(configured)
    logger.info("Favorites view model using catalog %s", configured.catalog_base_url)
    return FavoritesViewModel(store=store, catalog=catalog)

