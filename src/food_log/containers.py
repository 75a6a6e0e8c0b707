"""Dependency container wiring for the food log core."""

from dataclasses import dataclass

from supabase import create_client

from food_log.adapters.supabase_catalog_repository import SupabaseCatalogRepository
from food_log.adapters.supabase_ledger_repository import SupabaseLedgerRepository
from food_log.adapters.supabase_settings_repository import (
    SupabaseSettingsRepository,
)
from food_log.config import Settings
from food_log.services.catalog import CatalogRepository, CatalogService
from food_log.services.food_repository import FoodRepository
from food_log.services.ledger import LedgerRepository, LedgerService
from food_log.services.live import ChangeNotifier
from food_log.services.targets import SettingsRepository, TargetsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    notifier: ChangeNotifier
    catalog_service: CatalogService
    ledger_service: LedgerService
    targets_service: TargetsService
    food_repository: FoodRepository


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default container backed by Supabase."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    return wire_container(
        resolved_settings,
        catalog_repository=SupabaseCatalogRepository(supabase_client),
        ledger_repository=SupabaseLedgerRepository(supabase_client),
        settings_repository=SupabaseSettingsRepository(supabase_client),
    )


def wire_container(
    settings: Settings,
    *,
    catalog_repository: CatalogRepository,
    ledger_repository: LedgerRepository,
    settings_repository: SettingsRepository,
) -> AppContainer:
    """Wire services around the given repositories."""
    notifier = ChangeNotifier()
    catalog_service = CatalogService(
        repository=catalog_repository,
        notifier=notifier,
        suggestion_limit=settings.suggestion_limit,
    )
    ledger_service = LedgerService(repository=ledger_repository, notifier=notifier)
    targets_service = TargetsService(
        repository=settings_repository,
        notifier=notifier,
        default_calories=settings.default_calorie_target,
        default_protein=settings.default_protein_target,
    )
    food_repository = FoodRepository(
        catalog=catalog_service,
        ledger=ledger_service,
        targets=targets_service,
        debounce_seconds=settings.suggestion_debounce_seconds,
        min_query_length=settings.suggestion_min_length,
    )
    return AppContainer(
        settings=settings,
        notifier=notifier,
        catalog_service=catalog_service,
        ledger_service=ledger_service,
        targets_service=targets_service,
        food_repository=food_repository,
    )
