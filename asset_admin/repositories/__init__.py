from asset_admin.repositories.base_repository import BaseRepository
from asset_admin.repositories.asset_repository import AssetRepository
from asset_admin.repositories.lookup_repository import (
    ReferenceRepository,
    ManufacturerRepository,
    CategoryRepository,
    SupplierRepository,
    LocationRepository,
)
from asset_admin.repositories.settings_repository import SettingsRepository
from asset_admin.repositories.user_repository import UserRepository
