from dataclasses import dataclass

from catalog_admin.core.services import BlobStorage, DbSessionService
from catalog_admin.runtime.config.config_data import ConfigData


@dataclass
class ApplicationDependencies:
    config: ConfigData
    database_service: DbSessionService
    blob_storage: BlobStorage
