from fastapi import Depends

from .config import Settings, get_settings
from .services.forwarder import StorageServiceClient


def get_storage_client(settings: Settings = Depends(get_settings)) -> StorageServiceClient:
    return StorageServiceClient.from_settings(settings)
