import logging
from typing import Iterable
from app.platform.ports.object_storage import ObjectStoragePort

logger = logging.getLogger(__name__)

def discard_objects(storage: ObjectStoragePort, keys: Iterable[str]) -> list[str]:
    """Delete stored objects one by one, returning the keys that could not be deleted.

    Used after the owning rows are gone (or were never committed), so a failure
    here is logged and reported instead of raised.
    """
    failed: list[str] = []
    for key in keys:
        try:
            storage.delete(key)
        except Exception as e:
            logger.warning(f"Could not delete stored object {key}: {e}")
            failed.append(key)
    return failed
