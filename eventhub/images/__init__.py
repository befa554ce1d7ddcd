"""Image storage, variant derivation and upload ingestion."""

from eventhub.images.data_url import to_data_url
from eventhub.images.derivatives import DerivativeGenerator, DerivativeResult
from eventhub.images.ingestion import ImageIngestion, IngestionState, UploadResult
from eventhub.images.paths import ImageRef, ImageVariant, derive, derive_path, variant_of
from eventhub.images.storage import StoredUpload, UploadStorage
from eventhub.images.store import ImagePolicy, ImageStore

__all__ = [
    "DerivativeGenerator",
    "DerivativeResult",
    "ImageIngestion",
    "ImagePolicy",
    "ImageRef",
    "ImageStore",
    "ImageVariant",
    "IngestionState",
    "StoredUpload",
    "UploadResult",
    "UploadStorage",
    "derive",
    "derive_path",
    "to_data_url",
    "variant_of",
]
