# Content service package: models, storage and recommendations

from .errors import (
    CancelledError,
    ConflictError,
    DuplicateRecordError,
    DuplicateUsernameError,
    EngineError,
    InternalError,
    InvalidInputError,
    NotFoundError,
    ServiceError,
    StoreError,
    StoreTimeoutError,
)
from .models import Article, Interaction, InteractionType, User
from .store import ContentStore, JsonContentStore, MongoContentStore, create_store
from .recommendations import (
    RecommendationEngine,
    RecommendationResult,
    build_default_engine,
)
from .logging_config import (
    setup_logging,
    stop_logging,
    ThreadSafeLoggingConfig,
)

__all__ = [
    "CancelledError",
    "ConflictError",
    "DuplicateRecordError",
    "DuplicateUsernameError",
    "EngineError",
    "InternalError",
    "InvalidInputError",
    "NotFoundError",
    "ServiceError",
    "StoreError",
    "StoreTimeoutError",
    "Article",
    "Interaction",
    "InteractionType",
    "User",
    "ContentStore",
    "JsonContentStore",
    "MongoContentStore",
    "create_store",
    "RecommendationEngine",
    "RecommendationResult",
    "build_default_engine",
    "setup_logging",
    "stop_logging",
    "ThreadSafeLoggingConfig",
]
