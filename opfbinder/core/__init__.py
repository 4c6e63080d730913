"""
コアモジュール。

共通の例外、ロガー、設定、メタデータ読み込みを提供する。
"""
from opfbinder.core.exceptions import (
    EpubGenerationError,
    InputError,
    DuplicateChapterError,
    StagingError,
    SourceParsingError,
    PackagingError,
    UnsupportedConfigurationError,
    NoContentError,
)
from opfbinder.core.logger import (
    debug, info, warning, error, success, section, separator, stage,
    set_log_level, LogLevel
)
from opfbinder.core.config import (
    LANGUAGE_CONFIGS,
    get_language_config,
    LanguageConfig,
)
from opfbinder.core.metadata_reader import (
    BookMetadata,
    CreatorEntry,
    load_metadata,
    load_metadata_for_folder,
    MetadataFileNotFoundError,
    MetadataTitleMissingError,
)

__all__ = [
    # exceptions
    "EpubGenerationError", "InputError", "DuplicateChapterError", "StagingError",
    "SourceParsingError", "PackagingError", "UnsupportedConfigurationError",
    "NoContentError",
    # logger
    "debug", "info", "warning", "error", "success", "section", "separator", "stage",
    "set_log_level", "LogLevel",
    # config
    "LANGUAGE_CONFIGS", "get_language_config", "LanguageConfig",
    # metadata_reader
    "BookMetadata", "CreatorEntry", "load_metadata", "load_metadata_for_folder",
    "MetadataFileNotFoundError", "MetadataTitleMissingError",
]
