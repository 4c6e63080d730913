"""
EPUB生成処理用のカスタム例外クラス。

処理パイプラインの各段階で発生するエラーを明確に分類し、
適切なエラーハンドリングを可能にします。
"""
from opfbinder.core.messages import msg


class EpubGenerationError(Exception):
    """EPUB生成処理の基底例外クラス。"""
    pass


class InputError(EpubGenerationError):
    """呼び出し側が指定したパスが存在しない・通常ファイルでない・読めない場合の例外。"""

    def __init__(self, file_path: str, file_type: str = "", message: str | None = None):
        self.file_path = str(file_path)
        self.file_type = file_type
        if message is None:
            message = msg("exception_input", file_type=file_type, file_path=file_path)
        super().__init__(message)


class DuplicateChapterError(InputError):
    """同名のチャプターファイルが既に作業フォルダに存在する場合の例外。"""

    def __init__(self, file_path: str):
        super().__init__(file_path, message=msg("exception_duplicate_chapter", file_path=file_path))


class StagingError(EpubGenerationError):
    """作業フォルダへのフォルダ作成・書き込み・コピーに失敗した場合の例外。"""

    def __init__(self, message: str, file_path: str = ""):
        self.file_path = str(file_path)
        super().__init__(message)


class SourceParsingError(EpubGenerationError):
    """配置済みチャプターHTMLのパースエラー。"""

    def __init__(self, message: str, source_file: str = ""):
        self.source_file = str(source_file)
        super().__init__(message)


class PackagingError(EpubGenerationError):
    """EPUBアーカイブの作成・書き込み・確定に失敗した場合の例外。"""

    def __init__(self, message: str, output_file: str = ""):
        self.output_file = str(output_file)
        super().__init__(message)


class UnsupportedConfigurationError(EpubGenerationError):
    """未対応の設定や操作が要求された場合の例外。"""
    pass


class NoContentError(EpubGenerationError):
    """処理対象のコンテンツが存在しない場合のエラー。"""

    def __init__(self, message: str):
        super().__init__(message)
