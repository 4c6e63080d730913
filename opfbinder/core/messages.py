"""
UIメッセージ国際化モジュール。

OSのロケールに基づいて日本語/英語のUIメッセージを自動切替する。
"""
import locale
import os
import sys

MESSAGES: dict[str, dict[str, str]] = {
    "ja": {
        # ツールタイトル
        "tool_title": "opfbinder - EPUB Package Builder",

        # コマンドライン
        "cli_description": "HTMLチャプターのフォルダからEPUBを生成します。",
        "arg_source": "HTMLチャプターが格納されたフォルダ",
        "arg_output": "出力EPUBファイルのパス",
        "arg_work_dir": "作業フォルダを作成する場所（デフォルト: システムの一時フォルダ）",
        "arg_no_decode": "HTML文字実体参照をデコードしない",
        "arg_lang": "UIメッセージの言語（ja / en）",
        "arg_verbose": "詳細ログを出力する",

        # 処理ログ
        "processing_start": "処理開始: {time}",
        "processing_end": "処理終了: {time}",
        "elapsed_time": "所要時間: {time}",
        "output_file": "生成ファイル: {path}",
        "processing_book": "ブック {number}: {title}",
        "processing_file": "処理中: {name}",
        "file_count": "{count} 個のチャプターファイルを処理します。",
        "processing_aborted": "処理を中断しました。",

        # エラー・バリデーション
        "folder_not_found": "フォルダが見つかりません: {path}",
        "no_chapters_in_folder": "{folder} にHTMLチャプターファイルが見つかりません。",

        # メタデータエラー
        "metadata_not_found": "エラー：書誌情報がありません\n期待されるファイル: {path}\n処理を中断しました。",
        "metadata_no_title": "エラー：書誌情報にタイトルがありません\n処理を中断しました。",

        # ロガープレフィックス
        "log_warning": "警告: {message}",
        "log_success": "成功: {message}",

        # 例外メッセージ
        "exception_input": "{file_type}がファイルでないか読み込めません: {file_path}",
        "exception_workspace_base": "作業フォルダの作成先がフォルダでないか書き込めません: {file_path}",
        "exception_duplicate_chapter": "同名のチャプターファイルが既に存在します: {file_path}",
        "exception_duplicate_asset": "同名のファイルが既に登録されています: {file_path}",
        "exception_mkdir": "フォルダを作成できません: {path}",
        "exception_write": "ファイルを書き込めません: {path}",
        "exception_read": "ファイルを読み込めません: {path}",
        "exception_copy": "ファイルを作業フォルダにコピーできません: {path}",
        "exception_parse": "チャプターHTMLを解析できません: {path}",
        "exception_archive_open": "EPUBファイルを作成できません: {path}",
        "exception_archive_write": "EPUBファイルを書き込めません: {path}",
        "exception_content_multi_book": "目次ページは単一ブックの出版物でのみ生成できます（ブック数: {count}）。",
        "exception_content_at_begin": "目次ページを先頭に配置する機能には対応していません。",
        "exception_late_chapter": "ビルド中にチャプターを追加することはできません: {name}",
        "exception_build_running": "この出版物は既にビルド中です。",
        "exception_already_built": "この出版物は既にビルド済みです。作り直す場合は新しい出版物を生成してください。",

        # ファイル種別名（InputError の file_type 引数用）
        "file_type_header": "チャプターヘッダー",
        "file_type_footer": "チャプターフッター",
        "file_type_chapter": "チャプター",
        "file_type_cover": "表紙画像",
        "file_type_style": "スタイルシート",
        "file_type_font": "フォント",
        "file_type_image": "画像",

        # EPUBビルダーログ
        "workspace_created": "作業フォルダを作成しました: {path}",
        "workspace_destroyed": "作業フォルダを削除しました: {path}",
        "chapter_staged": "チャプターを配置しました: {name}",
        "asset_staged": "ファイルを配置しました: {name}",
        "build_start": "EPUB生成開始: {title}",
        "build_summary": "ブック数: {books}、チャプター数: {chapters}",
        "stage_decode": "文字実体参照をデコードしています...",
        "stage_wrap": "チャプターにヘッダー・フッターを付加しています...",
        "stage_hooks": "ビルド前処理を実行しています...",
        "stage_content": "目次ページを生成しています: {title}",
        "stage_cover": "表紙ページを生成しています...",
        "stage_cover_exists": "表紙ページは既に存在します: {name}",
        "stage_toc": "toc.ncx を生成しています...",
        "stage_opf": "content.opf を生成しています...",
        "stage_package": "EPUBパッケージを作成しています...",
        "epub_saved": "EPUBを保存しました: {file}",
        "image_missing": "画像ファイルが見つかりません: {path}",
    },
    "en": {
        # Tool title
        "tool_title": "opfbinder - EPUB Package Builder",

        # Command line
        "cli_description": "Build an EPUB from a folder of HTML chapters.",
        "arg_source": "folder containing the HTML chapters",
        "arg_output": "path of the EPUB file to write",
        "arg_work_dir": "where to create the staging folder (default: system temp folder)",
        "arg_no_decode": "do not decode HTML character entities",
        "arg_lang": "UI message language (ja / en)",
        "arg_verbose": "verbose logging",

        # Processing log
        "processing_start": "Processing started: {time}",
        "processing_end": "Processing finished: {time}",
        "elapsed_time": "Elapsed time: {time}",
        "output_file": "Output file: {path}",
        "processing_book": "Book {number}: {title}",
        "processing_file": "Processing: {name}",
        "file_count": "Processing {count} chapter files.",
        "processing_aborted": "Processing aborted.",

        # Error / validation
        "folder_not_found": "Folder not found: {path}",
        "no_chapters_in_folder": "No HTML chapter files found in {folder}.",

        # Metadata errors
        "metadata_not_found": "Error: Bibliographic info not found\nExpected file: {path}\nProcessing aborted.",
        "metadata_no_title": "Error: No title in bibliographic info\nProcessing aborted.",

        # Logger prefixes
        "log_warning": "Warning: {message}",
        "log_success": "Success: {message}",

        # Exception messages
        "exception_input": "{file_type} is not a file or is not readable: {file_path}",
        "exception_workspace_base": "Workspace base is not a directory or is not writable: {file_path}",
        "exception_duplicate_chapter": "A chapter file with this name already exists: {file_path}",
        "exception_duplicate_asset": "A file with this name is already registered: {file_path}",
        "exception_mkdir": "Cannot create directory: {path}",
        "exception_write": "Cannot write file: {path}",
        "exception_read": "Cannot read file: {path}",
        "exception_copy": "Cannot copy file to the staging directory: {path}",
        "exception_parse": "Cannot parse chapter HTML: {path}",
        "exception_archive_open": "Failed to create publication: {path}",
        "exception_archive_write": "Cannot build publication: {path}",
        "exception_content_multi_book": "A content page can only be generated for single-book publications (books: {count}).",
        "exception_content_at_begin": "Placing the content page at the beginning is not supported.",
        "exception_late_chapter": "Chapters cannot be added while the publication is building: {name}",
        "exception_build_running": "This publication is already building.",
        "exception_already_built": "This publication has already been built. Create a new publication to build again.",

        # File type names (for InputError file_type argument)
        "file_type_header": "Chapter header",
        "file_type_footer": "Chapter footer",
        "file_type_chapter": "Chapter",
        "file_type_cover": "Cover image",
        "file_type_style": "Stylesheet",
        "file_type_font": "Font",
        "file_type_image": "Image",

        # EPUB builder log
        "workspace_created": "Staging directory created: {path}",
        "workspace_destroyed": "Staging directory removed: {path}",
        "chapter_staged": "Chapter staged: {name}",
        "asset_staged": "File staged: {name}",
        "build_start": "EPUB build started: {title}",
        "build_summary": "Books: {books}, chapters: {chapters}",
        "stage_decode": "Decoding character entities...",
        "stage_wrap": "Wrapping chapters with header and footer...",
        "stage_hooks": "Running pre-build hooks...",
        "stage_content": "Generating content page: {title}",
        "stage_cover": "Generating cover page...",
        "stage_cover_exists": "Cover page already exists: {name}",
        "stage_toc": "Generating toc.ncx...",
        "stage_opf": "Generating content.opf...",
        "stage_package": "Packaging EPUB...",
        "epub_saved": "EPUB saved: {file}",
        "image_missing": "Image file not found: {path}",
    },
}

# OS言語判定
def _detect_ui_language() -> str:
    """OSのロケールから UI 言語を判定する。"""
    # macOS: システム言語設定（AppleLanguages）を最優先
    # LANG=C.UTF-8 等はシステム言語と無関係なため、macOS設定を先にチェック
    if sys.platform == "darwin":
        try:
            import subprocess
            result = subprocess.run(
                ["defaults", "read", "-g", "AppleLanguages"],
                capture_output=True, text=True, timeout=2
            )
            if result.returncode == 0:
                # 出力例: ("ja-JP", "en-US", ...) → 先頭の言語コードを取得
                for line in result.stdout.splitlines():
                    line = line.strip().strip('",() ')
                    if line:
                        return "ja" if line.startswith("ja") else "en"
        except (OSError, subprocess.SubprocessError):
            pass
    # 環境変数をチェック（LC_ALL, LC_MESSAGES, LANG）
    # C / C.UTF-8 / POSIX はデフォルト値のため言語指定なしとして除外
    for env_var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(env_var, "")
        if value and not value.startswith("C") and value != "POSIX":
            return "ja" if value.startswith("ja") else "en"
    # フォールバック: locale.getlocale()
    # Windows では "Japanese_Japan" のように返るため、大文字小文字を無視して判定
    try:
        loc = locale.getlocale()[0] or ""
    except ValueError:
        loc = ""
    return "ja" if loc.lower().startswith("ja") else "en"

_ui_lang = _detect_ui_language()


def set_ui_language(lang_code: str) -> None:
    """
    UIメッセージ言語を手動で設定する。

    Parameters
    ----------
    lang_code : str
        言語コード（例: "ja", "ja_JP", "en_US"）。
    """
    global _ui_lang
    _ui_lang = "ja" if lang_code.startswith("ja") else "en"


def get_ui_language() -> str:
    """現在のUIメッセージ言語（"ja" または "en"）を返す。"""
    return _ui_lang


def msg(key: str, **kwargs) -> str:
    """
    指定キーのUIメッセージを現在のロケールに応じて返す。

    Parameters
    ----------
    key : str
        メッセージキー
    **kwargs
        メッセージ内のプレースホルダーに渡す値

    Returns
    -------
    str
        ロケールに応じたメッセージ文字列
    """
    template = MESSAGES[_ui_lang].get(key, key)
    if kwargs:
        return template.format(**kwargs)
    return template
