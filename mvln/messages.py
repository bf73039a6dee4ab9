"""
User-facing text for the command line interface.

The move engine reports results and failures as structured values
(:class:`mvln.mover.MoveOutcome` and the :mod:`mvln.errors` classes).  This
module turns them into localized status lines, shell-command previews
(``mv`` and ``ln -s``) and recovery instructions.  It only reads the
attributes of those values; it never inspects the filesystem.

Two locales are bundled: ``en-US`` (the fallback) and ``zh-CN``.
"""

from __future__ import annotations

import logging
import os
import shlex
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from . import errors

__all__ = [
    "DEFAULT_LOCALE",
    "CATALOGS",
    "detect_locale",
    "Messages",
    "mv_command",
    "ln_command",
]

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en-US"

CATALOGS: Dict[str, Dict[str, str]] = {
    "en-US": {
        "op-moving": "Moving {src} -> {dest}",
        "op-linking": "Linking {link} -> {target}",
        "op-dry-run": "[DRY-RUN] No changes will be made",
        "op-complete": "Done: {files} file(s) moved, {links} symlink(s) created",
        "op-dry-run-complete": "Dry run: {files} file(s) would be moved",
        "warn-copied-not-removed": "Warning: {src} was copied to {dest} but the original could not be removed; the data now exists in both places",
        "err-source-not-found": "Source not found: {path}",
        "err-source-access": "Cannot access source {path}: {reason}",
        "err-dest-exists": "Destination already exists: {path} (use --force to overwrite)",
        "err-is-directory": "Source is a directory: {path}",
        "err-is-directory-hint": "Use -w/--whole-dir to move the directory itself, or a glob such as '{path}/*' to move its contents",
        "err-same-path": "Source and destination are the same: {path}",
        "err-dest-inside-source": "Cannot move directory into itself: {src} -> {dest}",
        "err-type-mismatch": "Cannot replace {dest_type} with {src_type}: {src} -> {dest}",
        "err-move-failed": "Failed to move {src} to {dest}: {reason}",
        "err-copy-failed": "Failed to copy {src} to {dest}: {reason}",
        "err-remove-failed": "Copied but failed to remove source {src}: {reason}",
        "err-symlink-failed": "Failed to create symlink {link} -> {target}: {reason}",
        "err-create-dir-failed": "Failed to create directory {path}: {reason}",
        "err-invalid-destination": "Invalid destination: {reason}",
        "err-invalid-path": "Invalid path {path}: {reason}",
        "err-glob-failed": "Glob expansion failed: {reason}",
        "err-batch-failed": "{count} operation(s) failed",
        "err-multiple-sources": "destination must be a directory when moving multiple files",
        "recovery-header": "Your data is safe at: {dest}",
        "recovery-command": "To finish the operation, create the link manually:",
        "recovery-ln": "ln -s {target} {src}",
        "recovery-undo": "Or move the data back:",
        "recovery-mv": "mv {dest} {src}",
    },
    "zh-CN": {
        "op-moving": "正在移动 {src} -> {dest}",
        "op-linking": "正在链接 {link} -> {target}",
        "op-dry-run": "[预览模式] 不会进行任何更改",
        "op-complete": "完成：已移动 {files} 个文件，已创建 {links} 个符号链接",
        "op-dry-run-complete": "预览：将移动 {files} 个文件",
        "warn-copied-not-removed": "警告：{src} 已复制到 {dest}，但无法删除原文件；数据现在存在于两个位置",
        "err-source-not-found": "源不存在：{path}",
        "err-source-access": "无法访问源 {path}：{reason}",
        "err-dest-exists": "目标已存在：{path}（使用 --force 覆盖）",
        "err-is-directory": "源是目录：{path}",
        "err-is-directory-hint": "使用 -w/--whole-dir 移动整个目录，或使用 '{path}/*' 之类的通配符移动其内容",
        "err-same-path": "源和目标相同：{path}",
        "err-dest-inside-source": "无法将目录移动到其自身内部：{src} -> {dest}",
        "err-type-mismatch": "无法用{src_type}替换{dest_type}：{src} -> {dest}",
        "err-move-failed": "无法将 {src} 移动到 {dest}：{reason}",
        "err-copy-failed": "无法将 {src} 复制到 {dest}：{reason}",
        "err-remove-failed": "已复制，但无法删除源 {src}：{reason}",
        "err-symlink-failed": "无法创建符号链接 {link} -> {target}：{reason}",
        "err-create-dir-failed": "无法创建目录 {path}：{reason}",
        "err-invalid-destination": "无效的目标：{reason}",
        "err-invalid-path": "无效的路径 {path}：{reason}",
        "err-glob-failed": "通配符展开失败：{reason}",
        "err-batch-failed": "{count} 个操作失败",
        "err-multiple-sources": "移动多个文件时，目标必须是目录",
        "recovery-header": "您的数据安全地保存在：{dest}",
        "recovery-command": "要完成操作，请手动创建链接：",
        "recovery-ln": "ln -s {target} {src}",
        "recovery-undo": "或者将数据移回：",
        "recovery-mv": "mv {dest} {src}",
    },
}

LOCALE_VARIABLES = ("MVLN_LANG", "LC_ALL", "LC_MESSAGES", "LANG")


def detect_locale(env: Optional[Mapping[str, str]] = None) -> str:
    """Pick a bundled locale from the environment.

    The first non-empty variable among ``MVLN_LANG``, ``LC_ALL``,
    ``LC_MESSAGES`` and ``LANG`` decides.  Any Chinese locale (``zh``,
    ``zh_CN.UTF-8``, ``zh-Hans``...) selects ``zh-CN``; everything else,
    including ``C`` and ``POSIX``, selects ``en-US``.
    """
    env = os.environ if env is None else env
    for name in LOCALE_VARIABLES:
        value = env.get(name)
        if value:
            break
    else:
        return DEFAULT_LOCALE
    language = value.split(".", 1)[0].replace("_", "-").lower()
    if language == "zh" or language.startswith("zh-"):
        return "zh-CN"
    return DEFAULT_LOCALE


def _quote(value: object) -> str:
    return shlex.quote(str(value))


def mv_command(src: object, dest: object) -> str:
    """Shell equivalent of the move step."""
    return f"mv {_quote(src)} {_quote(dest)}"


def ln_command(target: object, link: object) -> str:
    """Shell equivalent of the link step."""
    return f"ln -s {_quote(target)} {_quote(link)}"


class Messages:
    """Localized message lookup and formatting of mvln results."""

    def __init__(self, locale: Optional[str] = None) -> None:
        locale = locale or detect_locale()
        if locale not in CATALOGS:
            logger.debug("No catalog for locale %s, using %s", locale, DEFAULT_LOCALE)
            locale = DEFAULT_LOCALE
        self.locale = locale
        self._catalog = CATALOGS[locale]

    def msg(self, message_id: str, **args: object) -> str:
        """Format message ``message_id`` with ``args``.

        An unknown id is returned as is, and a template whose placeholders
        are not all supplied is returned unformatted, so a bad lookup never
        hides the underlying error.
        """
        template = self._catalog.get(message_id)
        if template is None:
            template = CATALOGS[DEFAULT_LOCALE].get(message_id)
        if template is None:
            return message_id
        try:
            return template.format(**args)
        except (KeyError, IndexError) as exc:
            logger.debug("Missing argument %s for message %s", exc, message_id)
            return template

    def describe_error(self, error: errors.MvlnError) -> str:
        """Return the localized description of ``error``."""
        if isinstance(error, errors.SourceNotFoundError):
            return self.msg("err-source-not-found", path=error.path)
        if isinstance(error, errors.SourceAccessError):
            return self.msg("err-source-access", path=error.path, reason=error.reason)
        if isinstance(error, errors.DestinationExistsError):
            return self.msg("err-dest-exists", path=error.path)
        if isinstance(error, errors.IsDirectoryError):
            return self.msg("err-is-directory", path=error.path)
        if isinstance(error, errors.SameSourceAndDestError):
            return self.msg("err-same-path", path=error.path)
        if isinstance(error, errors.DestinationInsideSourceError):
            return self.msg("err-dest-inside-source", src=error.source, dest=error.destination)
        if isinstance(error, errors.TypeMismatchError):
            return self.msg(
                "err-type-mismatch",
                src=error.source,
                dest=error.destination,
                src_type=error.source_type,
                dest_type=error.destination_type,
            )
        if isinstance(error, errors.MoveError):
            return self.msg("err-move-failed", src=error.source, dest=error.destination, reason=error.reason)
        if isinstance(error, errors.CopyError):
            return self.msg("err-copy-failed", src=error.source, dest=error.destination, reason=error.reason)
        if isinstance(error, errors.RemoveError):
            return self.msg("err-remove-failed", src=error.source, reason=error.reason)
        if isinstance(error, errors.SymlinkError):
            return self.msg("err-symlink-failed", link=error.link, target=error.symlink_target, reason=error.reason)
        if isinstance(error, errors.CreateDirError):
            return self.msg("err-create-dir-failed", path=error.path, reason=error.reason)
        if isinstance(error, errors.InvalidDestinationError):
            return self.msg("err-invalid-destination", reason=error.reason)
        if isinstance(error, errors.InvalidPathError):
            return self.msg("err-invalid-path", path=error.path, reason=error.reason)
        if isinstance(error, errors.GlobExpansionError):
            return self.msg("err-glob-failed", reason=error.reason)
        if isinstance(error, errors.BatchOperationError):
            return self.msg("err-batch-failed", count=error.count)
        return str(error)

    def recovery_lines(self, error: errors.SymlinkError) -> List[str]:
        """Manual recovery instructions for a move whose link could not be created."""
        dest = _quote(error.destination)
        src = _quote(error.link)
        return [
            self.msg("recovery-header", dest=error.destination),
            self.msg("recovery-command"),
            "  " + self.msg("recovery-ln", target=_quote(error.symlink_target), src=src),
            self.msg("recovery-undo"),
            "  " + self.msg("recovery-mv", dest=dest, src=src),
        ]

    def remove_warning(self, error: errors.RemoveError) -> str:
        return self.msg("warn-copied-not-removed", src=error.source, dest=error.destination)

    def moving(self, src: Path, dest: Path) -> str:
        return self.msg("op-moving", src=src, dest=dest)

    def linking(self, link: Path, target: Path) -> str:
        return self.msg("op-linking", link=link, target=target)
