"""Localized user-facing messages (zh / en)."""

from typing import Any, Dict, Mapping, Optional

SUPPORTED_LANGS = ("zh", "en")
DEFAULT_LANG = "zh"
FALLBACK_LANG = "en"

# Message keys
CONFLICT_FOUND = "conflict_found"
CHOOSE_ACTION = "choose_action"
BACKUP_SUFFIX = "backup_suffix"
BACKING_UP = "backing_up"
REMOVING = "removing"
REPLACING = "replacing"
DEPLOY_COMPLETE = "deploy_complete"
SNAPSHOT_CREATED = "snapshot_created"
SNAPSHOT_UPDATED = "snapshot_updated"
HISTORY_EMPTY = "history_empty"

MESSAGES: Dict[str, Dict[str, str]] = {
    CONFLICT_FOUND: {
        "zh": "⚠ 目标目录发现非 castdeploy 管理的同名文件：{}",
        "en": "⚠ Files not managed by castdeploy already exist: {}",
    },
    CHOOSE_ACTION: {
        "zh": "  [1] 备份（默认）\n  [2] 移除\n请选择 [1]: ",
        "en": "  [1] Backup (default)\n  [2] Remove\nChoose [1]: ",
    },
    BACKUP_SUFFIX: {
        "zh": "备份后缀 [.bak]: ",
        "en": "Backup suffix [.bak]: ",
    },
    BACKING_UP: {
        "zh": "  📦 备份: {} → {}",
        "en": "  📦 Backup: {} → {}",
    },
    REMOVING: {
        "zh": "  🗑  移除: {}",
        "en": "  🗑  Remove: {}",
    },
    REPLACING: {
        "zh": "  ♻  替换: {}",
        "en": "  ♻  Replace: {}",
    },
    DEPLOY_COMPLETE: {
        "zh": "  ✅ 部署完成",
        "en": "  ✅ Deploy complete",
    },
    SNAPSHOT_CREATED: {
        "zh": "  📝 创建 snapshot: {}",
        "en": "  📝 Created snapshot: {}",
    },
    SNAPSHOT_UPDATED: {
        "zh": "  📝 更新 snapshot: {}",
        "en": "  📝 Updated snapshot: {}",
    },
    HISTORY_EMPTY: {
        "zh": "目标目录没有部署记录: {}",
        "en": "No deployment history for {}",
    },
}


class MessageCatalog:
    """
    Localizer backed by an in-memory table.

    Unknown language falls back to English; unknown key returns the key.
    """

    def __init__(self, messages: Optional[Mapping[str, Mapping[str, str]]] = None):
        self.messages = messages if messages is not None else MESSAGES

    def message(self, key: str, lang: str, *args: Any) -> str:
        table = self.messages.get(key)
        if table is None:
            return key
        template = table.get(lang, table.get(FALLBACK_LANG, key))
        return template.format(*args) if args else template
