"""Interactive conflict prompt on stdin/stdout."""

from typing import Callable, Sequence, Tuple

from castdeploy.core.protocols import Localizer
from castdeploy import i18n

from .conflict import ConflictAction

DEFAULT_BACKUP_SUFFIX = ".bak"


class StdinPrompter:
    """
    UserPrompter that asks once for the whole set of unmanaged files.

    Choice "2" means Remove; anything else (including empty) means Backup,
    followed by a suffix prompt where empty input keeps ".bak".

    Raises:
        EOFError: If stdin closes before the action is chosen
    """

    def __init__(
        self,
        localizer: Localizer,
        input_func: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
    ):
        self.localizer = localizer
        self._input = input_func
        self._output = output

    def ask_conflict_action(self, names: Sequence[str], lang: str) -> Tuple[ConflictAction, str]:
        self._output(self.localizer.message(i18n.CONFLICT_FOUND, lang, ", ".join(names)))
        choice = self._input(self.localizer.message(i18n.CHOOSE_ACTION, lang)).strip()

        if choice == "2":
            return ConflictAction.REMOVE, ""

        try:
            suffix = self._input(self.localizer.message(i18n.BACKUP_SUFFIX, lang)).strip()
        except EOFError:
            # Action already chosen; keep the default suffix.
            suffix = ""
        return ConflictAction.BACKUP, suffix or DEFAULT_BACKUP_SUFFIX
