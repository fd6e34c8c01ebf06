"""Unit tests for StdinPrompter."""

import pytest

from castdeploy.deploy.conflict import ConflictAction
from castdeploy.deploy.prompter import StdinPrompter
from castdeploy.i18n import MessageCatalog


def scripted(*answers):
    """input() replacement that replays answers, then raises EOFError."""
    queue = list(answers)
    prompts = []

    def _input(prompt):
        prompts.append(prompt)
        if not queue:
            raise EOFError()
        return queue.pop(0)

    _input.prompts = prompts
    return _input


class TestStdinPrompter:
    def setup_method(self):
        self.output = []

    def _prompter(self, *answers):
        self.input = scripted(*answers)
        return StdinPrompter(MessageCatalog(), input_func=self.input, output=self.output.append)

    def test_remove_choice(self):
        prompter = self._prompter("2")

        assert prompter.ask_conflict_action(["a"], "en") == (ConflictAction.REMOVE, "")
        assert len(self.input.prompts) == 1

    def test_default_choice_is_backup_with_default_suffix(self):
        prompter = self._prompter("", "")

        assert prompter.ask_conflict_action(["a"], "en") == (ConflictAction.BACKUP, ".bak")

    def test_backup_with_custom_suffix(self):
        prompter = self._prompter("1", " .orig ")

        assert prompter.ask_conflict_action(["a"], "en") == (ConflictAction.BACKUP, ".orig")

    def test_unrecognized_choice_means_backup(self):
        prompter = self._prompter("maybe", ".old")

        assert prompter.ask_conflict_action(["a"], "en") == (ConflictAction.BACKUP, ".old")

    def test_eof_on_suffix_keeps_default(self):
        prompter = self._prompter("1")

        assert prompter.ask_conflict_action(["a"], "en") == (ConflictAction.BACKUP, ".bak")

    def test_eof_on_choice_propagates(self):
        prompter = self._prompter()

        with pytest.raises(EOFError):
            prompter.ask_conflict_action(["a"], "en")

    def test_lists_all_names_in_language(self):
        prompter = self._prompter("2")

        prompter.ask_conflict_action(["config.yml", "README"], "zh")

        assert "config.yml, README" in self.output[0]
        assert "非 castdeploy 管理" in self.output[0]
        assert "请选择" in self.input.prompts[0]
