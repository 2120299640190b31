"""Dialogue errors."""


class DialogueError(Exception):
    """Base class for dialogue overlay errors."""


class ScriptLoadError(DialogueError):
    """A script could not be found, read or validated."""

    def __init__(self, script_id: str, reason: str):
        super().__init__(f"Cannot load dialogue script {script_id!r}: {reason}")
        self.script_id = script_id
        self.reason = reason
