"""Error reporters and widget refreshers the workflows hand results to."""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)


class ConsoleReporter:
    """Prints errors for the command line."""

    def handle(self, error: Exception) -> None:
        message = str(error)
        if not message.startswith("Error"):
            message = f"Error: {message}"
        print(message)


class RecordingReporter:
    """Keeps errors so a caller can show or inspect them afterwards."""

    def __init__(self):
        self.errors: List[Exception] = []

    def handle(self, error: Exception) -> None:
        self.errors.append(error)

    @property
    def messages(self) -> List[str]:
        return [str(e) for e in self.errors]


class StampFileRefresher:
    """
    Signals the widget host by writing the reload time to a stamp file.

    The host watches the file's modification time; nothing is read back.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def reload_all(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(datetime.now().isoformat() + "\n")
        except OSError as e:
            logger.warning("Could not signal widget reload via %s: %s", self.path, e)


class NullRefresher:
    """Refresher for contexts without a widget host."""

    def reload_all(self) -> None:
        pass
