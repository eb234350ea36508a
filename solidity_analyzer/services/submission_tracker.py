"""Трекер отправок бандлов в сервис анализа."""


class SubmissionTracker:
    """Учёт отправленных, упавших и пропущенных групп за один запуск."""

    def __init__(self):
        self.submitted_groups = 0
        self.failed_groups = 0
        self.skipped_groups = 0
        self.files_sent = 0
        self.bytes_sent = 0

    def add_submission(self, files: dict[str, str]) -> None:
        """
        Учесть успешную отправку одного бандла.

        Args:
            files: бандл {относительный путь: текст}
        """
        self.submitted_groups += 1
        self.files_sent += len(files)
        self.bytes_sent += sum(len(text.encode("utf-8")) for text in files.values())

    def add_failure(self) -> None:
        self.failed_groups += 1

    def add_skipped(self) -> None:
        self.skipped_groups += 1

    @property
    def succeeded(self) -> bool:
        return self.submitted_groups > 0

    def get_summary(self) -> dict:
        """
        Получить сводку по отправкам.

        Returns:
            Словарь с submitted_groups, failed_groups, skipped_groups, files_sent, bytes_sent
        """
        return {
            "submitted_groups": self.submitted_groups,
            "failed_groups": self.failed_groups,
            "skipped_groups": self.skipped_groups,
            "files_sent": self.files_sent,
            "bytes_sent": self.bytes_sent,
        }
