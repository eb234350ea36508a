"""Исключения анализатора."""


class AnalyzerError(Exception):
    """Базовая ошибка запуска анализа."""


# Ошибки окружения: запуск невозможен, повторять бессмысленно
class WorkspaceNotFoundError(AnalyzerError):
    pass


class NoActiveFileError(AnalyzerError):
    pass


class NotSourceFileError(AnalyzerError):
    pass


class AnalysisBusyError(AnalyzerError):
    pass


# Полный отказ запуска
class NoSourceFilesError(AnalyzerError):
    pass


class AllGroupsFailedError(AnalyzerError):
    pass


class SubmissionError(AnalyzerError):
    """Сервис анализа не принял бандл или вернул некорректный ответ."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
