from reviewgate.presentation.reporter import ActionsReporter, LogReporter, escape_data

__all__ = ["ActionsReporter", "LogReporter", "escape_data"]
