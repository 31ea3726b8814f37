from .log_repository import SAMPLE_POD_LOG, LogRepository

__all__ = ["LogRepository", "SAMPLE_POD_LOG"]
