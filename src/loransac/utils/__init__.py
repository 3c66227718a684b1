from .logger import setup_logger, default_log_level

__all__ = ["setup_logger", "default_log_level"]
