from adaptevo.utils.logger_setup import LoggingConfig, setup_logger

__all__ = ["LoggingConfig", "setup_logger"]
