import sys
from typing import Optional
from loguru import logger

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"


class LoggerManager:
    def __init__(self):
        self.console_sink_id = None
        self.file_sink_id = None

        # Always remove the default handler
        logger.remove()

    def enable_console(self, level: str = "INFO"):
        if self.console_sink_id is not None:
            logger.remove(self.console_sink_id)
        self.console_sink_id = logger.add(sys.stdout, level=level.upper(), colorize=True, format=CONSOLE_FORMAT)

    def disable_console(self):
        if self.console_sink_id is not None:
            logger.remove(self.console_sink_id)
            self.console_sink_id = None

    def enable_file(self, path: str, level: str = "INFO", rotation: str = "10 MB", retention_days: int = 7):
        if self.file_sink_id is not None:
            logger.remove(self.file_sink_id)
        self.file_sink_id = logger.add(
            path,
            level=level.upper(),
            rotation=rotation,
            retention=f"{retention_days} days",
            enqueue=True,
        )

    def disable_file(self):
        if self.file_sink_id is not None:
            logger.remove(self.file_sink_id)
            self.file_sink_id = None

    def configure(self, config) -> None:
        """Apply a LoggingConfig: console always, file sink when enabled."""
        self.enable_console(config.level)
        log_file: Optional[str] = config.log_file
        if config.enable_file_logging and log_file:
            self.enable_file(
                log_file,
                level=config.level,
                rotation=config.max_file_size,
                retention_days=config.retention_days,
            )
        else:
            self.disable_file()


log_manager = LoggerManager()
