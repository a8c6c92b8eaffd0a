import logging


class VfsLogFilter(logging.Filter):
    """
    A logging filter that ensures a 'vfs_root' attribute is present on log
    records so the console format can always reference it.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        # Backends pass extra={"vfs_root": ...}; everything else gets "-".
        current_root = getattr(record, "vfs_root", None)
        record.vfs_root = "-" if current_root is None else str(current_root)
        return True


def init_vfs_logging(
    level: int = logging.INFO, clear_existing_handlers: bool = True
) -> None:
    """
    Sets up a standardized console logging configuration for vfskit.

    Args:
        level: The desired logging level for the root logger.
        clear_existing_handlers: If True, removes any handlers already attached to the
                                 root logger, preventing duplicate output when the
                                 setup runs more than once.
    """
    root_logger = logging.getLogger()

    if clear_existing_handlers:
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()

    stream_handler = logging.StreamHandler()
    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - [%(name)s] [%(vfs_root)s] %(message)s"
    )
    stream_handler.setFormatter(formatter)
    stream_handler.addFilter(VfsLogFilter())

    root_logger.addHandler(stream_handler)
    root_logger.setLevel(level)

    logging.getLogger(__name__).info(
        f"VFS logging setup complete. Root logger level set to {logging.getLevelName(level)}."
    )
