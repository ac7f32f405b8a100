import logging
import logging.handlers
from pathlib import Path

def setup_logging(log_dir: Path = None, level: int = logging.INFO) -> logging.Logger:
    """Configura logging para el servicio"""
    # Logger root
    logger = logging.getLogger()
    logger.setLevel(level)

    # llamadas repetidas no duplican handlers
    for handler in list(logger.handlers):
        if getattr(handler, "_maskframe", False):
            logger.removeHandler(handler)
            handler.close()

    # Formato
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Handler de consola (stdout)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler._maskframe = True
    logger.addHandler(console_handler)

    if log_dir is None:
        return logger

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    # Handler de archivo (rotativo)
    file_handler = logging.handlers.RotatingFileHandler(
        log_dir / "maskframe.log",
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    file_handler._maskframe = True
    logger.addHandler(file_handler)

    # Handler de errores en archivo separado
    error_handler = logging.FileHandler(log_dir / "maskframe_errors.log")
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)
    error_handler._maskframe = True
    logger.addHandler(error_handler)

    return logger
