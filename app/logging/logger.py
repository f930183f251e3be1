import logging
import sys


class Log:
    """Run-wide logging facade.

    Records go to stderr so stdout stays reserved for the JSON outcome the
    CLI prints.
    """

    _logger: logging.Logger = logging.getLogger("jurisprudence")

    # Per-request INFO lines from the HTTP stack drown out per-decision progress.
    QUIET_LIBRARIES = ("httpx", "httpcore", "google_genai", "openai", "pdfminer")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the level and attach a stderr handler once."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
            cls._logger.addHandler(handler)
            cls._logger.propagate = False
        for name in cls.QUIET_LIBRARIES:
            logging.getLogger(name).setLevel(logging.WARNING)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def exception(cls, message: str, **kwargs: object) -> None:
        """Log an error together with the active traceback."""
        cls._logger.exception(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)
