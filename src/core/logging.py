import logging

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"

# 요청 단위로 너무 시끄러운 서드파티 로거
_NOISY_LOGGERS = ("sqlalchemy.engine", "httpx", "urllib3")


def setup_logging(level: str = "INFO", quiet_third_party: bool = True):
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if quiet_third_party:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
