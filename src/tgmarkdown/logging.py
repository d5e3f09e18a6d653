import logging


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # httpx на INFO логирует полные URL, а в URL Bot API есть токен.
    if logging.getLogger("httpx").level in (logging.NOTSET, logging.INFO):
        logging.getLogger("httpx").setLevel(logging.WARNING)
    # Логи каждого апдейта от диспетчера нужны только на DEBUG.
    if logging.getLogger("aiogram.event").level == logging.NOTSET and level.upper() != "DEBUG":
        logging.getLogger("aiogram.event").setLevel(logging.WARNING)
