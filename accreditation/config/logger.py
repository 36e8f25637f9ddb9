import logging
import sys

from accreditation.config.config import settings

LOG_LEVEL = logging.DEBUG if settings.env == "dev" else logging.INFO

# root logger of the engine
logger = logging.getLogger("accreditation")
logger.setLevel(LOG_LEVEL)

# stdout handler
handler = logging.StreamHandler(sys.stdout)
handler.setLevel(LOG_LEVEL)

# time, level, [logger name], message
fmt = logging.Formatter(
    "%(asctime)s %(levelname)-5s [accreditation] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
handler.setFormatter(fmt)
logger.addHandler(handler)
