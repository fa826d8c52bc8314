import logging

# -------------------------------
#  GLOBAL CONFIG
# -------------------------------

ENCODINGS = ['utf-8-sig', 'cp1252', 'latin-1']
ALLOWED_EXTENSIONS = ('.csv', '.csv.gz')
OUTPUT_NAME = "compiled-{timestamp}.csv"
EXCEL_SHEET = "Compiled"

LOGGER_NAME = "csv_compiler"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def logging_config(log_level='INFO'):
    """Send csv_compiler.* records to stderr at log_level; returns the package logger."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format=LOG_FORMAT, datefmt=LOG_DATEFMT)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    return logger
