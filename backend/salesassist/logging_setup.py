import logging
import sys
from typing import Optional


def setup_logging(level: str = "INFO") -> None:
	formatter = logging.Formatter(
		"%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
	)

	handler = logging.StreamHandler(sys.stdout)
	handler.setFormatter(formatter)

	loggers = ["", "uvicorn", "uvicorn.error", "uvicorn.access", "fastapi"]

	for logger_name in loggers:
		logger = logging.getLogger(logger_name)
		logger.handlers = [handler]
		logger.setLevel(getattr(logging, level.upper(), logging.INFO))
		logger.propagate = False


def mask_secret(value: Optional[str]) -> str:
	if not value:
		return "Not Found"
	if len(value) < 10:
		return "Too short to mask"
	return f"{value[:4]}...{value[-4:]}"
