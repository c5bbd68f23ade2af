from __future__ import annotations
import logging
from pathlib import Path
import yaml
from typing import Optional


def configure_logging(config_path: Optional[Path] = None, level: Optional[str] = None) -> logging.Logger:
    """Configure root logging for the dashboard.

    The level comes from `level` when given, otherwise from the `log_level`
    key of the YAML config, falling back to WARNING. Returns a module logger
    for the caller.
    """
    # Minimal early config so other imports can emit without error
    logging.basicConfig(level=logging.NOTSET, format='%(asctime)s INFO %(message)s')
    DEFAULT_LOG_LEVEL = logging.WARNING

    _lvl = level
    cfg_path = config_path or Path('data/config/dashboard.yml')
    if _lvl is None and cfg_path.exists():
        try:
            with cfg_path.open('r', encoding='utf-8') as _f:
                _cfg = yaml.safe_load(_f) or {}
                _lvl = _cfg.get('log_level') if isinstance(_cfg, dict) else None
        except Exception:
            # If config parse fails, fall back to default level
            _lvl = None
    if isinstance(_lvl, str):
        _numeric = getattr(logging, _lvl.upper(), None)
        if isinstance(_numeric, int):
            DEFAULT_LOG_LEVEL = _numeric

    logging.log(100, f'[dashboard]: Log level set to: {logging.getLevelName(DEFAULT_LOG_LEVEL)}')

    # Reconfigure root handlers to use the selected level and format
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(level=DEFAULT_LOG_LEVEL, format='%(asctime)s %(levelname)s [%(name)s]: %(message)s')
    logger = logging.getLogger(__name__)

    # Keep known noisy libraries quiet by default
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('multipart').setLevel(logging.WARNING)
    logger.info("Starting mserv dashboard")

    return logger
