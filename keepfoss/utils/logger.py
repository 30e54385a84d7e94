"""
Logger utility for KeepFOSS
One shared 'KeepFOSS' logger writing to a daily file and to stdout
"""

import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LOG_DIR = Path(__file__).parent.parent.parent / "logs"


class Logger:
    """Process-wide logger shared by the store, codec and service"""
    
    _instance: Optional['Logger'] = None
    _initialized: bool = False
    
    def __new__(cls) -> 'Logger':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
    
    def __init__(self):
        if not self._initialized:
            self.setup_logging()
            Logger._initialized = True
    
    def setup_logging(self, log_dir: Optional[Path] = None) -> None:
        """Attach the file and console handlers to the 'KeepFOSS' logger.

        Args:
            log_dir: Directory for ``keepfoss_<YYYYMMDD>.log``.
                     Defaults to ``<project root>/logs``.
        """
        self.logger = logging.getLogger('KeepFOSS')
        self.logger.setLevel(logging.INFO)
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()
        
        formatter = logging.Formatter(LOG_FORMAT)
        
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        self.logger.addHandler(console)
        
        target_dir = log_dir or DEFAULT_LOG_DIR
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d")
            file_handler = logging.FileHandler(
                target_dir / f"keepfoss_{timestamp}.log", encoding='utf-8'
            )
        except OSError as e:
            # Console output only
            self.logger.warning(f"File logging disabled: {e}")
        else:
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)
        
        self.log_dir = target_dir
    
    def set_level(self, level: Union[str, int]) -> None:
        """Change the level, by name ("DEBUG") or number"""
        if isinstance(level, str):
            resolved = logging.getLevelName(level.upper())
            if not isinstance(resolved, int):
                self.logger.warning(f"Unknown log level: {level}")
                return
            level = resolved
        self.logger.setLevel(level)
    
    def info(self, message: str) -> None:
        self.logger.info(message)
    
    def warning(self, message: str) -> None:
        self.logger.warning(message)
    
    def error(self, message: str) -> None:
        self.logger.error(message)
    
    def debug(self, message: str) -> None:
        self.logger.debug(message)


# Convenience functions for direct import
def log_error(message: str) -> None:
    Logger().error(message)
