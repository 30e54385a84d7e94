"""
KeepFOSS - application wiring
Builds configuration, logging, the notes database and the notes service
for whichever presentation layer hosts them.
"""

from pathlib import Path
from typing import Optional

from keepfoss.database.initialize_db import DatabaseManager
from keepfoss.database.notes_db import NotesDatabase
from keepfoss.tools.notes_service import NotesService
from keepfoss.utils.config_loader import ConfigLoader
from keepfoss.utils.logger import Logger


class KeepFossApp:
    """Headless application object"""
    
    def __init__(self, config: Optional[ConfigLoader] = None,
                 base_dir: Optional[Path] = None):
        """
        Args:
            config: Loaded configuration; the default config file is used if omitted
            base_dir: Overrides ``database.data_dir`` from the configuration
        """
        self.config = config or ConfigLoader()
        self.logger = Logger()
        self.logger.set_level(self.config.get("logging.level", "INFO"))
        self.db_manager: Optional[DatabaseManager] = None
        self.notes_db: Optional[NotesDatabase] = None
        self.notes_service: Optional[NotesService] = None
        self._base_dir = base_dir
    
    def start(self) -> NotesService:
        """Initialize the database and return the ready service"""
        if self.notes_service is not None:
            return self.notes_service
        
        data_dir = self._base_dir or self.config.get("database.data_dir")
        self.db_manager = DatabaseManager(
            self.config.get("database.user_name", "default_user"),
            base_dir=Path(data_dir) if data_dir else None,
            connect_retries=self.config.get("database.connect_retries", 3),
        )
        self.db_manager.initialize_all_databases()
        
        self.notes_db = NotesDatabase(self.db_manager)
        self.notes_service = NotesService(
            db_manager=self.db_manager,
            notes_db=self.notes_db,
            config=self.config,
        )
        self.logger.info(
            f"{self.config.get('app.name', 'KeepFOSS')} started with "
            f"{self.notes_db.count_notes()} notes"
        )
        return self.notes_service
    
    def shutdown(self) -> None:
        if self.notes_service is None:
            return
        self.logger.info("Shutting down")
        self.notes_service.shutdown()
        self.notes_service = None
        self.notes_db = None
        self.db_manager = None
