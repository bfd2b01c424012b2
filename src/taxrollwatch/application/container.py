"""
Dependency injection container for the application.

Creates settings, the snapshot store and the ingestion service on first use.
"""

import logging
from pathlib import Path
from typing import Optional

from ..domain.config import TrackerSettings
from ..infrastructure.config_loader import ConfigLoader
from ..infrastructure.sqlite.store import SnapshotStore
from .ingestion_service import IngestionService

logger = logging.getLogger(__name__)


class Container:
    """
    Dependency injection container.

    Manages the creation and lifecycle of application services and infrastructure components.
    """

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        config_file: Optional[Path] = None,
        db_path: Optional[Path] = None,
        settings: Optional[TrackerSettings] = None,
    ):
        """
        Initialize the container.

        Args:
            config_dir: Directory searched for tracker_config.json(c)
            config_file: Explicit config file (overrides config_dir lookup)
            db_path: SQLite file (overrides settings.database_path)
            settings: Pre-built settings (skips config loading)
        """
        self.config_dir = config_dir or Path.cwd() / "config"
        self.config_file = config_file
        self._db_path = db_path
        self._settings = settings

        self._config_loader: Optional[ConfigLoader] = None
        self._snapshot_store: Optional[SnapshotStore] = None
        self._ingestion_service: Optional[IngestionService] = None

    @property
    def config_loader(self) -> ConfigLoader:
        """Get the configuration loader."""
        if self._config_loader is None:
            self._config_loader = ConfigLoader(self.config_dir)
        return self._config_loader

    @property
    def settings(self) -> TrackerSettings:
        """Get tracker settings (raises ConfigError if the file is invalid)."""
        if self._settings is None:
            self._settings = self.config_loader.load_settings(self.config_file)
        return self._settings

    @property
    def db_path(self) -> Path:
        """Path of the snapshot database."""
        return self._db_path or Path(self.settings.database_path)

    @property
    def snapshot_store(self) -> SnapshotStore:
        """Get the snapshot store with its schema initialized."""
        if self._snapshot_store is None:
            store = SnapshotStore(self.db_path)
            store.initialize_schema()
            self._snapshot_store = store
        return self._snapshot_store

    @property
    def ingestion_service(self) -> IngestionService:
        """Get the ingestion service."""
        if self._ingestion_service is None:
            self._ingestion_service = IngestionService(self.snapshot_store, self.settings)
        return self._ingestion_service

    def close(self) -> None:
        """Release the database connection."""
        if self._snapshot_store is not None:
            self._snapshot_store.close()
            self._snapshot_store = None
            self._ingestion_service = None
