"""
Newsroom Core
=============

Core utilities and shared functionality for Newsroom modules.
"""

from .config import Config, get_config_value
from .database import Database, db, init_database
from .logging_service import LoggingService, logger

__all__ = ['Config', 'get_config_value', 'Database', 'db', 'init_database', 'LoggingService', 'logger']
