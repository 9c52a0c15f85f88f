"""
Centralized logging service for Newsroom.
Writes structured log rows to a SQLite table and mirrors them to the
standard logger so nothing is lost when the log database is unavailable.
"""

import json
import logging
import traceback
from datetime import datetime, timedelta
from flask import request, has_request_context
from .config import get_config_value
from .database import Database

logger = logging.getLogger('newsroom')


class LoggingService:
    """Application-wide persistent logging"""

    @staticmethod
    def _log_db():
        return get_config_value('LOG_DB')

    @staticmethod
    def _ensure_logs_table(conn):
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS app_logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp TEXT NOT NULL,
                level TEXT NOT NULL,
                source TEXT NOT NULL,
                message TEXT NOT NULL,
                details TEXT,
                ip_address TEXT,
                user_agent TEXT,
                request_path TEXT,
                user_id TEXT
            )
        """)
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_logs_timestamp
            ON app_logs(timestamp DESC)
        """)

    @staticmethod
    def _get_request_context():
        """Return (ip, user agent, path) for the active request, if any"""
        if not has_request_context():
            return None, None, None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        return ip_address, request.headers.get('User-Agent', ''), request.path

    @staticmethod
    def log(level, source, message, details=None, user_id=None):
        """
        Record a log entry

        Args:
            level (str): DEBUG, INFO, WARNING, ERROR or CRITICAL
            source (str): Component name (content, upload, auth, news, ...)
            message (str): Main log message
            details (str/dict): Extra details, JSON-encoded when a dict
            user_id (str): Optional user identifier
        """
        level = level.upper()
        logger.log(getattr(logging, level, logging.INFO), "[%s] %s", source, message)

        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        log_db = LoggingService._log_db()
        if not log_db:
            return

        try:
            ip_address, user_agent, request_path = LoggingService._get_request_context()
            with Database.connect(log_db) as conn:
                LoggingService._ensure_logs_table(conn)
                conn.execute("""
                    INSERT INTO app_logs
                    (timestamp, level, source, message, details, ip_address, user_agent, request_path, user_id)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    datetime.now().isoformat(), level, source, message, details,
                    ip_address, user_agent, request_path, user_id
                ))
                conn.commit()
        except Exception as e:
            logger.warning("Logging service error: %s", e)
            if details:
                logger.info("Details: %s", details)

    @staticmethod
    def debug(source, message, details=None, user_id=None):
        LoggingService.log('DEBUG', source, message, details, user_id)

    @staticmethod
    def info(source, message, details=None, user_id=None):
        LoggingService.log('INFO', source, message, details, user_id)

    @staticmethod
    def warning(source, message, details=None, user_id=None):
        LoggingService.log('WARNING', source, message, details, user_id)

    @staticmethod
    def error(source, message, details=None, user_id=None):
        LoggingService.log('ERROR', source, message, details, user_id)

    @staticmethod
    def critical(source, message, details=None, user_id=None):
        LoggingService.log('CRITICAL', source, message, details, user_id)

    @staticmethod
    def log_user_action(source, action, user_id=None, details=None):
        """Log admin actions (sign-in, content edits, uploads)"""
        LoggingService.info(source, f"User action: {action}", details, user_id)

    @staticmethod
    def log_api_call(source, endpoint, method='GET', status_code=200, details=None):
        message = f"API {method} {endpoint} - Status: {status_code}"
        level = 'INFO' if 200 <= status_code < 400 else 'WARNING' if status_code < 500 else 'ERROR'
        LoggingService.log(level, source, message, details)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def log_security_event(message, details=None):
        LoggingService.warning('security', message, details)

    @staticmethod
    def get_recent_logs(limit=100, level=None, source=None):
        """Most recent log rows as dicts, newest first"""
        log_db = LoggingService._log_db()
        if not log_db:
            return []

        query = "SELECT timestamp, level, source, message, details, request_path FROM app_logs"
        clauses, params = [], []
        if level:
            clauses.append("level = ?")
            params.append(level.upper())
        if source:
            clauses.append("source = ?")
            params.append(source)
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY id DESC LIMIT ?"
        params.append(limit)

        try:
            with Database.connect(log_db) as conn:
                LoggingService._ensure_logs_table(conn)
                rows = conn.execute(query, params).fetchall()
        except Exception as e:
            logger.warning("Could not read logs: %s", e)
            return []

        return [
            {
                'timestamp': row[0],
                'level': row[1],
                'source': row[2],
                'message': row[3],
                'details': row[4],
                'request_path': row[5],
            }
            for row in rows
        ]

    @staticmethod
    def cleanup_old_logs(days_to_keep=30):
        """Delete log rows older than days_to_keep, returns the count removed"""
        log_db = LoggingService._log_db()
        if not log_db:
            return 0

        cutoff_iso = (datetime.now() - timedelta(days=days_to_keep)).isoformat()
        try:
            with Database.connect(log_db) as conn:
                LoggingService._ensure_logs_table(conn)
                cursor = conn.execute("DELETE FROM app_logs WHERE timestamp < ?", (cutoff_iso,))
                deleted_count = cursor.rowcount
                conn.commit()
        except Exception as e:
            logger.error("Failed to cleanup old logs: %s", e)
            return 0

        LoggingService.info('system', f"Cleaned up {deleted_count} old log entries")
        return deleted_count
