"""
Store Factory
Centralizes the wiring of persistence adapters and services.
"""

from senko.application.config import AppConfig
from senko.application.session_recorder import SessionRecorder
from senko.application.stats.service import StatsService
from senko.infrastructure.adapters.json_store import JsonFileStore


def get_store(config: AppConfig) -> JsonFileStore:
    """
    Returns the history store for the configured data directory.
    """
    return JsonFileStore(config.data_dir)


def get_session_recorder(config: AppConfig) -> SessionRecorder:
    store = get_store(config)
    return SessionRecorder(session_store=store, daily_store=store)


def get_stats_service(config: AppConfig) -> StatsService:
    store = get_store(config)
    return StatsService(session_store=store, daily_store=store)
