"""
Services package for the DPS ranking bot.
"""

from .base import BaseService
from .record_store import RecordStore
from .leaderboard import LeaderboardService, SubmissionResult

__all__ = ['BaseService', 'RecordStore', 'LeaderboardService', 'SubmissionResult']
