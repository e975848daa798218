"""FitQuest: gamification engine for fitness tracking (XP, levels, streaks, badges)"""

__version__ = "1.0.0"
