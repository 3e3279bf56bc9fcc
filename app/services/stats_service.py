"""
Statistics, streaks and achievements for Interprep.

The streak shown to users is derived on read from the completion dates of an
owner's completed sessions. The daily ``Progress`` rollup written at
completion stores streak numbers computed by the same functions, so the two
never disagree on the algorithm.
"""
import math
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy.orm import Session
from app.config import get_settings
from app.database.models import InterviewSession, Progress, SessionStatus, User
from app.utils.datetime_utils import ensure_aware, get_zone, isoformat, local_date, utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_streak(completed_dates: Iterable[date], today: date) -> int:
    """
    Count consecutive practice days ending today or yesterday.

    A most-recent practice day two or more days before ``today`` resets the
    streak to 0. Otherwise the count starts at 1 and grows while each earlier
    distinct date is exactly one day before the previous one.
    """
    days = sorted(set(completed_dates), reverse=True)
    if not days:
        return 0

    if (today - days[0]).days > 1:
        return 0

    streak = 1
    for previous, current in zip(days, days[1:]):
        if (previous - current).days != 1:
            break
        streak += 1
    return streak


def compute_longest_streak(completed_dates: Iterable[date]) -> int:
    """Longest run of consecutive distinct practice days anywhere in history."""
    days = sorted(set(completed_dates))
    if not days:
        return 0

    longest = run = 1
    for previous, current in zip(days, days[1:]):
        run = run + 1 if (current - previous).days == 1 else 1
        longest = max(longest, run)
    return longest


def _overall_score(session: InterviewSession) -> float:
    feedback = session.feedback or {}
    return feedback.get("overallScore") or 0


def compute_aggregate_stats(sessions: List[InterviewSession]) -> Dict[str, int]:
    """Totals and mean score over completed sessions; all zeros when empty."""
    total = len(sessions)
    return {
        "totalInterviews": total,
        "totalQuestions": sum(s.questions_completed or 0 for s in sessions),
        "totalTime": sum(s.duration or 0 for s in sessions),
        "averageScore": round_half_up(sum(_overall_score(s) for s in sessions) / total) if total else 0
    }


# id, name, description, icon, metric, target
ACHIEVEMENT_DEFINITIONS = [
    ("first-step", "First Step", "Complete your first interview", "star", "interviews", 1),
    ("getting-started", "Getting Started", "Complete 5 interviews", "play", "interviews", 5),
    ("dedicated", "Dedicated", "Complete 10 interviews", "target", "interviews", 10),
    ("expert", "Expert", "Complete 25 interviews", "rocket", "interviews", 25),
    ("rising-star", "Rising Star", "Score 70 or higher on an interview", "trending-up", "best_score", 70),
    ("ace-performer", "Ace Performer", "Score 90 or higher on an interview", "trophy", "best_score", 90),
    ("consistent", "Consistent", "Maintain a 3-day practice streak", "flame", "streak", 3),
    ("on-fire", "On Fire", "Maintain a 7-day practice streak", "zap", "streak", 7),
]


class StatsService:
    """Derives dashboard numbers from an owner's completed sessions."""

    def __init__(self, db: Session):
        self.db = db
        self.settings = get_settings()

    def _timezone_for(self, owner_id: str):
        user = self.db.query(User).filter(User.owner_id == owner_id).first()
        return get_zone(user.timezone if user else None, self.settings.DEFAULT_TIMEZONE)

    def _completed_sessions(self, owner_id: str) -> List[InterviewSession]:
        return self.db.query(InterviewSession).filter(
            InterviewSession.owner_id == owner_id,
            InterviewSession.status == SessionStatus.COMPLETED
        ).all()

    def _completed_dates(self, sessions: List[InterviewSession], zone) -> List[date]:
        return [local_date(s.completed_at, zone) for s in sessions if s.completed_at is not None]

    def get_user_stats(self, owner_id: str, now: Optional[datetime] = None) -> Dict[str, int]:
        """Aggregate stats plus current and longest streak."""
        zone = self._timezone_for(owner_id)
        sessions = self._completed_sessions(owner_id)
        dates = self._completed_dates(sessions, zone)
        today = local_date(now or utcnow(), zone)

        stats = compute_aggregate_stats(sessions)
        stats["currentStreak"] = compute_streak(dates, today)
        stats["longestStreak"] = compute_longest_streak(dates)
        return stats

    def get_user_achievements(self, owner_id: str, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """Badge list with unlock state and progress toward each target."""
        zone = self._timezone_for(owner_id)
        sessions = self._completed_sessions(owner_id)
        dates = self._completed_dates(sessions, zone)

        metrics = {
            "interviews": len(sessions),
            "best_score": max((_overall_score(s) for s in sessions), default=0),
            "streak": compute_streak(dates, local_date(now or utcnow(), zone))
        }
        completion_times = [ensure_aware(s.completed_at) for s in sessions if s.completed_at is not None]
        first_completion = min(completion_times) if completion_times else None

        achievements = []
        for achievement_id, name, description, icon, metric, target in ACHIEVEMENT_DEFINITIONS:
            value = metrics[metric]
            unlocked = value >= target
            achievement = {
                "id": achievement_id,
                "name": name,
                "description": description,
                "icon": icon,
                "unlocked": unlocked,
                "progress": min(value, target),
                "target": target
            }
            if achievement_id == "first-step" and unlocked:
                achievement["unlockedAt"] = isoformat(first_completion)
            achievements.append(achievement)
        return achievements

    def record_completion(self, session: InterviewSession) -> Progress:
        """
        Fold a just-completed session into the owner's daily rollup.

        The caller owns the transaction; this only adds or updates rows.
        """
        zone = self._timezone_for(session.owner_id)
        day = local_date(session.completed_at, zone)

        progress = self.db.query(Progress).filter(
            Progress.owner_id == session.owner_id,
            Progress.date == day
        ).first()
        if progress is None:
            progress = Progress(
                owner_id=session.owner_id,
                date=day,
                interviews_completed=0,
                total_questions_answered=0,
                time_spent_minutes=0,
                focus_areas=[]
            )
            self.db.add(progress)

        score = _overall_score(session)
        previous_count = progress.interviews_completed or 0
        previous_average = progress.average_score or 0
        progress.interviews_completed = previous_count + 1
        progress.average_score = (previous_average * previous_count + score) / progress.interviews_completed
        progress.total_questions_answered = (progress.total_questions_answered or 0) + (session.questions_completed or 0)
        progress.time_spent_minutes = (progress.time_spent_minutes or 0) + (session.duration or 0) // 60

        for improvement in (session.feedback or {}).get("improvements", []):
            category = improvement.get("category") if isinstance(improvement, dict) else None
            if category and category not in progress.focus_areas:
                progress.focus_areas.append(category)

        # The session itself is flushed already, so it is part of this query
        dates = self._completed_dates(self._completed_sessions(session.owner_id), zone)
        progress.streak_current = compute_streak(dates, day)
        progress.streak_longest = compute_longest_streak(dates)
        progress.last_activity_date = day

        logger.debug(f"Updated progress for {session.owner_id} on {day}: streak={progress.streak_current}")
        return progress
