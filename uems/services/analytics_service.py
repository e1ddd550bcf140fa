from datetime import timedelta

from flask import current_app

from uems.exceptions import ForbiddenError, UserNotFoundError
from uems.models.enums import EventStatus, UserRole
from uems.repositories import (
    EventRepository,
    RegistrationRepository,
    UserRepository,
)
from uems.utils.dates import ensure_utc, utcnow

HIGH_FILL_RATE = 70
LOW_FILL_RATE = 30
MAX_UPCOMING_EVENTS = 5
TOP_EVENTS_LIMIT = 5


def _percent(part, whole) -> int:
    # Half-up rounding; round() would send 12.5 to 12
    if not whole:
        return 0
    return int(part * 100 / whole + 0.5)


def _fill_rate(event) -> int:
    return _percent(event.current_attendees or 0, event.max_attendees)


def _summarize(events):
    """Status counts and fill-rate buckets over a user's events."""
    by_status = {status: [] for status in EventStatus}
    for event in events:
        by_status[event.status].append(event)
    approved = by_status[EventStatus.APPROVED]

    total_registrations = sum(event.current_attendees or 0 for event in approved)
    total_capacity = sum(event.max_attendees or 0 for event in approved)
    high = len([e for e in approved if _fill_rate(e) >= HIGH_FILL_RATE])
    low = len([e for e in approved if _fill_rate(e) < LOW_FILL_RATE])

    summary = {
        "total_events": len(events),
        "total_registrations": total_registrations,
        "total_capacity": total_capacity,
        "avg_fill_rate": _percent(total_registrations, total_capacity),
    }
    for status, matching in by_status.items():
        summary[f"{status.value}_events"] = len(matching)

    performance = {
        "high_performance_events": high,
        "low_performance_events": low,
        "average_performance": len(approved) - high - low,
    }
    return summary, performance


def _health_level(score: int) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    return "Needs Attention"


class AnalyticsService:
    @staticmethod
    def get_active_event_count(user) -> int:
        if not user or user.role not in (UserRole.ORGANIZER, UserRole.ADMIN):
            raise ForbiddenError(
                "Access denied. Only Organizers and Admins can check active count."
            )
        return EventRepository.count_active_for_creator(user.id, utcnow())

    @staticmethod
    def get_organizer_analytics(user):
        events = EventRepository.get_events_for_user(user.id)
        summary, performance = _summarize(events)
        return {
            "events": [event.to_dict() for event in events],
            "analytics": {"summary": summary, "performance": performance},
        }

    @staticmethod
    def get_organizer_analytics_for(organizer_id: int, viewer):
        if not viewer or (not viewer.is_admin and viewer.id != organizer_id):
            raise ForbiddenError()
        organizer = UserRepository.find_by_id(organizer_id)
        if not organizer:
            raise UserNotFoundError()

        events = EventRepository.get_events_for_user(organizer_id)
        summary, performance = _summarize(events)

        now = utcnow()
        upcoming = [
            event
            for event in events
            if event.status == EventStatus.APPROVED and ensure_utc(event.date) > now
        ]
        upcoming.sort(key=lambda event: ensure_utc(event.date))
        upcoming = upcoming[:MAX_UPCOMING_EVENTS]
        summary["upcoming_events"] = len(upcoming)
        summary["recent_events"] = EventRepository.count_created_since(
            now - timedelta(days=7), user_id=organizer_id
        )

        return {
            "organizer": organizer.to_summary(),
            "summary": summary,
            "performance": performance,
            "upcoming_events": [
                {
                    "id": event.id,
                    "title": event.title,
                    "date": ensure_utc(event.date).isoformat(),
                    "location": event.location,
                    "max_attendees": event.max_attendees,
                    "current_attendees": event.current_attendees,
                    "fill_rate": _fill_rate(event),
                }
                for event in upcoming
            ],
        }

    @staticmethod
    def get_comprehensive_analytics(admin):
        if not admin or not admin.is_admin:
            raise ForbiddenError("Access denied. Admin privileges required.")

        now = utcnow()
        week_ago = now - timedelta(days=7)
        event_stats = EventRepository.count_by_status()
        user_stats = UserRepository.count_by_role()
        recent_activity = {
            "events": EventRepository.count_created_since(week_ago),
            "registrations": RegistrationRepository.count_created_since(week_ago),
        }

        total_events = sum(event_stats.values())
        total_users = sum(user_stats.values())
        approved_events = event_stats.get(EventStatus.APPROVED.value, 0)
        active_users = UserRepository.count_active()
        approval_rate = _percent(approved_events, total_events)
        user_activity_rate = _percent(active_users, total_users)

        recent_events = recent_activity["events"]
        bonus = 20 if recent_events > 5 else 10 if recent_events > 2 else 0
        health_score = min(100, int(0.4 * approval_rate + 0.4 * user_activity_rate + bonus + 0.5))

        recommendations = []
        if approval_rate < 60:
            recommendations.append("Low approval rate: Review pending events more frequently.")
        if user_activity_rate < 70:
            recommendations.append("Low user activity: Consider engaging inactive users.")
        if total_events < 10:
            recommendations.append("Low event count: Encourage more event creation.")
        if recent_events < 2:
            recommendations.append("Low recent activity: Promote event creation to users.")

        top_events = [
            {
                "id": event.id,
                "title": event.title,
                "date": ensure_utc(event.date).isoformat(),
                "location": event.location,
                "category": event.category.value,
                "max_attendees": event.max_attendees,
                "current_attendees": event.current_attendees,
                "fill_rate": _fill_rate(event),
            }
            for event in EventRepository.top_filled_events(HIGH_FILL_RATE, TOP_EVENTS_LIMIT)
        ]

        trends = RegistrationRepository.daily_counts_since(now - timedelta(days=30))
        trend_total = sum(day["count"] for day in trends)
        peak_day = {"date": "", "count": 0}
        for day in trends:
            if day["count"] > peak_day["count"]:
                peak_day = day

        current_app.logger.info(
            f"Comprehensive analytics computed for admin {admin.id}: health={health_score}"
        )
        return {
            "timestamp": now.isoformat(),
            "summary": {
                "total_events": total_events,
                "total_users": total_users,
                "approved_events": approved_events,
                "pending_events": event_stats.get(EventStatus.PENDING.value, 0),
                "active_users": active_users,
                "approval_rate": approval_rate,
                "user_activity_rate": user_activity_rate,
                "system_health_score": health_score,
                "weekly_growth": recent_events,
                "recent_registrations": recent_activity["registrations"],
            },
            "statistics": {
                "event_stats": event_stats,
                "user_stats": user_stats,
                "recent_activity": recent_activity,
                "popular_categories": EventRepository.top_categories(),
            },
            "performance": {
                "top_events": top_events,
                "total_top_events": len(top_events),
            },
            "trends": {
                "registration_trends": trends,
                "daily_average": int(trend_total / len(trends) + 0.5) if trends else 0,
                "peak_day": peak_day,
                "total_registrations": trend_total,
            },
            "insights": {
                "recommendations": recommendations,
                "health_level": _health_level(health_score),
            },
        }
