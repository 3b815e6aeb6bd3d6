"""Render a DailySummary as the Telegram message text."""

from debrief.models.summary import DailySummary


def format_debrief(summary: DailySummary) -> str:
    lines = [
        "📝 Daily Debrief",
        f"✅ Today’s Summary: {summary.completed_tasks}/{summary.total_tasks} tasks completed",
        f"🔥 Streak: {summary.streak} days",
    ]
    if summary.missed_tasks:
        lines.append("📌 Missed Tasks:")
        lines.extend(f"- {t.title} → {t.rescheduled_time}" for t in summary.missed_tasks)
    if summary.next_day_priorities:
        lines.append("🎯 Top 3 Priorities for Tomorrow:")
        lines.extend(
            f"{i}. {priority}"
            for i, priority in enumerate(summary.next_day_priorities, start=1)
        )
    return "".join(f"{line}\n" for line in lines)
