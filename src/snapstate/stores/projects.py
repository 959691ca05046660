"""ProjectStore — projects, their tasks and timelines, daily check-ins, calendar view.

Dates are ISO strings: check-ins use "YYYY-MM-DD", the calendar month is
"YYYY-MM". "Today" is derived from the injected clock in UTC.
"""

from __future__ import annotations

import time
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Mapping

from snapstate.store import Store
from snapstate.stores.listing import count_by, matches_search

SEARCH_FIELDS = ("name", "description", "project_chain")
STREAK_WINDOW_DAYS = 365


def default_state(current_month: str | None = None) -> dict:
    return {
        "projects": (),
        "tasks": {},
        "timelines": {},
        "checkIns": {},
        "filters": {"search": "", "chain": "all", "type": "all", "status": "all"},
        "ui": {
            "loading": False,
            "selectedProjectId": None,
            "calendarView": {"currentMonth": current_month, "selectedDate": None},
        },
        "stats": {
            "totalProjects": 0,
            "activeProjects": 0,
            "completedTasks": 0,
            "todayCheckIns": 0,
            "chainCounts": {},
        },
    }


def _check_in_key(task_id, day: str) -> str:
    return f"task_{task_id}_date_{day}"


def _month_of(month: str | date) -> str:
    return month.strftime("%Y-%m") if isinstance(month, date) else month


class ProjectStore(Store):
    def __init__(
        self,
        initial_state: Mapping[str, Any] | None = None,
        *,
        clock: Callable[[], float] = time.time,
        max_history: int = 50,
    ) -> None:
        self._clock = clock
        if initial_state is None:
            initial_state = default_state(current_month=self.today()[:7])
        super().__init__(initial_state, max_history=max_history)

    def today(self) -> str:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc).date().isoformat()

    # --- Projects, tasks, timelines ---

    def set_projects(self, projects: Iterable[Mapping]) -> None:
        projects = tuple(projects)

        def _write(write):
            write("projects", projects)
            write("stats.totalProjects", len(projects))
            write("stats.activeProjects", sum(1 for p in projects if p.get("status") == "active"))
            write("stats.chainCounts", count_by(projects, "project_chain"))

        self.batch(_write)

    def set_project_tasks(self, project_id, tasks: Iterable[Mapping]) -> None:
        with self.transaction() as write:
            write(("tasks", str(project_id)), tuple(tasks))
            write("stats.completedTasks", self._count_completed(write.get("tasks", {})))

    def set_project_timeline(self, project_id, timeline: Iterable[Mapping]) -> None:
        self.set(("timelines", str(project_id)), tuple(timeline))

    def select_project(self, project_id) -> None:
        self.set("ui.selectedProjectId", project_id)

    def get_selected_project(self) -> Mapping | None:
        project_id = self.get("ui.selectedProjectId")
        if project_id is None:
            return None
        return next((p for p in self.get("projects", ()) if p.get("id") == project_id), None)

    def get_project_tasks(self, project_id) -> tuple:
        return self.get(("tasks", str(project_id)), ())

    def get_project_timeline(self, project_id) -> tuple:
        return self.get(("timelines", str(project_id)), ())

    def update_task_status(self, task_id, status: str) -> bool:
        """Set status on the task wherever it lives. Returns False if no task has that id."""
        tasks = self.get("tasks", {})
        for project_id, project_tasks in tasks.items():
            if any(t.get("id") == task_id for t in project_tasks):
                updated = tuple({**t, "status": status} if t.get("id") == task_id else t
                                for t in project_tasks)
                with self.transaction() as write:
                    write(("tasks", project_id), updated)
                    write("stats.completedTasks", self._count_completed(write.get("tasks", {})))
                return True
        return False

    @staticmethod
    def _count_completed(tasks: Mapping) -> int:
        return sum(1 for ts in tasks.values() for t in ts if t.get("status") == "completed")

    # --- Check-ins ---

    def add_check_in(self, task_id, day: str | None = None) -> None:
        day = day or self.today()
        with self.transaction() as write:
            write(("checkIns", _check_in_key(task_id, day)),
                  {"taskId": task_id, "date": day, "timestamp": self._clock()})
            if day == self.today():
                today = self.today()
                write("stats.todayCheckIns",
                      sum(1 for c in write.get("checkIns", {}).values() if c["date"] == today))

    def has_checked_in(self, task_id, day: str) -> bool:
        return self.get(("checkIns", _check_in_key(task_id, day))) is not None

    def get_today_check_ins(self) -> list:
        today = self.today()
        return [c for c in self.get("checkIns", {}).values() if c["date"] == today]

    def get_month_check_ins(self, month: str | date) -> dict:
        """Check-ins in the given month ("YYYY-MM" or a date), grouped by day."""
        prefix = _month_of(month) + "-"
        by_day: dict = {}
        for check_in in self.get("checkIns", {}).values():
            if check_in["date"].startswith(prefix):
                by_day.setdefault(check_in["date"], []).append(check_in)
        return by_day

    # --- Filters & calendar ---

    def set_filters(self, **filters: Any) -> None:
        self.set_state({"filters": {**self.get("filters", {}), **filters}})

    def get_filtered_projects(self) -> list:
        filters = self.get("filters", {})
        projects = list(self.get("projects", ()))

        search = filters.get("search")
        if search:
            projects = [p for p in projects if matches_search(p, search, SEARCH_FIELDS)]
        for field, key in (("chain", "project_chain"), ("type", "type"), ("status", "status")):
            wanted = filters.get(field)
            if wanted and wanted != "all":
                projects = [p for p in projects if p.get(key) == wanted]
        return projects

    def set_calendar_view(self, **view: Any) -> None:
        if isinstance(view.get("currentMonth"), date):
            view["currentMonth"] = _month_of(view["currentMonth"])
        self.set("ui.calendarView", {**self.get("ui.calendarView", {}), **view})

    # --- Stats ---

    def get_project_stats(self, project_id) -> dict:
        tasks = self.get_project_tasks(project_id)
        completed = sum(1 for t in tasks if t.get("status") == "completed")
        daily_ids = [t["id"] for t in tasks if t.get("type") == "daily"]
        return {
            "totalTasks": len(tasks),
            "completedTasks": completed,
            "dailyTasks": len(daily_ids),
            "timedTasks": sum(1 for t in tasks if t.get("type") == "timed"),
            "completionRate": round(completed / len(tasks) * 100, 1) if tasks else 0.0,
            "consecutiveDays": self._streak(daily_ids),
        }

    def _streak(self, task_ids) -> int:
        # Today may still be open: a streak ending yesterday counts.
        start = date.fromisoformat(self.today())
        streak = 0
        for offset in range(STREAK_WINDOW_DAYS):
            day = (start - timedelta(days=offset)).isoformat()
            if any(self.has_checked_in(task_id, day) for task_id in task_ids):
                streak += 1
            elif offset > 0:
                break
        return streak
