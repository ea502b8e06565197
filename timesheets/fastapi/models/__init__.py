from timesheets.fastapi.models.user import User, UserRole
from timesheets.fastapi.models.project import Project, UserProject, AssignmentStatus
from timesheets.fastapi.models.time_entry import TimeEntry, TimeEntryStatus
from timesheets.fastapi.models.timesheet import Timesheet, TimesheetStatus, ProjectCompletion
