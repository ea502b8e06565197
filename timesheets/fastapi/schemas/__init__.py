from timesheets.fastapi.schemas.user import (
    UserBase,
    UserCreate,
    UserRead,
    UserCreateResponse,
    UserLogin,
    TokenResponse
)
from timesheets.fastapi.schemas.project import (
    ProjectBase,
    ProjectCreate,
    ProjectUpdate,
    ProjectRead,
    AssignedProjectRead,
    ProjectAssign,
    ProjectReference,
    ProjectAssignResponse,
    MessageResponse
)
from timesheets.fastapi.schemas.time_entry import (
    ClockInRequest,
    ClockOutRequest,
    TimeEntryRead,
    ClockActionResponse
)
from timesheets.fastapi.schemas.timesheet import (
    TimesheetHours,
    TimesheetSave,
    TimesheetRead,
    AdminTimesheetRead,
    TimesheetSaveResponse,
    ProjectCompletionRead,
    CompleteProjectResponse,
    SyncResult,
    SyncResponse
)
