from aawaaj_admin.models.audit import AuditLog
from aawaaj_admin.models.profile import Profile
from aawaaj_admin.models.submission import (
	STATUS_BEARING_TYPE,
	Submission,
	SubmissionStatus,
	SubmissionType,
)

__all__ = [
	"AuditLog",
	"Profile",
	"STATUS_BEARING_TYPE",
	"Submission",
	"SubmissionStatus",
	"SubmissionType",
]
