"""Workspace scanning: enumeration, git metadata extraction and orchestration."""

from thandie.scanner.enumerator import list_top_level_dirs
from thandie.scanner.errors import EnumerationError, ScanCancelledError, ScanError
from thandie.scanner.events import CompleteEvent, EventChannel, LogEvent, ProgressEvent, ScanEvent
from thandie.scanner.git_metadata import build_status_summary, collect_repo_metadata
from thandie.scanner.models import DirectoryRecord, RepoMetadata, Snapshot
from thandie.scanner.orchestrator import ScanHandle, ScanOrchestrator, ScanResult, scan_workspace, start_scan
from thandie.scanner.state import ScanState

__all__ = [
	"CompleteEvent",
	"DirectoryRecord",
	"EnumerationError",
	"EventChannel",
	"LogEvent",
	"ProgressEvent",
	"RepoMetadata",
	"ScanCancelledError",
	"ScanError",
	"ScanEvent",
	"ScanHandle",
	"ScanOrchestrator",
	"ScanResult",
	"ScanState",
	"Snapshot",
	"build_status_summary",
	"collect_repo_metadata",
	"list_top_level_dirs",
	"scan_workspace",
	"start_scan",
]
