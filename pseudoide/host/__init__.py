"""PseudoIDE Workbench — Host collaborators (projects, files, execution, terminal)."""

from pseudoide.host.base import BaseHost, ExecutionError, FileEntry, HostError, ProjectData
from pseudoide.host.local import LocalHost

__all__ = ["BaseHost", "ExecutionError", "FileEntry", "HostError", "LocalHost", "ProjectData"]
