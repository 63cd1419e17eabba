"""Services for commitcoach.

This package provides:
- suggest: SuggestService
- commit: CommitService
- app: App, build_app
"""

from commitcoach.services.suggest import SuggestService
from commitcoach.services.commit import CommitService
from commitcoach.services.app import App, build_app

__all__ = ["SuggestService", "CommitService", "App", "build_app"]
