from typing import Annotated

from fastapi import Depends, Request

from process_status.tracking.tracker import LifecycleTracker

def get_tracker(request: Request) -> LifecycleTracker:
    return request.app.state.tracker

# Dependency for the process-wide tracker built in the app lifespan
Tracker = Annotated[LifecycleTracker, Depends(get_tracker)]
