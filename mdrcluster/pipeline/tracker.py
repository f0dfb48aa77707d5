import time
from typing import Callable, Dict, List, Optional

ProgressCallback = Callable[[str, float], None]


class ProgressTracker(object):
    """Collects per-stage durations of one pipeline run and reports progress.

    Each run gets its own tracker, owned by whoever triggers the run.
    """

    def __init__(self, on_progress: Optional[ProgressCallback] = None):
        self.on_progress = on_progress
        self.stats: List[Dict] = []

    def __call__(self, stage: str, message: str, progress: float):
        return self.start(stage, message, progress)

    def start(self, stage: str, message: str, progress: float):
        stage_stats = {
            'stage': stage,
            'message': message,
            'progress': progress,
        }
        self.stats.append(stage_stats)
        if self.on_progress:
            self.on_progress(message, progress)

        start_time = time.perf_counter()

        def done(**kwargs):
            end_time = time.perf_counter()
            stage_stats['dur'] = int((end_time - start_time) * 1000)
            stage_stats.update(kwargs)

        return done

    def finish(self, message: str = 'Done.'):
        self.start('done', message, 1.0)()

    @property
    def usage(self) -> List[Dict]:
        return [{'model': 'pipeline', 'stats': self.stats}]
