"""Chart pipeline registry. Each chart aggregates and lays out its own copy of the data."""

import numpy as np

from artistdash.charts import bar, parallel, scatter, stream
from artistdash.charts.base import ChartPipeline
from artistdash.config import Settings


def dashboard_pipelines(
    settings: Settings, rng: np.random.Generator | None = None
) -> tuple[ChartPipeline, ...]:
    """Bar, scatter, and parallel-coordinates pipelines, in layout order."""
    return (
        bar.pipeline(),
        scatter.pipeline(threshold=settings.popularity_threshold, rng=rng),
        parallel.pipeline(threshold=settings.popularity_threshold),
    )


def all_pipelines(
    settings: Settings, rng: np.random.Generator | None = None
) -> tuple[ChartPipeline, ...]:
    """Dashboard pipelines plus the streamgraph."""
    return dashboard_pipelines(settings, rng=rng) + (stream.pipeline(),)
