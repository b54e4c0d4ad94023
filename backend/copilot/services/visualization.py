"""
Visualization session and dataset export.

Holds the dataset currently shown in the chart panel, the
selected chart type, and the panel visibility.  Also turns a
dataset into chart-ready series and into the JSON used for
download, clipboard and message embedding.
"""

import json
import logging
import re
import unicodedata
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from copilot.schemas import ChartSeries, ChartType, Dataset, Notice

logger = logging.getLogger(__name__)

EXCLUDED_METRIC_KEYS = {"year", "name", "id"}
MAX_CARTESIAN_SERIES = 3
DEFAULT_TITLE = "Data Visualization"


def metrics(dataset: Dataset) -> List[str]:
    """
    Numeric fields of the first record, in key order.

    ``year``, ``name`` and ``id`` are never metrics.  String
    values (e.g. the general agent's ``growth``) are skipped.

    Parameters:
        dataset (Dataset): Dataset to inspect.

    Returns:
        list[str]: Metric field names.
    """
    if not dataset.data:
        return []
    first = dataset.data[0]
    return [
        key for key, value in first.items()
        if key not in EXCLUDED_METRIC_KEYS
        and isinstance(value, (int, float))
        and not isinstance(value, bool)
    ]


def chart_series(dataset: Dataset, chart_type: ChartType) -> ChartSeries:
    """
    Project a dataset onto a chart type.

    Line and bar charts plot at most three metrics over the
    year axis.  Pie charts show one slice per metric, valued
    at the metric's sum over all periods.

    Parameters:
        dataset (Dataset): Active dataset.
        chart_type (str): ``line``, ``bar`` or ``pie``.

    Returns:
        ChartSeries: Chart-ready data.
    """
    available = metrics(dataset)
    if chart_type == "pie":
        slices = [
            {
                "name": metric,
                "value": sum(
                    row.get(metric) or 0 for row in dataset.data
                ),
            }
            for metric in available
        ]
        return ChartSeries(
            chart_type=chart_type,
            metrics=available,
            series=available,
            slices=slices,
        )

    series = available[:MAX_CARTESIAN_SERIES]
    points = [
        {"year": row.get("year"), **{m: row.get(m) for m in series}}
        for row in dataset.data
    ]
    return ChartSeries(
        chart_type=chart_type,
        metrics=available,
        series=series,
        points=points,
    )


# ----- export ---------------------------------------------------------


def to_json(dataset: Dataset) -> str:
    """Serialise a dataset as pretty-printed JSON (2-space indent)."""
    return json.dumps(
        dataset.model_dump(), indent=2, ensure_ascii=False,
    )


def fenced_json(dataset: Dataset) -> str:
    """Wrap the dataset JSON in a fenced ``json`` code block."""
    return f"```json\n{to_json(dataset)}\n```"


def export_filename(title: Optional[str]) -> str:
    """
    Build the download filename for a dataset.

    ``"Diabetes Clinical Data"`` →
    ``"diabetes-clinical-data-data.json"``.
    """
    slug = re.sub(r"\s+", "-", (title or DEFAULT_TITLE).lower())
    return f"{slug}-data.json"


def ascii_filename(filename: str) -> str:
    """ASCII-only fallback for a download filename (accents folded)."""
    folded = (
        unicodedata.normalize("NFKD", filename)
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    folded = re.sub(r"[^A-Za-z0-9._-]+", "-", folded)
    folded = re.sub(r"-{2,}", "-", folded).strip("-.")
    return folded or export_filename(None)


def content_disposition(filename: str) -> str:
    """
    ``Content-Disposition`` value for a JSON download.

    Header values must be latin-1, so the plain ``filename`` is
    an ASCII fallback and the exact name goes in the RFC 5987
    ``filename*`` parameter.
    """
    return (
        f'attachment; filename="{ascii_filename(filename)}"; '
        f"filename*=UTF-8''{quote(filename, safe='')}"
    )


# ----- session --------------------------------------------------------


class VisualizationSession:
    """
    Chart panel state for one chat session.

    Independent from the chat history: loading a new dataset
    replaces the previous one without touching visibility.
    """

    def __init__(self):
        self.dataset: Optional[Dataset] = None
        self.chart_type: ChartType = "line"
        self.visible: bool = False

    def load(self, dataset: Dataset) -> None:
        """Make ``dataset`` the active dataset."""
        self.dataset = dataset

    def toggle(self) -> Optional[Notice]:
        """
        Show or hide the chart panel.

        Returns:
            Notice | None: Warning when there is no dataset to
            show; state is unchanged in that case.
        """
        if self.dataset is None:
            logger.info("[visualization] toggle with no dataset")
            return Notice(
                title="No Data Available",
                description=(
                    "Ask for data in JSON format first, then open "
                    "the visualization."
                ),
                variant="warning",
            )
        self.visible = not self.visible
        return None

    def set_chart_type(self, chart_type: ChartType) -> None:
        self.chart_type = chart_type

    def chart(self) -> Optional[ChartSeries]:
        """Series for the active dataset and chart type."""
        if self.dataset is None:
            return None
        return chart_series(self.dataset, self.chart_type)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "visible": self.visible,
            "chart_type": self.chart_type,
            "dataset": self.dataset,
            "chart": self.chart(),
        }
