"""
Export of group evaluations to tabular and document formats.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Sequence

import pandas as pd
import yaml

from ..core.base import GroupEvaluation

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ('json', 'yaml', 'csv')

FRAME_COLUMNS = [
    'instance_type', 'availability_zone', 'region', 'count', 'is_spot',
    'spot_price', 'on_demand_price', 'savings_percentage', 'status',
    'replacement_rank', 'replacement_instance_type', 'replacement_spot_price',
    'savings_per_node_per_hour', 'savings_per_group_per_hour', 'error',
]


def evaluations_to_records(evaluations: Sequence[GroupEvaluation]) -> List[Dict[str, Any]]:
    """Flatten evaluations: one row per replacement, or one row for a group without any."""
    records = []

    for evaluation in evaluations:
        base = {
            **evaluation.group.to_dict(),
            'spot_price': evaluation.spot_price,
            'on_demand_price': evaluation.on_demand_price,
            'savings_percentage': round(evaluation.savings_percentage, 2),
            'status': evaluation.status.value,
            'error': evaluation.replacement_error or evaluation.pricing_error,
        }

        if not evaluation.replacements:
            records.append({
                **base,
                'replacement_rank': None,
                'replacement_instance_type': None,
                'replacement_spot_price': None,
                'savings_per_node_per_hour': None,
                'savings_per_group_per_hour': None,
            })
            continue

        for rank, option in enumerate(evaluation.replacements, start=1):
            records.append({
                **base,
                'replacement_rank': rank,
                'replacement_instance_type': option.instance_type,
                'replacement_spot_price': option.spot_price,
                'savings_per_node_per_hour': option.savings_per_node_per_hour,
                'savings_per_group_per_hour': option.savings_per_group_per_hour,
            })

    return records


def evaluations_to_frame(evaluations: Sequence[GroupEvaluation]) -> pd.DataFrame:
    """Evaluations as a DataFrame with a fixed column order"""
    return pd.DataFrame(evaluations_to_records(evaluations), columns=FRAME_COLUMNS)


def summarize(evaluations: Sequence[GroupEvaluation]) -> Dict[str, Any]:
    """Totals across all evaluated groups"""
    return {
        'total_groups': len(evaluations),
        'total_nodes': sum(e.group.count for e in evaluations),
        'groups_with_replacements': sum(1 for e in evaluations if e.replacements),
        'groups_failed': sum(1 for e in evaluations if e.replacement_error or e.pricing_error),
        'best_savings_per_hour': sum(e.get_best_savings_per_hour() for e in evaluations),
    }


def render_document(evaluations: Sequence[GroupEvaluation], fmt: str) -> str:
    """Render evaluations as a json, yaml or csv document"""
    if fmt == 'csv':
        return evaluations_to_frame(evaluations).to_csv(index=False)

    document = {
        'generated_at': datetime.now(timezone.utc).isoformat(),
        'summary': summarize(evaluations),
        'groups': [e.to_dict() for e in evaluations],
    }

    if fmt == 'json':
        return json.dumps(document, indent=2)
    if fmt == 'yaml':
        return yaml.safe_dump(document, default_flow_style=False, sort_keys=False)

    raise ValueError(f"Unsupported export format: {fmt}")


def write_report(evaluations: Sequence[GroupEvaluation], fmt: str, path: Path) -> Path:
    """Write evaluations to ``path`` in the given format"""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        f.write(render_document(evaluations, fmt))
    logger.info(f"Wrote {fmt} report for {len(evaluations)} node groups to {path}")
    return path
