from .export import (
    EXPORT_FORMATS, evaluations_to_records, evaluations_to_frame, summarize,
    render_document, write_report
)

__all__ = [
    'EXPORT_FORMATS', 'evaluations_to_records', 'evaluations_to_frame', 'summarize',
    'render_document', 'write_report'
]
